"""Compute domain router.

Demo endpoint that offloads a CPU-heavy job from the request loop.
"""

import os

from fastapi import APIRouter
from pydantic import BaseModel

from fitback.compute.pool import ComputePoolDep
from fitback.compute.tasks import heavy_computation
from fitback.core.constants import CommonResponses, Routes
from fitback.core.deps import SettingsDep

router = APIRouter(
    prefix=Routes.COMPUTE.prefix,
    tags=[Routes.COMPUTE.tag],
    responses={**CommonResponses.UNAVAILABLE},
)


class HeavyTaskResponse(BaseModel):
    message: str
    result: int
    pid: int


@router.get("/heavy-task", response_model=HeavyTaskResponse)
async def heavy_task(pool: ComputePoolDep, settings: SettingsDep):
    """Run the heavy computation in the compute pool."""
    result = await pool.run(heavy_computation, settings.heavy_task_iterations)
    return HeavyTaskResponse(
        message="Computation complete", result=result, pid=os.getpid()
    )
