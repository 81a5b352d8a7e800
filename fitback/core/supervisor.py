"""Multi-process supervisor.

The supervisor binds one listening socket and starts N worker processes, each
running its own uvicorn server on that socket; the kernel spreads incoming
connections across them. Workers that exit while the supervisor is running
are replaced so the pool returns to N.

Restarts are rate-limited twice:

- per slot, repeated crashes back off exponentially (the first restart after a
  healthy run is immediate);
- across the pool, more than ``max_restarts`` restarts inside
  ``restart_window`` seconds is treated as a crash loop and stops the
  supervisor.
"""

from __future__ import annotations

import logging
import multiprocessing
import os
import signal
import socket
import threading
import time
from collections import deque
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from fitback.core.retry import calculate_delay
from fitback.core.settings import Settings
from fitback.db.engine import build_engine, init_db

logger = logging.getLogger(__name__)

APP_PATH = "fitback.main:app"
POLL_INTERVAL = 0.5


@dataclass(frozen=True)
class SupervisorConfig:
    host: str = "0.0.0.0"
    port: int = 5000
    workers: int = 1
    backoff_base: float = 0.5
    backoff_max: float = 30.0
    max_restarts: int = 10
    restart_window: float = 60.0
    shutdown_timeout: float = 10.0
    app_path: str = APP_PATH
    database_url: str | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        host: str | None = None,
        port: int | None = None,
        workers: int | None = None,
    ) -> SupervisorConfig:
        """Build a config from settings; explicit arguments win."""
        return cls(
            host=host or settings.host,
            port=settings.port if port is None else port,
            workers=workers or settings.workers or os.cpu_count() or 1,
            backoff_base=settings.supervisor_backoff_base,
            backoff_max=settings.supervisor_backoff_max,
            max_restarts=settings.supervisor_max_restarts,
            restart_window=settings.supervisor_restart_window,
            database_url=settings.database_url,
        )


@dataclass
class WorkerSlot:
    """One of the N worker positions and the process currently filling it."""

    index: int
    process: Any = None
    started_at: float = 0.0
    failures: int = 0
    restart_at: float | None = None


def create_listen_socket(host: str, port: int, backlog: int = 2048) -> socket.socket:
    """Bind the shared listening socket handed to every worker."""
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    sock = socket.socket(family, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    if hasattr(socket, "SO_REUSEPORT"):
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
    sock.bind((host, port))
    sock.listen(backlog)
    sock.set_inheritable(True)
    return sock


def run_worker(sock: socket.socket | None, config: SupervisorConfig) -> None:
    """Worker process entry point: serve the app on the shared socket."""
    import uvicorn

    from fitback.core.logging import configure_logging

    configure_logging()
    uv_config = uvicorn.Config(
        config.app_path,
        host=config.host,
        port=config.port,
        log_config=None,
        timeout_graceful_shutdown=int(config.shutdown_timeout),
    )
    server = uvicorn.Server(uv_config)
    server.run(sockets=[sock] if sock is not None else None)


class Supervisor:
    def __init__(
        self,
        config: SupervisorConfig,
        target: Callable[..., None] = run_worker,
        context: Any = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self._target = target
        self._context = context or multiprocessing.get_context("spawn")
        self._clock = clock
        self._socket: socket.socket | None = None
        self._should_exit = threading.Event()
        self._restarts: deque[float] = deque()
        self.crash_loop = False
        self.slots = [WorkerSlot(index=i) for i in range(config.workers)]

    @property
    def should_exit(self) -> bool:
        return self._should_exit.is_set()

    def alive_count(self) -> int:
        return sum(
            1 for slot in self.slots if slot.process and slot.process.is_alive()
        )

    def request_shutdown(self, *_: Any) -> None:
        self._should_exit.set()

    def run(self) -> int:
        """Serve until a shutdown signal or a crash loop; return an exit code."""
        self.create_tables()
        self._socket = create_listen_socket(self.config.host, self.config.port)
        logger.info(
            "Supervisor %d listening on %s:%d with %d workers",
            os.getpid(),
            self.config.host,
            self.config.port,
            self.config.workers,
        )
        for sig in (signal.SIGINT, signal.SIGTERM):
            signal.signal(sig, self.request_shutdown)

        try:
            self.start_workers()
            while not self._should_exit.wait(POLL_INTERVAL):
                self.check_workers()
        finally:
            self.terminate_all()
            self._socket.close()
            self._socket = None

        return 1 if self.crash_loop else 0

    def create_tables(self) -> None:
        """Create missing tables once, before any worker starts.

        Workers repeat the check at startup; with every table present it
        issues no DDL.
        """
        if self.config.database_url is None:
            return
        engine = build_engine(self.config.database_url)
        try:
            init_db(engine)
        finally:
            engine.dispose()

    def start_workers(self) -> None:
        for slot in self.slots:
            self._spawn(slot)

    def _spawn(self, slot: WorkerSlot) -> None:
        process = self._context.Process(
            target=self._target,
            args=(self._socket, self.config),
            name=f"fitback-worker-{slot.index}",
        )
        process.start()
        slot.process = process
        slot.started_at = self._clock()
        slot.restart_at = None
        logger.info(
            "Worker %d started (slot %d)",
            process.pid,
            slot.index,
            extra={"worker_pid": process.pid},
        )

    def check_workers(self) -> None:
        """Replace dead workers, honoring backoff and the crash-loop guard."""
        now = self._clock()
        for slot in self.slots:
            if self._should_exit.is_set():
                return
            process = slot.process
            if process is None or process.is_alive():
                continue

            if slot.restart_at is None:
                self._schedule_restart(slot, now)
                continue

            if now >= slot.restart_at:
                self._spawn(slot)

    def _schedule_restart(self, slot: WorkerSlot, now: float) -> None:
        process = slot.process
        logger.warning(
            "Worker %d died (exit code %s)",
            process.pid,
            process.exitcode,
            extra={"worker_pid": process.pid, "exit_code": process.exitcode},
        )

        # A worker that ran for a full window is considered healthy again.
        if now - slot.started_at >= self.config.restart_window:
            slot.failures = 0

        self._restarts.append(now)
        while self._restarts and now - self._restarts[0] > self.config.restart_window:
            self._restarts.popleft()
        if len(self._restarts) > self.config.max_restarts:
            logger.error(
                "Crash loop: %d restarts within %.0fs, shutting down",
                len(self._restarts),
                self.config.restart_window,
            )
            self.crash_loop = True
            self._should_exit.set()
            return

        if slot.failures == 0:
            delay = 0.0
        else:
            delay = calculate_delay(
                slot.failures - 1, self.config.backoff_base, self.config.backoff_max
            )
        slot.failures += 1
        slot.restart_at = now + delay
        if delay:
            logger.info("Restarting slot %d in %.2fs", slot.index, delay)
        else:
            self._spawn(slot)

    def terminate_all(self) -> None:
        """Ask every worker to stop, then kill the ones that don't."""
        running = [
            slot.process
            for slot in self.slots
            if slot.process is not None and slot.process.is_alive()
        ]
        for process in running:
            process.terminate()

        deadline = self._clock() + self.config.shutdown_timeout
        for process in running:
            process.join(max(0.0, deadline - self._clock()))
            if process.is_alive():
                logger.warning(
                    "Worker %d did not stop in time, killing",
                    process.pid,
                    extra={"worker_pid": process.pid},
                )
                process.kill()
                process.join()
        logger.info("Supervisor %d stopped", os.getpid())
