"""CPU-bound tasks that run in the compute pool's child processes.

Functions here must be importable at module level so they can be pickled.
"""


def heavy_computation(iterations: int) -> int:
    """Sum the integers below ``iterations`` the slow way."""
    total = 0
    for i in range(iterations):
        total += i
    return total
