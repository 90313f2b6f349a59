"""Reentrancy guard"""
from .errors import ReentrancyViolation

class ReentrancyGuard:
    """In-flight flag around every mutating pool call.

    Used as a context manager so the flag is released on every exit path,
    including failures.
    """

    def __init__(self):
        self._entered = False

    @property
    def entered(self) -> bool:
        return self._entered

    def __enter__(self) -> "ReentrancyGuard":
        if self._entered:
            raise ReentrancyViolation("Pool operation already in flight")
        self._entered = True
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._entered = False
        return False
