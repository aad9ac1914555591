"""Exceptions raised by deprank."""

from __future__ import annotations


class DeprankError(Exception):
    """Base class for all deprank failures."""


class DiscoveryError(DeprankError):
    """The module graph provider could not produce a graph."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, reason)
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


class LineCountError(DeprankError):
    """A source file could not be read while counting its lines."""

    def __init__(self, path: str, reason: str) -> None:
        # args must mirror the signature so the error survives pickling
        # across the process pool.
        super().__init__(path, reason)
        self.path = path
        self.reason = reason

    def __str__(self) -> str:
        return f"{self.path}: cannot count lines ({self.reason})"


class ConvergenceError(DeprankError):
    """Power iteration hit its iteration ceiling without converging."""

    def __init__(self, iterations: int, delta: float) -> None:
        super().__init__(iterations, delta)
        self.iterations = iterations
        self.delta = delta

    def __str__(self) -> str:
        return (
            f"PageRank did not converge after {self.iterations} iterations "
            f"(delta={self.delta:.3g})"
        )
