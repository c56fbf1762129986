"""
Error taxonomy for reduce tasks.

Every error here is fatal for the reduce task that raised it; none of them
is retried at this layer.
"""

from typing import Optional


class ReduceTaskError(Exception):
    """Base class for all reduce task failures"""


class SourceUnavailableError(ReduceTaskError):
    """An intermediate file for some map task is missing or cannot be opened"""

    def __init__(self, path: str, map_task: Optional[int] = None, reason: str = ''):
        self.path = path
        self.map_task = map_task
        self.reason = reason
        message = f"Intermediate file unavailable: {path}"
        if map_task is not None:
            message += f" (map task {map_task})"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class DecodeCorruptionError(ReduceTaskError):
    """An intermediate file cannot be parsed into a record stream"""

    def __init__(self, path: str, offset: int, reason: str):
        self.path = path
        self.offset = offset
        self.reason = reason
        super().__init__(f"Corrupt record stream in {path} at offset {offset}: {reason}")


class DestinationUnavailableError(ReduceTaskError):
    """The output file cannot be created, written or published"""

    def __init__(self, path: str, reason: str = ''):
        self.path = path
        self.reason = reason
        message = f"Cannot write output file: {path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class AggregationError(ReduceTaskError):
    """The user's reduce function raised or returned a non-string value"""

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Reduce function failed for key {key!r}: {reason}")
