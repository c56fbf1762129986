"""
File naming conventions for intermediate and reduce output files.

Both functions are the defaults; callers may inject their own naming
callables with the same signatures.
"""

import os
from typing import Callable

FILE_PREFIX = 'mrtmp.'

IntermediateNamer = Callable[[str, int, int], str]
OutputNamer = Callable[[str, int], str]


def reduce_name(job_name: str, map_task: int, reduce_task: int) -> str:
    """Name of the file map task `map_task` wrote for reduce task `reduce_task`"""
    return f"{FILE_PREFIX}{job_name}-{map_task}-{reduce_task}"


def merge_name(job_name: str, reduce_task: int) -> str:
    """Name of the output file written by reduce task `reduce_task`"""
    return f"{FILE_PREFIX}{job_name}-res-{reduce_task}"


def in_directory(directory: str, namer: Callable[..., str]) -> Callable[..., str]:
    """Wrap a naming function so its names resolve inside `directory`"""
    def named(*args) -> str:
        return os.path.join(directory, namer(*args))
    return named
