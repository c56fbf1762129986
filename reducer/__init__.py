"""
Reduce stage of a MapReduce job: merges the intermediate files of every map
task for one partition into a single key-sorted output file.
"""

from reducer.config import ReduceSettings
from reducer.errors import (AggregationError, DecodeCorruptionError,
                            DestinationUnavailableError, ReduceTaskError,
                            SourceUnavailableError)
from reducer.naming import merge_name, reduce_name
from reducer.records import KeyValue
from reducer.reduce_executor import ReduceExecutor, ReduceStats, TaskState, do_reduce

__all__ = [
    'AggregationError',
    'DecodeCorruptionError',
    'DestinationUnavailableError',
    'KeyValue',
    'ReduceExecutor',
    'ReduceSettings',
    'ReduceStats',
    'ReduceTaskError',
    'SourceUnavailableError',
    'TaskState',
    'do_reduce',
    'merge_name',
    'reduce_name',
]
