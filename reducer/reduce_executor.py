#!/usr/bin/env python3
"""
Reduce Task Executor
Executes reduce tasks by reading the intermediate files of every map task,
grouping by key, applying the reduce function and writing the sorted output
"""

import os
import time
import tempfile
import logging
import threading
from enum import Enum
from dataclasses import dataclass
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Tuple

import psutil

from reducer.config import ReduceSettings
from reducer.errors import (DestinationUnavailableError, ReduceTaskError,
                            SourceUnavailableError)
from reducer.function_loader import FunctionLoader
from reducer.grouping import ReduceFunction, group_and_reduce
from reducer.naming import IntermediateNamer, reduce_name
from reducer.records import ENCODING, KeyValue, encode_record, read_records

logger = logging.getLogger(__name__)


def _read_umask() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return mask


# mkstemp creates 0600 files; published output gets the mode open() would give
OUTPUT_FILE_MODE = 0o666 & ~_read_umask()


class TaskState(Enum):
    """Lifecycle of a single reduce task"""
    PENDING = "pending"
    INGESTING = "ingesting"
    REDUCING = "reducing"
    EMITTING = "emitting"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ReduceStats:
    """Counters for one completed reduce task"""
    records_read: int
    keys_written: int
    output_file: str


def _read_source(path: str, map_task: int) -> List[KeyValue]:
    try:
        return read_records(path)
    except SourceUnavailableError as e:
        raise SourceUnavailableError(path, map_task, e.reason) from e


def read_intermediate(job_name: str, reduce_task: int, n_map: int,
                      intermediate_name: IntermediateNamer = reduce_name,
                      max_workers: int = 1) -> List[KeyValue]:
    """
    Read the intermediate file of every map task for one reduce partition.

    Args:
        job_name: Name of the MapReduce job
        reduce_task: Index of the reduce partition
        n_map: Number of map tasks that ran for the job
        intermediate_name: (job_name, map_task, reduce_task) -> path
        max_workers: Number of files read concurrently

    Returns:
        All records, ordered by map task index and then by position in file

    Raises:
        SourceUnavailableError: If any intermediate file is missing or unreadable
        DecodeCorruptionError: If any intermediate file is corrupt
    """
    if n_map < 0:
        raise ValueError(f"n_map must not be negative, got {n_map}")

    paths = [intermediate_name(job_name, m, reduce_task) for m in range(n_map)]

    if max_workers > 1 and len(paths) > 1:
        with ThreadPoolExecutor(max_workers=min(max_workers, len(paths))) as pool:
            futures = [pool.submit(_read_source, path, m) for m, path in enumerate(paths)]
            # result() re-raises in map task order
            chunks = [future.result() for future in futures]
    else:
        chunks = [_read_source(path, m) for m, path in enumerate(paths)]

    records = []
    for path, chunk in zip(paths, chunks):
        logger.debug(f"Read {len(chunk)} records from {path}")
        records.extend(chunk)

    logger.info(f"Reduce task {reduce_task}: read {len(records)} records from {n_map} map outputs")
    return records


def write_output(out_file: str, results: List[KeyValue], fsync: bool = True) -> int:
    """
    Write reduce output and publish it atomically under out_file.

    Records go to a temporary file in the same directory which is renamed
    onto out_file only once fully written, so a failed write never leaves a
    partial file under the destination name.

    Raises:
        DestinationUnavailableError: If the output cannot be created or written
    """
    out_dir = os.path.dirname(os.path.abspath(out_file))
    tmp_path = None
    try:
        os.makedirs(out_dir, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=out_dir, prefix=f".{os.path.basename(out_file)}.", suffix='.tmp')
        os.fchmod(fd, OUTPUT_FILE_MODE)
        with os.fdopen(fd, 'w', encoding=ENCODING) as f:
            for record in results:
                f.write(encode_record(record))
            f.flush()
            if fsync:
                os.fsync(f.fileno())
        os.replace(tmp_path, out_file)
        tmp_path = None
    except OSError as e:
        raise DestinationUnavailableError(out_file, e.strerror or str(e)) from e
    except UnicodeEncodeError as e:
        raise DestinationUnavailableError(out_file, f"cannot encode record: {e.reason}") from e
    finally:
        if tmp_path is not None and os.path.exists(tmp_path):
            os.remove(tmp_path)

    logger.info(f"Wrote {len(results)} records to {out_file}")
    return len(results)


def do_reduce(job_name: str, reduce_task: int, out_file: str, n_map: int,
              reduce_func: ReduceFunction,
              intermediate_name: IntermediateNamer = reduce_name,
              max_workers: int = 1, fsync: bool = True,
              on_state: Optional[Callable[[TaskState], None]] = None) -> ReduceStats:
    """
    Run one reduce task: ingest, sort and group, reduce, emit.

    Raises:
        ValueError: On a negative reduce_task or n_map
        ReduceTaskError: If any phase fails; nothing is published under out_file
    """
    if reduce_task < 0:
        raise ValueError(f"reduce_task must not be negative, got {reduce_task}")

    def enter(state: TaskState):
        if on_state is not None:
            on_state(state)

    enter(TaskState.INGESTING)
    records = read_intermediate(job_name, reduce_task, n_map, intermediate_name, max_workers)
    records_read = len(records)

    enter(TaskState.REDUCING)
    results = group_and_reduce(records, reduce_func)
    del records

    enter(TaskState.EMITTING)
    keys_written = write_output(out_file, results, fsync=fsync)

    return ReduceStats(records_read=records_read, keys_written=keys_written, output_file=out_file)


class ReduceExecutor:
    """Executes a single reduce task"""

    PROGRESS = {
        TaskState.PENDING: 0.0,
        TaskState.INGESTING: 0.1,
        TaskState.REDUCING: 0.5,
        TaskState.EMITTING: 0.8,
        TaskState.COMPLETED: 1.0,
    }

    def __init__(self, job_name: str, reduce_task: int, n_map: int,
                 reduce_func: ReduceFunction,
                 settings: Optional[ReduceSettings] = None,
                 out_file: Optional[str] = None,
                 intermediate_name: Optional[IntermediateNamer] = None):
        """
        Initialize the reduce executor

        Args:
            job_name: Name of the MapReduce job
            reduce_task: Index of the reduce partition this task owns
            n_map: Number of map tasks that ran for the job
            reduce_func: (key, values) -> reduced value string
            settings: Directory layout and tuning; defaults to ReduceSettings()
            out_file: Output path; defaults to the merge name under settings.output_dir
            intermediate_name: Intermediate naming function; defaults to
                reduce_name under settings.intermediate_dir
        """
        self.job_name = job_name
        self.reduce_task = reduce_task
        self.n_map = n_map
        self.reduce_func = reduce_func
        self.settings = settings or ReduceSettings()
        self.out_file = out_file or self.settings.output_file(job_name, reduce_task)
        self.intermediate_name = intermediate_name or self.settings.intermediate_namer()
        self.process = psutil.Process()

        self._state = TaskState.PENDING
        self._progress = 0.0
        self._progress_lock = threading.Lock()

    @classmethod
    def from_job_file(cls, job_name: str, reduce_task: int, n_map: int,
                      job_file: str, **kwargs) -> 'ReduceExecutor':
        """Build an executor around the reduce_function defined in a user job file"""
        reduce_func = FunctionLoader(job_file).get_reduce_function()
        return cls(job_name, reduce_task, n_map, reduce_func, **kwargs)

    def _update_progress(self, state: TaskState):
        with self._progress_lock:
            self._state = state
            if state in self.PROGRESS:
                self._progress = self.PROGRESS[state]
        logger.debug(f"Reduce task {self.reduce_task}: {state.value}")

    def get_progress(self) -> Tuple[float, TaskState]:
        """Get current progress and state of the task"""
        with self._progress_lock:
            return self._progress, self._state

    def get_memory_usage(self) -> int:
        """Get current memory usage in bytes"""
        return self.process.memory_info().rss

    def execute(self) -> Dict:
        """
        Execute the reduce task

        Returns:
            Dictionary with 'success', 'execution_time_ms', 'error_message',
            'error_type', 'records_read', 'keys_written', 'output_file' and
            'memory_usage_bytes' fields
        """
        start_time = time.time()
        logger.info(f"Reduce task {self.reduce_task} of job {self.job_name}: "
                    f"{self.n_map} map outputs -> {self.out_file}")

        result = {
            'success': False,
            'execution_time_ms': 0,
            'error_message': '',
            'error_type': '',
            'records_read': 0,
            'keys_written': 0,
            'output_file': self.out_file,
            'memory_usage_bytes': 0,
        }

        try:
            stats = do_reduce(
                self.job_name, self.reduce_task, self.out_file, self.n_map,
                self.reduce_func,
                intermediate_name=self.intermediate_name,
                max_workers=self.settings.max_workers,
                fsync=self.settings.fsync,
                on_state=self._update_progress,
            )
        except (ReduceTaskError, ValueError) as e:
            self._update_progress(TaskState.FAILED)
            logger.error(f"Reduce task {self.reduce_task} of job {self.job_name} failed: {e}")
            result['error_message'] = str(e)
            result['error_type'] = type(e).__name__
        else:
            self._update_progress(TaskState.COMPLETED)
            result['success'] = True
            result['records_read'] = stats.records_read
            result['keys_written'] = stats.keys_written

        result['execution_time_ms'] = int((time.time() - start_time) * 1000)
        result['memory_usage_bytes'] = self.get_memory_usage()
        if result['success']:
            logger.info(f"Reduce task {self.reduce_task}: completed in {result['execution_time_ms']}ms, "
                        f"{result['records_read']} records -> {result['keys_written']} keys")
        return result
