"""
Sort-and-group step of a reduce task.
"""

import logging
from typing import Callable, Iterator, List, Tuple

from reducer.errors import AggregationError
from reducer.records import KeyValue, is_encodable

logger = logging.getLogger(__name__)

ReduceFunction = Callable[[str, List[str]], str]


def _record_key(record: KeyValue) -> str:
    return record.key


def group_by_key(records: List[KeyValue]) -> Iterator[Tuple[str, List[str]]]:
    """
    Sort records by key in place and yield one (key, values) run per distinct key.

    The sort is stable, so values within a run keep the order in which the
    records were ingested.
    """
    if not records:
        return

    records.sort(key=_record_key)

    current_key = records[0].key
    values = []
    for record in records:
        if record.key != current_key:
            yield current_key, values
            current_key = record.key
            values = []
        values.append(record.value)

    # last run
    yield current_key, values


def group_and_reduce(records: List[KeyValue], reduce_func: ReduceFunction) -> List[KeyValue]:
    """
    Apply reduce_func once per distinct key.

    Args:
        records: Every record ingested for the partition; sorted in place
        reduce_func: (key, values) -> reduced value string

    Returns:
        One KeyValue per distinct key, ascending by key

    Raises:
        AggregationError: If reduce_func raises or returns a non-string
    """
    results = []
    for key, values in group_by_key(records):
        try:
            reduced = reduce_func(key, values)
        except Exception as e:
            raise AggregationError(key, f"{type(e).__name__}: {e}") from e
        if not isinstance(reduced, str):
            raise AggregationError(key, f"expected str result, got {type(reduced).__name__}")
        if not is_encodable(reduced):
            raise AggregationError(key, "result contains lone surrogates")
        results.append(KeyValue(key, reduced))

    logger.debug(f"Reduced {len(records)} records into {len(results)} keys")
    return results
