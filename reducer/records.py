"""
Key/value record type and the JSON record-stream codec.

Intermediate files and reduce output files share one encoding: a stream of
JSON objects of the form {"Key": ..., "Value": ...}. The writer puts one
object per line; the reader accepts any whitespace between objects, so a
file is self-delimiting and needs no external framing.
"""

import json
from dataclasses import dataclass
from typing import Iterable, Iterator, List

from reducer.errors import DecodeCorruptionError, SourceUnavailableError

KEY_FIELD = 'Key'
VALUE_FIELD = 'Value'
ENCODING = 'utf-8'

_decoder = json.JSONDecoder()
_WHITESPACE = ' \t\n\r'


@dataclass(frozen=True)
class KeyValue:
    """A single (key, value) record"""
    key: str
    value: str

    def to_dict(self) -> dict:
        return {KEY_FIELD: self.key, VALUE_FIELD: self.value}


def encode_record(record: KeyValue) -> str:
    """Encode one record as a single JSON line"""
    return json.dumps(record.to_dict(), ensure_ascii=False, separators=(',', ':')) + '\n'


def _to_record(obj, path: str, offset: int) -> KeyValue:
    if not isinstance(obj, dict):
        raise DecodeCorruptionError(path, offset, f"expected a JSON object, got {type(obj).__name__}")
    try:
        key = obj[KEY_FIELD]
        value = obj[VALUE_FIELD]
    except KeyError as e:
        raise DecodeCorruptionError(path, offset, f"missing field {e.args[0]!r}") from e
    if not isinstance(key, str) or not isinstance(value, str):
        raise DecodeCorruptionError(path, offset, "Key and Value must both be strings")
    if not is_encodable(key) or not is_encodable(value):
        raise DecodeCorruptionError(path, offset, "Key and Value must not contain lone surrogates")
    return KeyValue(key, value)


def is_encodable(text: str) -> bool:
    """True if text can be written to a record file (no lone surrogates)"""
    try:
        text.encode(ENCODING)
    except UnicodeEncodeError:
        return False
    return True


def decode_records(text: str, path: str = '<string>') -> Iterator[KeyValue]:
    """
    Decode a record stream one record at a time until it is exhausted.

    Args:
        text: Whole contents of an intermediate or output file
        path: Name used in error messages

    Yields:
        KeyValue records in stream order

    Raises:
        DecodeCorruptionError: If the stream holds anything but well-formed records
    """
    pos = 0
    end = len(text)
    while True:
        while pos < end and text[pos] in _WHITESPACE:
            pos += 1
        if pos >= end:
            return
        try:
            obj, next_pos = _decoder.raw_decode(text, pos)
        except json.JSONDecodeError as e:
            raise DecodeCorruptionError(path, e.pos, e.msg) from e
        except RecursionError as e:
            raise DecodeCorruptionError(path, pos, "JSON nested too deeply") from e
        yield _to_record(obj, path, pos)
        pos = next_pos


def read_records(path: str) -> List[KeyValue]:
    """
    Read every record from one file.

    Raises:
        SourceUnavailableError: If the file is missing or cannot be read
        DecodeCorruptionError: If the contents are not a valid record stream
    """
    try:
        with open(path, 'r', encoding=ENCODING) as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise DecodeCorruptionError(path, e.start, f"invalid {ENCODING}: {e.reason}") from e
    except OSError as e:
        raise SourceUnavailableError(path, reason=e.strerror or str(e)) from e
    return list(decode_records(text, path))


def write_records(path: str, records: Iterable[KeyValue]) -> int:
    """
    Write records to a file in stream order, returning how many were written.

    This is the plain writer used on the map side; reduce output goes through
    the atomic publisher in reduce_executor.
    """
    count = 0
    with open(path, 'w', encoding=ENCODING) as f:
        for record in records:
            f.write(encode_record(record))
            count += 1
    return count
