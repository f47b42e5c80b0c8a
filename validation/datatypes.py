# validation/datatypes.py
"""
Semantic datatype inference for scalar property values.

Instance graphs carry primitive values untyped, so the vocabulary datatype a
value was meant to have (Date, URL, ...) is reconstructed from the value's
Python type or, for strings, from its shape.
"""
from datetime import date, datetime, time, timedelta, timezone
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple
from urllib.parse import ParseResult, SplitResult
import numbers
import re

class DataType(str, Enum):
    """Vocabulary datatype labels a value can be inferred as."""
    BOOLEAN = "Boolean"
    DATE = "Date"
    DATETIME = "DateTime"
    TIME = "Time"
    INTEGER = "Integer"
    FLOAT = "Float"
    NUMBER = "Number"
    URL = "URL"
    TEXT = "Text"
    UNKNOWN = "Unknown"

    def __str__(self) -> str:
        return self.value

# Applied with fullmatch; digits and letters are ASCII only
PATTERN_URL = re.compile(
    r"(https?|ftp|file)://[-a-zA-Z0-9+&@#/%?=~_|!:,.;]*[-a-zA-Z0-9+&@#/%=~_|]",
    re.IGNORECASE | re.ASCII
)

_TIME = r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2})(?::(?P<second>[0-9]{2})(?:\.(?P<fraction>[0-9]{1,9}))?)?"
_DATE = r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
_OFFSET = r"(?P<offset>Z|[+-][0-9]{2}:[0-9]{2}(?::[0-9]{2})?)"

PATTERN_ISO_TIME = re.compile(rf"{_TIME}{_OFFSET}?", re.ASCII)
PATTERN_ISO_DATE = re.compile(rf"{_DATE}{_OFFSET}?", re.ASCII)
PATTERN_ISO_LOCAL_DATE_TIME = re.compile(rf"{_DATE}T{_TIME}", re.ASCII)
PATTERN_ISO_OFFSET_DATE_TIME = re.compile(rf"{_DATE}T{_TIME}{_OFFSET}", re.ASCII)

def _offset(match) -> Optional[timezone]:
    text = match.group('offset')
    if text is None:
        return None
    if text == 'Z':
        return timezone.utc

    sign = -1 if text[0] == '-' else 1
    parts = [int(p) for p in text[1:].split(':')]
    hours, minutes = parts[0], parts[1]
    seconds = parts[2] if len(parts) > 2 else 0
    if hours > 18 or minutes > 59 or seconds > 59:
        raise ValueError(f"Invalid offset {text}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes, seconds=seconds))

def _time(match) -> time:
    fraction = match.group('fraction') or '0'
    return time(
        int(match.group('hour')),
        int(match.group('minute')),
        int(match.group('second') or 0),
        int(fraction[:6].ljust(6, '0'))
    )

def _date(match) -> date:
    return date(int(match.group('year')), int(match.group('month')), int(match.group('day')))

def parse_iso_time(text: str) -> time:
    match = PATTERN_ISO_TIME.fullmatch(text)
    if not match:
        raise ValueError(f"{text} is not an ISO time")
    return _time(match).replace(tzinfo=_offset(match))

def parse_iso_date(text: str) -> date:
    match = PATTERN_ISO_DATE.fullmatch(text)
    if not match:
        raise ValueError(f"{text} is not an ISO date")
    _offset(match)
    return _date(match)

def parse_iso_local_date_time(text: str) -> datetime:
    match = PATTERN_ISO_LOCAL_DATE_TIME.fullmatch(text)
    if not match:
        raise ValueError(f"{text} is not an ISO local date-time")
    return datetime.combine(_date(match), _time(match))

def parse_iso_offset_date_time(text: str) -> datetime:
    match = PATTERN_ISO_OFFSET_DATE_TIME.fullmatch(text)
    if not match:
        raise ValueError(f"{text} is not an ISO offset date-time")
    return datetime.combine(_date(match), _time(match), tzinfo=_offset(match))

# Tried in order, the first format that parses wins
STRING_FORMATS: List[Tuple[Callable[[str], Any], DataType]] = [
    (parse_iso_time, DataType.TIME),
    (parse_iso_date, DataType.DATE),
    (parse_iso_local_date_time, DataType.DATETIME),
    (parse_iso_offset_date_time, DataType.DATETIME),
]

def infer_string_datatype(text: str) -> DataType:
    for parser, datatype in STRING_FORMATS:
        try:
            parser(text)
            return datatype
        except ValueError:
            continue

    if PATTERN_URL.fullmatch(text):
        return DataType.URL

    return DataType.TEXT

def infer_datatype(value: Any) -> DataType:
    """Map a scalar property value to the vocabulary datatype it represents."""
    # bool is a subclass of int, and datetime a subclass of date, so order matters
    if isinstance(value, bool):
        return DataType.BOOLEAN
    if isinstance(value, datetime):
        return DataType.DATETIME
    if isinstance(value, date):
        return DataType.DATE
    if isinstance(value, time):
        return DataType.TIME
    if isinstance(value, float):
        return DataType.FLOAT
    if isinstance(value, numbers.Integral):
        return DataType.INTEGER
    if isinstance(value, numbers.Number):
        return DataType.NUMBER
    if isinstance(value, (ParseResult, SplitResult)):
        return DataType.URL
    if isinstance(value, str):
        return infer_string_datatype(value)

    return DataType.UNKNOWN
