# tests/test_datatypes.py
from datetime import date, datetime, time, timezone
from decimal import Decimal
from fractions import Fraction
from urllib.parse import urlparse, urlsplit
import pytest

from validation.datatypes import DataType, infer_datatype, parse_iso_time, parse_iso_offset_date_time

@pytest.mark.parametrize('value, expected', [
    (True, DataType.BOOLEAN),
    (False, DataType.BOOLEAN),
    (date(1809, 2, 12), DataType.DATE),
    (datetime(2020, 1, 1, 12, 30), DataType.DATETIME),
    (datetime(2020, 1, 1, 12, 30, tzinfo=timezone.utc), DataType.DATETIME),
    (time(9, 15), DataType.TIME),
    (3.5, DataType.FLOAT),
    (42, DataType.INTEGER),
    (Decimal('1.25'), DataType.NUMBER),
    (Fraction(1, 3), DataType.NUMBER),
    (urlparse('https://schema.org/Person'), DataType.URL),
    (urlsplit('ftp://example.org/file'), DataType.URL),
])
def test_native_values(value, expected):
    assert infer_datatype(value) == expected

@pytest.mark.parametrize('text, expected', [
    ('10:15', DataType.TIME),
    ('10:15:30', DataType.TIME),
    ('10:15:30.123456789', DataType.TIME),
    ('10:15:30+01:00', DataType.TIME),
    ('10:15:30Z', DataType.TIME),
    ('2011-12-03', DataType.DATE),
    ('2011-12-03+01:00', DataType.DATE),
    ('2011-12-03T10:15:30', DataType.DATETIME),
    ('2011-12-03T10:15', DataType.DATETIME),
    ('2011-12-03T10:15:30+01:00', DataType.DATETIME),
    ('2011-12-03T10:15:30Z', DataType.DATETIME),
    ('http://schema.org/Person', DataType.URL),
    ('HTTPS://EXAMPLE.ORG/a?b=c#d', DataType.URL),
    ('file:///tmp/data.csv', DataType.URL),
    ('Abraham Lincoln', DataType.TEXT),
    ('', DataType.TEXT),
    ('mailto:someone@example.org', DataType.TEXT),
    ('https://example.org/ends-with.', DataType.TEXT),
    ('12:30\n', DataType.TEXT),
    ('2011-12-03\n', DataType.TEXT),
    ('2011-12-03T10:15:30Z\n', DataType.TEXT),
    ('http://example.org/a\n', DataType.TEXT),
    ('١٢:٣٠', DataType.TEXT),
    ('٢٠١١-١٢-٠٣', DataType.TEXT),
])
def test_strings(text, expected):
    assert infer_datatype(text) == expected

@pytest.mark.parametrize('text', ['25:00', '2011-13-01', '2011-02-30', '2011-12-03T24:00', '2011-12-03 10:15'])
def test_out_of_range_strings_are_text(text):
    assert infer_datatype(text) == DataType.TEXT

def test_unknown_values():
    assert infer_datatype(None) == DataType.UNKNOWN
    assert infer_datatype(['a', 'b']) == DataType.UNKNOWN
    assert infer_datatype(object()) == DataType.UNKNOWN

def test_time_parsing_takes_priority_over_other_formats():
    # A time of day is tried before any other format
    assert infer_datatype('23:59:59') == DataType.TIME

def test_datatype_renders_as_vocabulary_label():
    assert str(DataType.DATETIME) == 'DateTime'
    assert DataType.URL.value == 'URL'

def test_parsed_values():
    assert parse_iso_time('10:15:30.5') == time(10, 15, 30, 500000)
    assert parse_iso_offset_date_time('2011-12-03T10:15:30Z') == datetime(2011, 12, 3, 10, 15, 30, tzinfo=timezone.utc)
    with pytest.raises(ValueError):
        parse_iso_offset_date_time('2011-12-03T10:15:30')

def test_parsers_reject_trailing_newline_and_non_ascii_digits():
    with pytest.raises(ValueError):
        parse_iso_time('12:30\n')
    with pytest.raises(ValueError):
        parse_iso_time('١٢:٣٠')
