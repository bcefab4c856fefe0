import math

import pytest

from normalize.quantity import (
    format_bytes,
    format_efficiency,
    parse_memory_amount,
    quantity_to_bytes,
)


def test_quantity_to_bytes():
    assert quantity_to_bytes('16Gi') == 16 * 1024 ** 3
    assert quantity_to_bytes('1234Ki') == 1234 * 1024
    assert quantity_to_bytes('512M') == 512 * 1000 ** 2
    assert quantity_to_bytes('42') == 42
    assert quantity_to_bytes(None) == 0
    assert quantity_to_bytes('') == 0


def test_quantity_rounds_up():
    # 1.5 bytes expressed in milli-units
    assert quantity_to_bytes('1500m') == 2


@pytest.mark.parametrize('text,expected', [
    ('512MiB', 512 * 1024 ** 2),
    ('512mib', 512 * 1024 ** 2),
    ('512Mi', 512 * 1024 ** 2),
    ('512MB', 512 * 1000 ** 2),
    ('512M', 512 * 1000 ** 2),
    ('1.5 GiB', int(1.5 * 1024 ** 3)),
    ('2k', 2000),
    ('1,024 B', 1024),
    ('100', 100),
    ('', 0),
    (None, 0),
])
def test_parse_memory_amount(text, expected):
    assert parse_memory_amount(text) == expected


@pytest.mark.parametrize('text', ['lots', '-1GiB', '12 parsecs', '1.2.3MB', 'MiB'])
def test_parse_memory_amount_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_memory_amount(text)


def test_format_bytes_uses_thousands_separators():
    assert format_bytes(0) == '0'
    assert format_bytes(1234567) == '1,234,567'
    assert format_bytes(-50000) == '-50,000'


def test_format_efficiency():
    assert format_efficiency(400 / 300) == '1.33'
    assert format_efficiency(0.5) == '0.50'
    assert format_efficiency(math.nan) == 'NaN'
    assert format_efficiency(math.inf) == 'Infinity'
    assert format_efficiency(-math.inf) == '-Infinity'
