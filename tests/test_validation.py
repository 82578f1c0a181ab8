"""
URL validation and normalization.
"""
import pytest

from geotest.core.errors import InvalidURLError
from geotest.core.utils import round_half_up, round_to, strip_code_fences
from geotest.core.validation import validate_url


@pytest.mark.parametrize("raw,expected", [
    ("example.com", "https://example.com"),
    ("  https://example.com/page  ", "https://example.com/page"),
    ("HTTP://Example.com/a?b=1", "http://Example.com/a?b=1"),
])
def test_valid_urls(raw, expected):
    assert validate_url(raw) == expected


@pytest.mark.parametrize("raw", [
    "",
    "   ",
    "ftp://example.com",
    "javascript://alert(1)",
    "http://localhost:3000",
    "http://192.168.1.5",
    "https://10.0.0.1/admin",
    "https://172.16.4.4",
    "http://[::1",
    "https://example.com]/x",
])
def test_rejected_urls(raw):
    with pytest.raises(InvalidURLError):
        validate_url(raw)


def test_public_172_range_allowed():
    assert validate_url("https://172.32.0.1") == "https://172.32.0.1"


def test_round_half_up():
    assert round_half_up(70.5) == 71
    assert round_half_up(72.5) == 73
    assert round_half_up(70.49) == 70
    assert round_to(0.505, 1) == 0.5
    assert round_to(0.313, 2) == 0.31


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences(' {"a": 1} ') == '{"a": 1}'
