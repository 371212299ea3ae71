import pytest

from canzone.metadata.errors import EmptyResponse, MetadataError
from canzone.metadata.request import first_payload, metrics_uri


def test_uri_without_query():
    assert metrics_uri("hm://metadata/track", "SE") == "hm://metadata/track?country=SE"


def test_uri_with_query_uses_ampersand():
    assert metrics_uri("hm://x?a=1", "DE") == "hm://x?a=1&country=DE"


def test_product_appended():
    result = metrics_uri("hm://x", "US", "premium")
    assert result == "hm://x?country=US&product=premium"
    assert result.count("?") == 1


def test_first_payload_returns_first_part():
    assert first_payload([b"one", b"two"]) == b"one"


def test_first_payload_accepts_bytearray():
    assert first_payload([bytearray(b"\x00\x01")]) == b"\x00\x01"


def test_empty_payload_raises():
    with pytest.raises(EmptyResponse) as info:
        first_payload([])
    assert str(info.value) == "empty response"
    assert isinstance(info.value, MetadataError)