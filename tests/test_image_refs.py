"""Tests for image reference helpers."""
import pytest
import requests

from common.image_refs import fetch_image_bytes, guess_mime_type, parse_data_uri, to_data_uri


def test_data_uri_encodes_mime_and_payload():
    ref = to_data_uri(b"\x00\x01\x02", "image/webp")

    assert ref.startswith("data:image/webp;base64,")
    assert parse_data_uri(ref) == (b"\x00\x01\x02", "image/webp")


def test_parse_data_uri_with_parameters():
    data, mime = parse_data_uri("data:image/png;name=a.png;base64,aGVsbG8=")

    assert data == b"hello"
    assert mime == "image/png"


@pytest.mark.parametrize("ref", ["data:image/png,plain", "data:image/png;base64,!!!", "https://x/y.png"])
def test_parse_data_uri_rejects_invalid(ref):
    with pytest.raises(ValueError):
        parse_data_uri(ref)


def test_guess_mime_type_prefers_header():
    assert guess_mime_type("https://x/a.png", "image/jpeg; charset=binary") == "image/jpeg"
    assert guess_mime_type("https://x/a.gif", "application/octet-stream") == "image/gif"
    assert guess_mime_type("https://x/noext", None) == "image/png"


def test_fetch_rejects_unsupported_scheme():
    with pytest.raises(ValueError):
        fetch_image_bytes("s3://bucket/key.png")


def test_fetch_http_reference(monkeypatch):
    class FakeResponse:
        content = b"GIF89a"
        headers = {"content-type": "image/gif"}

        def raise_for_status(self):
            pass

    monkeypatch.setattr("common.image_refs.requests.get", lambda url, timeout=None: FakeResponse())

    assert fetch_image_bytes("https://images.example.com/a") == (b"GIF89a", "image/gif")


def test_fetch_http_error_propagates(monkeypatch):
    class FakeResponse:
        content = b""
        headers = {}

        def raise_for_status(self):
            raise requests.HTTPError("410 Gone")

    monkeypatch.setattr("common.image_refs.requests.get", lambda url, timeout=None: FakeResponse())

    with pytest.raises(requests.HTTPError):
        fetch_image_bytes("https://images.example.com/expired.png")
