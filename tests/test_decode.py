from __future__ import annotations

from io import BytesIO
from pathlib import Path

import numpy as np
import pytest
import requests
from PIL import Image
from tenacity import wait_none

from artpalette.crawl import fetch
from artpalette.errors import DecodeError
from artpalette.extract import decode


def _png_bytes(size=(5, 3), color=(10, 20, 30, 255)) -> bytes:
    buffer = BytesIO()
    Image.new("RGBA", size, color).save(buffer, format="PNG")
    return buffer.getvalue()


def _truncated_idat_png(size: int = 64) -> bytes:
    """Return a noisy PNG whose first IDAT chunk claims half of its real length."""
    noise = np.random.default_rng(0).integers(0, 256, (size, size, 3), dtype=np.uint8)
    buffer = BytesIO()
    Image.fromarray(noise).save(buffer, format="PNG")
    data = bytearray(buffer.getvalue())
    start = data.index(b"IDAT") - 4
    length = int.from_bytes(data[start : start + 4], "big")
    data[start : start + 4] = (length // 2).to_bytes(4, "big")
    return bytes(data)


class FakeResponse:
    def __init__(self, status_code: int, content: bytes = b"") -> None:
        self.status_code = status_code
        self.content = content

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status {self.status_code}")


class FakeSession:
    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.calls: list[str] = []

    def get(self, url, timeout, allow_redirects):
        self.calls.append(url)
        return self.response


def test_decode_image_bytes_returns_rgba_buffer() -> None:
    pixels = decode.decode_image_bytes(_png_bytes())
    assert pixels.shape == (3, 5, 4)
    assert tuple(pixels[0, 0]) == (10, 20, 30, 255)


def test_decode_converts_rgb_images() -> None:
    buffer = BytesIO()
    Image.new("RGB", (2, 2), (1, 2, 3)).save(buffer, format="PNG")
    pixels = decode.decode_image_bytes(buffer.getvalue())
    assert tuple(pixels[1, 1]) == (1, 2, 3, 255)


@pytest.mark.parametrize("payload", [b"", b"definitely not an image"])
def test_decode_rejects_bad_payloads(payload: bytes) -> None:
    with pytest.raises(DecodeError):
        decode.decode_image_bytes(payload)


def test_decode_rejects_png_with_broken_chunks() -> None:
    with pytest.raises(DecodeError):
        decode.decode_image_bytes(_truncated_idat_png())


def test_decode_failures_surface_only_as_decode_error() -> None:
    valid = _png_bytes(size=(64, 64))
    for offset in range(33, 48):
        data = bytearray(valid)
        data[offset] ^= 0x40
        # Pillow may still recover some of these; anything else must be DecodeError.
        try:
            decode.decode_image_bytes(bytes(data))
        except DecodeError:
            pass


def test_load_image_pixels_from_path(tmp_path: Path) -> None:
    path = tmp_path / "tile.png"
    path.write_bytes(_png_bytes(size=(4, 4)))
    assert decode.load_image_pixels(path).shape == (4, 4, 4)
    assert decode.load_image_pixels(str(path)).shape == (4, 4, 4)


def test_load_image_pixels_missing_file(tmp_path: Path) -> None:
    with pytest.raises(DecodeError):
        decode.load_image_pixels(tmp_path / "missing.png")


def test_load_image_pixels_from_url(monkeypatch) -> None:
    seen: list[str] = []

    def fake_fetch(url: str) -> bytes:
        seen.append(url)
        return _png_bytes(size=(2, 2))

    monkeypatch.setattr(decode, "fetch_image_bytes", fake_fetch)
    pixels = decode.load_image_pixels("https://example.com/art.png")
    assert pixels.shape == (2, 2, 4)
    assert seen == ["https://example.com/art.png"]


def test_is_remote() -> None:
    assert fetch.is_remote("https://example.com/a.png")
    assert fetch.is_remote(" http://example.com/a.png")
    assert not fetch.is_remote("/data/images/a.png")
    assert not fetch.is_remote("C:/images/a.png")


def test_fetch_image_bytes_success(monkeypatch) -> None:
    session = FakeSession(FakeResponse(200, b"payload"))
    monkeypatch.setattr(fetch, "_get_session", lambda: session)
    assert fetch.fetch_image_bytes("https://example.com/a.png") == b"payload"
    assert session.calls == ["https://example.com/a.png"]


def test_fetch_image_bytes_client_error_raises_decode_error(monkeypatch) -> None:
    session = FakeSession(FakeResponse(404))
    monkeypatch.setattr(fetch, "_get_session", lambda: session)
    with pytest.raises(DecodeError):
        fetch.fetch_image_bytes("https://example.com/missing.png")
    assert len(session.calls) == 1


class ScriptedSession:
    def __init__(self, *responses: FakeResponse) -> None:
        self.responses = list(responses)
        self.calls: list[str] = []

    def get(self, url, timeout, allow_redirects):
        self.calls.append(url)
        return self.responses.pop(0)


def test_fetch_image_bytes_retries_host_errors(monkeypatch) -> None:
    session = ScriptedSession(FakeResponse(503), FakeResponse(200, b"png"))
    monkeypatch.setattr(fetch, "_get_session", lambda: session)
    monkeypatch.setattr(fetch, "_retryer", fetch._retryer.copy(wait=wait_none()))

    assert fetch.fetch_image_bytes("https://example.com/flaky.png") == b"png"
    assert len(session.calls) == 2


def test_fetch_image_bytes_gives_up_after_repeated_host_errors(monkeypatch) -> None:
    session = ScriptedSession(*(FakeResponse(502) for _ in range(fetch.DOWNLOAD_ATTEMPTS)))
    monkeypatch.setattr(fetch, "_get_session", lambda: session)
    monkeypatch.setattr(fetch, "_retryer", fetch._retryer.copy(wait=wait_none()))

    with pytest.raises(DecodeError) as excinfo:
        fetch.fetch_image_bytes("https://example.com/down.png")
    assert isinstance(excinfo.value.__cause__, fetch.ImageHostError)
    assert excinfo.value.__cause__.status_code == 502
    assert len(session.calls) == fetch.DOWNLOAD_ATTEMPTS


def test_image_session_is_shared_and_asks_for_images(monkeypatch) -> None:
    monkeypatch.setattr(fetch, "_image_session", None)
    session = fetch._get_session()
    try:
        assert fetch._get_session() is session
        assert session.headers["Accept"].startswith("image/")
        assert "python-requests" not in session.headers["User-Agent"]
    finally:
        session.close()
