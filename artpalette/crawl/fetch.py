"""Download reference artwork images over HTTP.

Remote image refs (museum CDNs, wiki mirrors) are fetched through one shared
session. Flaky hosts get a few attempts before the artwork is reported as
undecodable and the corpus build moves on without it.
"""

from __future__ import annotations

import logging
from threading import Lock
from urllib.parse import urlparse

import requests
from requests import Session
from tenacity import (  # type: ignore[import-untyped]
    Retrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..errors import DecodeError

logger = logging.getLogger(__name__)

IMAGE_TIMEOUT = 10.0
DOWNLOAD_ATTEMPTS = 3
MAX_BACKOFF = 5.0
IMAGE_ACCEPT = "image/avif,image/webp,image/png,image/jpeg,image/*;q=0.8,*/*;q=0.5"
# Some image hosts refuse the default python-requests agent.
BROWSER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)

_image_session_lock = Lock()
_image_session: Session | None = None


class ImageHostError(Exception):
    """An image host answered with a 5xx status; the download is retried."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(f"{url} answered {status_code}")
        self.url = url
        self.status_code = status_code


def _get_session() -> Session:
    """Return the session shared by every image download thread."""
    global _image_session
    if _image_session is None:
        with _image_session_lock:
            if _image_session is None:
                session = requests.Session()
                session.headers["User-Agent"] = BROWSER_AGENT
                session.headers["Accept"] = IMAGE_ACCEPT
                _image_session = session
    return _image_session


# Transient network trouble and host errors only; 4xx means the image is gone.
_retryer = Retrying(
    stop=stop_after_attempt(DOWNLOAD_ATTEMPTS),
    wait=wait_exponential(multiplier=1, min=1, max=MAX_BACKOFF),
    retry=retry_if_exception_type((requests.Timeout, requests.ConnectionError, ImageHostError)),
    before_sleep=before_sleep_log(logger, logging.DEBUG),
    reraise=True,
)


def is_remote(source: str) -> bool:
    """Return True when *source* is an http(s) URL."""
    return urlparse(source.strip()).scheme in {"http", "https"}


def _download(url: str, timeout: float) -> bytes:
    response = _get_session().get(url, timeout=timeout, allow_redirects=True)
    if response.status_code >= 500:
        raise ImageHostError(url, response.status_code)
    response.raise_for_status()
    return response.content


def fetch_image_bytes(url: str, timeout: float = IMAGE_TIMEOUT) -> bytes:
    """Download *url* and return the raw image bytes.

    Timeouts, connection errors and 5xx responses are retried. Any failure
    that survives the retries is raised as :class:`DecodeError`, since the
    pixel buffer could not be obtained.
    """
    try:
        return _retryer(_download, url, timeout)
    except ImageHostError as exc:
        logger.warning("Image host error for %s: %s", url, exc.status_code)
        raise DecodeError(f"Image host error: {exc}") from exc
    except requests.RequestException as exc:
        logger.warning("Could not download %s: %s", url, exc)
        raise DecodeError(f"Could not download {url}: {exc}") from exc
