"""
Resilient image downloader.

Downloads one asset per call with:
- A refusal of local/loopback targets (checked on every redirect hop)
- An existence check, so an image on disk is never fetched twice
- Manual, bounded redirect following
- A fixed number of attempts with a fixed pause on transient failures
- A streamed write to a private temporary file, linked into place only if
  no other writer got there first

Failures are logged and reported through FetchResult; nothing is raised to
the caller.
"""

import ipaddress
import logging
import os
import socket
import tempfile
import time
from pathlib import Path
from typing import Optional
from urllib.parse import urljoin, urlparse

import requests

from src.logger import log_function
from .config import RETRYABLE_STATUSES
from .models import FetchResult


logger = logging.getLogger("content_sync")

CHUNK_SIZE = 8192

# Browser-like headers; some CDNs reject the default python-requests agent
DEFAULT_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0 Safari/537.36",
    "Accept": "image/avif,image/webp,image/*,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
}

TRANSIENT_ERRORS = (
    requests.exceptions.Timeout,
    requests.exceptions.ConnectionError,
    requests.exceptions.ChunkedEncodingError,
)


class DownloadError(Exception):
    """A failed download attempt, flagged as worth retrying or not."""

    def __init__(self, message: str, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable


def is_http_url(url: str) -> bool:
    parsed = urlparse(url or "")
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_local_url(url: str) -> bool:
    """
    Check whether a URL targets this machine.

    Matches ``localhost`` (and ``*.localhost``) plus loopback, unspecified
    and link-local IP literals, including shorthand IPv4 forms such as
    ``127.1`` or ``2130706433`` and IPv4-mapped IPv6. No DNS lookup is made.
    """
    host = urlparse(url).hostname
    if not host:
        return False
    host = host.lower().rstrip(".")
    if host == "localhost" or host.endswith(".localhost"):
        return True
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        try:
            address = ipaddress.IPv4Address(socket.inet_aton(host))
        except OSError:
            return False
    if address.version == 6 and address.ipv4_mapped is not None:
        address = address.ipv4_mapped
    return address.is_loopback or address.is_unspecified or address.is_link_local


def get_following_redirects(
    session: requests.Session,
    url: str,
    max_redirects: int,
    timeout: float,
) -> requests.Response:
    """
    Issue a streamed GET, following at most ``max_redirects`` redirects.

    Returns:
        The open 200 response

    Raises:
        DownloadError: On a non-200 final status, a local redirect target,
            a redirect without Location, or too many redirects
    """
    current = url
    for _ in range(max_redirects + 1):
        if is_local_url(current):
            raise DownloadError(f"Refusing to fetch local address {current}")

        response = session.get(
            current, stream=True, allow_redirects=False, timeout=timeout
        )
        status = response.status_code

        if 300 <= status < 400:
            location = response.headers.get("Location")
            response.close()
            if not location:
                raise DownloadError(f"Redirect {status} without Location from {current}")
            current = urljoin(current, location)
            logger.debug(f"Following redirect {status} to {current}")
            continue

        if status == 200:
            return response

        response.close()
        raise DownloadError(
            f"Response status code {status} for {current}",
            retryable=status in RETRYABLE_STATUSES,
        )

    raise DownloadError(f"Exceeded {max_redirects} redirects for {url}")


def stream_to_file(response: requests.Response, destination: Path) -> None:
    """
    Stream a response body to ``destination`` through a private ``.part`` file.

    Raises:
        FileExistsError: If ``destination`` appeared while streaming
    """
    partial = None
    try:
        with tempfile.NamedTemporaryFile(
            dir=destination.parent,
            prefix=f"{destination.name}.",
            suffix=".part",
            delete=False,
        ) as f:
            partial = Path(f.name)
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
        os.link(partial, destination)
    finally:
        response.close()
        if partial is not None:
            partial.unlink(missing_ok=True)


@log_function(logger_name="content_sync", log_execution_time=True)
def download_asset(
    url: str,
    destination: Path,
    session: Optional[requests.Session] = None,
    max_attempts: int = 3,
    retry_delay: float = 5.0,
    max_redirects: int = 10,
    timeout: float = 30.0,
    deadline: Optional[float] = None,
) -> FetchResult:
    """
    Download an image to ``destination`` unless it is already there.

    Args:
        url: Absolute http(s) URL of the image
        destination: Target file path
        session: Optional requests session (one is created if omitted)
        max_attempts: Total attempts for retryable failures
        retry_delay: Fixed pause between attempts, in seconds
        max_redirects: Maximum redirects followed per attempt
        timeout: Per-request timeout, in seconds
        deadline: Optional ``time.monotonic()`` value after which no further
            retry is started

    Returns:
        FetchResult with downloaded=True only if a new file was written
    """
    destination = Path(destination)

    if not is_http_url(url):
        logger.error(f"Invalid image URL {url!r}, download skipped")
        return FetchResult(False, destination, error=f"invalid URL: {url!r}")

    if is_local_url(url):
        logger.error(f"Localhost URL found: {url}. Image download skipped.")
        return FetchResult(False, destination, error=f"local URL refused: {url}")

    if destination.exists():
        logger.info(f"Image already exists: {destination.name}")
        return FetchResult(False, destination)

    owns_session = session is None
    if owns_session:
        session = requests.Session()
        session.headers.update(DEFAULT_HEADERS)

    error = None
    attempt = 0
    try:
        for attempt in range(1, max_attempts + 1):
            retryable = False
            try:
                logger.info(
                    f"Downloading {destination.name} (attempt {attempt}/{max_attempts})"
                )
                response = get_following_redirects(session, url, max_redirects, timeout)
                stream_to_file(response, destination)
            except DownloadError as e:
                error, retryable = str(e), e.retryable
            except TRANSIENT_ERRORS as e:
                error, retryable = f"{type(e).__name__}: {e}", True
            except requests.RequestException as e:
                error = f"{type(e).__name__}: {e}"
            except FileExistsError:
                logger.info(f"Image written by another run: {destination.name}")
                return FetchResult(False, destination, attempts=attempt)
            except OSError as e:
                error = f"Failed to write {destination}: {e}"
            except Exception as e:
                logger.exception(f"Unexpected error downloading {url}")
                error = f"{type(e).__name__}: {e}"
            else:
                if destination.exists():
                    logger.info(f"Downloaded image: {destination.name}")
                    return FetchResult(True, destination, attempts=attempt)
                error = f"{destination} missing after download"

            logger.warning(f"Download attempt {attempt} failed for {url}: {error}")

            if not retryable or attempt == max_attempts:
                break
            if deadline is not None and time.monotonic() + retry_delay > deadline:
                logger.warning(f"Run deadline reached, giving up on {url}")
                break

            logger.info(f"Waiting {retry_delay}s before retry...")
            time.sleep(retry_delay)
    finally:
        if owns_session:
            session.close()

    logger.error(f"Failed to download {url} after {attempt} attempt(s): {error}")
    return FetchResult(False, destination, attempts=attempt, error=error)
