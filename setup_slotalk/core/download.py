"""
Release archive downloader.

Performs a single streamed HTTP GET with TLS verification. There is no
retry or resume: the first failure is reported with the attempted URL.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

import requests
from requests.exceptions import RequestException

from setup_slotalk.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


def download_file(
    url: str,
    destination: Optional[Path] = None,
    timeout: int = 30,
    session: Optional[requests.Session] = None,
) -> Path:
    """
    Download url to destination.

    Args:
        url: URL to download from
        destination: Local path to save file (a new temp file if None)
        timeout: Request timeout in seconds
        session: Optional requests session to issue the request with

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: On network errors, non-2xx responses or write errors

    Example:
        >>> archive = download_file(
        ...     "https://github.com/tfadeyi/slotalk/releases/latest/download/slotalk-linux-amd64.tar.gz"
        ... )
    """
    if not url:
        raise DownloadError(url, "URL cannot be empty")

    if destination is None:
        fd, tmp_name = tempfile.mkstemp(prefix="slotalk_", suffix=".tar.gz")
        os.close(fd)
        destination = Path(tmp_name)
    else:
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)

    http = session or requests
    logger.info(f"Downloading from {url}")

    try:
        response = http.get(url, stream=True, timeout=timeout, allow_redirects=True)
        response.raise_for_status()

        downloaded = 0
        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                if chunk:
                    f.write(chunk)
                    downloaded += len(chunk)

    except (RequestException, OSError) as e:
        logger.error(f"Error during download: {e}")
        destination.unlink(missing_ok=True)
        raise DownloadError(url, str(e)) from e

    logger.info(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


__all__ = ["download_file"]
