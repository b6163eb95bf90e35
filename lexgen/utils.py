"""Utility functions for loading lexicon documents.

This module provides functions for loading lexicon JSON from files, URLs
and standard input with proper error handling. The decoded documents keep
their key order, which the generators rely on.
"""

import json
import sys
from pathlib import Path
from typing import Any, TextIO
from urllib.parse import urlparse

import requests

from .logging_config import get_logger

logger = get_logger(__name__)


class LexiconLoaderError(Exception):
    """Custom exception for lexicon loading errors."""

    pass


def is_url(source: str) -> bool:
    """Check whether a source string is an http(s) URL."""
    parsed = urlparse(source)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def load_json_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load JSON data from a local file.

    Args:
        file_path: Path to the JSON file.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        FileNotFoundError: If file doesn't exist.
        LexiconLoaderError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug(f"Attempting to load lexicon from file: {file_path}")

    if not file_path.exists():
        logger.error(f"File not found: {file_path}")
        raise FileNotFoundError(f"File not found: {file_path}")

    if file_path.suffix.lower() != ".json":
        logger.warning(f"File does not have .json extension: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        logger.info(f"Loaded lexicon from {file_path}")
        return str(file_path), data
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON in file {file_path}: {e}")
        raise LexiconLoaderError(f"Invalid JSON in file {file_path}: {e}") from e
    except UnicodeDecodeError as e:
        logger.error(f"File {file_path} is not valid UTF-8: {e}")
        raise LexiconLoaderError(f"File {file_path} is not valid UTF-8: {e}") from e
    except OSError as e:
        logger.error(f"Error reading file {file_path}: {e}")
        raise LexiconLoaderError(f"Error reading file {file_path}: {e}") from e


def load_json_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Load JSON data from a URL.

    Args:
        url: URL to fetch JSON from.
        timeout: Request timeout in seconds.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        LexiconLoaderError: If the URL is invalid, the request fails or the
            response is not valid JSON.
    """
    logger.debug(f"Attempting to load lexicon from URL: {url}")

    if not is_url(url):
        logger.error(f"Invalid URL format: {url}")
        raise LexiconLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()

        content_type = response.headers.get("content-type", "").lower()
        if "application/json" not in content_type and not url.endswith(".json"):
            logger.warning(
                f"URL {url} does not have JSON content type: {content_type}"
            )

        data = json.loads(response.text)
        logger.info(f"Loaded lexicon from {url}")
        return url, data

    except requests.exceptions.Timeout as e:
        logger.error(f"Request timeout for URL: {url}")
        raise LexiconLoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.ConnectionError as e:
        logger.error(f"Connection error for URL {url}: {e}")
        raise LexiconLoaderError(f"Connection error for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        logger.error(f"HTTP error {e.response.status_code} for URL: {url}")
        raise LexiconLoaderError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Request error for URL {url}: {e}")
        raise LexiconLoaderError(f"Request error for URL {url}: {e}") from e
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON response from URL {url}: {e}")
        raise LexiconLoaderError(f"Invalid JSON response from URL {url}: {e}") from e


def load_json_from_stream(stream: TextIO | None = None) -> tuple[str, Any]:
    """Load JSON data from a text stream, standard input by default."""
    stream = stream or sys.stdin
    try:
        return "<stdin>", json.load(stream)
    except json.JSONDecodeError as e:
        logger.error(f"Invalid JSON on standard input: {e}")
        raise LexiconLoaderError(f"Invalid JSON on standard input: {e}") from e
    except UnicodeDecodeError as e:
        logger.error(f"Standard input is not valid UTF-8: {e}")
        raise LexiconLoaderError(f"Standard input is not valid UTF-8: {e}") from e


def load_json(
    file_path: str | Path | None = None,
    url: str | None = None,
    timeout: int = 30,
) -> tuple[str, Any]:
    """Load JSON data from either a file or URL.

    Args:
        file_path: Path to local JSON file (mutually exclusive with url).
        url: URL to fetch JSON from (mutually exclusive with file_path).
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        LexiconLoaderError: If neither or both parameters are provided, or
            loading fails.
        FileNotFoundError: If file doesn't exist.
    """
    if not file_path and not url:
        logger.error("Neither file_path nor url provided")
        raise LexiconLoaderError("Either file_path or url must be provided")

    if file_path and url:
        logger.error("Both file_path and url provided")
        raise LexiconLoaderError("Cannot specify both file_path and url")

    if file_path:
        return load_json_from_file(file_path)
    else:
        return load_json_from_url(url, timeout)


def load_lexicon_source(source: str, timeout: int = 30) -> tuple[str, Any]:
    """Load a lexicon from a path or URL, whichever the source looks like."""
    if source == "-":
        return load_json_from_stream()
    if is_url(source):
        return load_json(url=source, timeout=timeout)
    return load_json(file_path=source)
