#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/texbridge/utils/encoding.py
"""Character encoding detection and handling utilities.

Parser input may arrive as bytes or binary streams. The configured encoding
is tried first, then chardet-based detection, then a fixed fallback chain
ending in latin-1, which maps every byte and so cannot fail.
"""

from __future__ import annotations

import logging
from typing import IO

import chardet

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_ENCODINGS = ("utf-8-sig",)
LAST_RESORT_ENCODING = "latin-1"


def detect_encoding(data: bytes, sample_size: int = 8192, confidence_threshold: float = 0.7) -> str | None:
    """Detect character encoding of binary data using chardet.

    Parameters
    ----------
    data : bytes
        Binary data to analyze
    sample_size : int, default 8192
        Number of bytes to sample for detection
    confidence_threshold : float, default 0.7
        Minimum confidence level (0.0-1.0) required to trust detection

    Returns
    -------
    str | None
        Detected encoding name, or None if detection fails or confidence is
        below the threshold

    """
    result = chardet.detect(data[:sample_size])
    if not result or not result.get("encoding"):
        logger.debug("chardet: No encoding detected")
        return None

    encoding = result["encoding"]
    confidence = result.get("confidence") or 0.0
    logger.debug(f"chardet detected encoding: {encoding} (confidence: {confidence:.2f})")

    if confidence >= confidence_threshold:
        return encoding
    logger.debug(f"chardet confidence {confidence:.2f} below threshold {confidence_threshold}")
    return None


def read_text_with_encoding_detection(data: bytes, encoding: str = "utf-8", strict: bool = False) -> str:
    """Decode bytes, preferring the configured encoding.

    Parameters
    ----------
    data : bytes
        Binary data to decode
    encoding : str, default "utf-8"
        Encoding tried first
    strict : bool, default False
        When True, only ``encoding`` is tried and decoding errors propagate

    Returns
    -------
    str
        Decoded text

    Raises
    ------
    UnicodeDecodeError
        In strict mode, when ``data`` is not valid in ``encoding``
    LookupError
        In strict mode, when ``encoding`` is unknown

    """
    if strict:
        return data.decode(encoding)

    candidates = [encoding]
    detected = detect_encoding(data)
    if detected:
        candidates.append(detected)
    candidates.extend(DEFAULT_FALLBACK_ENCODINGS)

    for candidate in candidates:
        try:
            text = data.decode(candidate)
            logger.debug(f"Successfully decoded with encoding: {candidate}")
            return text
        except (UnicodeDecodeError, LookupError) as e:
            logger.debug(f"Failed to decode with {candidate}: {e}")

    logger.warning(f"All encoding attempts failed, decoding as {LAST_RESORT_ENCODING}")
    return data.decode(LAST_RESORT_ENCODING)


def normalize_stream_to_text(stream: IO[bytes] | IO[str], encoding: str = "utf-8", strict: bool = False) -> str:
    """Read content from a binary or text file-like object.

    Parameters
    ----------
    stream : IO[bytes] or IO[str]
        File-like object to read from
    encoding : str, default "utf-8"
        Encoding tried first for binary streams
    strict : bool, default False
        Passed through to :func:`read_text_with_encoding_detection`

    Returns
    -------
    str
        Text content

    Raises
    ------
    TypeError
        If stream.read() returns something other than bytes or str

    """
    content = stream.read()
    if isinstance(content, bytes):
        return read_text_with_encoding_detection(content, encoding=encoding, strict=strict)
    if isinstance(content, str):
        return content
    raise TypeError(f"Stream read() returned unexpected type {type(content).__name__}. Expected bytes or str.")
