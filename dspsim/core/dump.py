"""File exports for diagnostics.

Memory blocks are written as raw big-endian 32-bit words, register
snapshots as a JSON list. Failures surface as DumpError carrying the
underlying I/O message; the device itself is never touched.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, Union

from dspsim.core.exceptions import DumpError
from dspsim.utils.consts import ConstUtils

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def encode_words(words: Iterable[int]) -> bytes:
    """Pack words as consecutive big-endian u32 values."""
    return b"".join(
        (w & ConstUtils.MASK_32_BITS).to_bytes(ConstUtils.WORD_BYTES, "big") for w in words
    )


def save_memory_block(path: PathLike, words: Iterable[int]) -> int:
    """Write words to path as raw big-endian u32.

    Returns:
        Number of bytes written

    Raises:
        DumpError: If the file cannot be written
    """
    data = encode_words(words)
    try:
        with open(path, "wb") as fh:
            fh.write(data)
    except OSError as exc:
        raise DumpError(str(path), str(exc)) from exc

    logger.debug(f"Saved {len(data) // ConstUtils.WORD_BYTES} words to {path}")
    return len(data)


def save_register_dump(path: PathLike, entries: Iterable[dict]) -> int:
    """Write register entries to path as a JSON list.

    Each entry is a mapping with ``address``, ``name`` and ``value`` keys.

    Returns:
        Number of entries written
    """
    entries = list(entries)
    try:
        with open(path, "w", encoding="utf-8") as fh:
            json.dump(entries, fh, indent=2)
            fh.write("\n")
    except OSError as exc:
        raise DumpError(str(path), str(exc)) from exc

    logger.debug(f"Saved {len(entries)} registers to {path}")
    return len(entries)
