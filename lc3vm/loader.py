"""Program image loading for the LC-3 virtual machine.

An image is a big-endian origin word followed by big-endian program words.
"""

import logging
from pathlib import Path
from typing import Union

from .errors import ImageError
from .memory import MEMORY_SIZE

logger = logging.getLogger(__name__)


def parse_image(data: bytes) -> tuple[int, list[int]]:
    """Split raw image bytes into ``(origin, words)``.

    Words that would run past the top of memory are dropped, as is a
    trailing odd byte.
    """
    if len(data) < 2:
        raise ImageError(f"Image too short: {len(data)} bytes, no origin word")

    origin = int.from_bytes(data[0:2], "big")
    body = data[2:]
    if len(body) % 2:
        logger.warning("Image has trailing odd byte; ignoring it")
        body = body[:-1]

    words = [int.from_bytes(body[i:i + 2], "big") for i in range(0, len(body), 2)]

    max_words = MEMORY_SIZE - origin
    if len(words) > max_words:
        logger.warning(
            "Image at 0x%04X has %d words; truncating to %d", origin, len(words), max_words
        )
        words = words[:max_words]

    logger.debug("Parsed image: origin=0x%04X words=%d", origin, len(words))
    return origin, words


def read_image_file(path: Union[str, Path]) -> tuple[int, list[int]]:
    """Read and parse an image file."""
    try:
        data = Path(path).read_bytes()
    except OSError as e:
        raise ImageError(f"Failed to load image {path}: {e.strerror or e}") from e
    return parse_image(data)
