"""Image comparator: decides whether two screenshots are visually equal."""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, ImageChops, UnidentifiedImageError

from src.errors import ComparisonError

logger = logging.getLogger(__name__)


class ImageComparator:
    """Pixel comparison with an optional per-channel tolerance.

    With ``tolerance=0`` any differing pixel makes the pair unequal. Images
    of different sizes are never equal.
    """

    def __init__(self, tolerance: int = 0):
        self.tolerance = tolerance

    def compare(self, path_a: str | Path, path_b: str | Path) -> bool:
        first = self._load(path_a)
        second = self._load(path_b)

        if first.size != second.size:
            logger.debug("Size mismatch: %s %s vs %s %s", path_a, first.size, path_b, second.size)
            return False

        diff = ImageChops.difference(first, second)
        if self.tolerance <= 0:
            return diff.getbbox() is None

        # getextrema() on RGBA gives one (min, max) per channel
        return all(high <= self.tolerance for _, high in diff.getextrema())

    @staticmethod
    def _load(path: str | Path) -> Image.Image:
        try:
            with Image.open(path) as img:
                return img.convert("RGBA")
        except (OSError, UnidentifiedImageError) as e:
            raise ComparisonError(f"Could not read image {path}: {e}") from e
