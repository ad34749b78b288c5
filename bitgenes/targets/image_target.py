"""
Image Approximation Target

Treats the genome as raw 8-bit pixel channels and scores it by the summed
absolute error against a reference image. Lower is better.
"""

import numpy as np

from ..evolution.exceptions import InvalidConfigurationError
from ..evolution.genes import GeneBuffer


class ImageTarget:
    """Summed absolute channel error against a reference image.

    Channel k of the flattened (row-major) image is compared with the genome's
    8-bit slot k. Slots missing from a short genome read as 0.

    Attributes:
        pixels: reference image, uint8 array of shape (H, W) or (H, W, C)
        evaluations: number of genomes scored so far
    """

    def __init__(self, pixels: np.ndarray):
        """Initialize the target.

        Args:
            pixels: reference image

        Raises:
            InvalidConfigurationError: if the image is empty or not 2-D/3-D
        """
        pixels = np.asarray(pixels)
        if pixels.ndim not in (2, 3) or pixels.size == 0:
            raise InvalidConfigurationError(
                f"Unsupported image shape: {pixels.shape}",
                "Pass a non-empty (H, W) or (H, W, C) array",
            )

        self.pixels = pixels.astype(np.uint8)
        self._flat = self.pixels.reshape(-1).astype(np.int64)
        self.evaluations = 0

    @property
    def shape(self):
        return self.pixels.shape

    @property
    def genome_bits(self) -> int:
        """Genome length holding one byte per channel."""
        return self.pixels.size * 8

    def _channels(self, genome: GeneBuffer) -> np.ndarray:
        raw = np.frombuffer(genome.to_bytes(), dtype=np.uint8)[:self._flat.size]
        channels = np.zeros(self._flat.size, dtype=np.int64)
        channels[:raw.size] = raw
        return channels

    def score(self, genome: GeneBuffer) -> float:
        self.evaluations += 1
        return float(np.abs(self._channels(genome) - self._flat).sum())

    def decode(self, genome: GeneBuffer) -> np.ndarray:
        """Render a genome as an image of the reference shape."""
        return self._channels(genome).astype(np.uint8).reshape(self.pixels.shape)


def smiley(size: int = 8) -> np.ndarray:
    """Small RGBA smiley face for demos and tests.

    Args:
        size: edge length in pixels, at least 5

    Returns:
        uint8 array of shape (size, size, 4): yellow disc, dark eyes and mouth
    """
    if size < 5:
        raise ValueError(f"Smiley size must be at least 5, got {size}")

    rows, cols = np.mgrid[0:size, 0:size]
    centre = (size - 1) / 2.0
    radius = size / 2.0
    distance = np.hypot(rows - centre, cols - centre)

    image = np.zeros((size, size, 4), dtype=np.uint8)
    face = distance <= radius
    image[face] = (255, 220, 0, 255)

    eye_row = int(round(size * 0.3))
    for eye_col in (int(round(size * 0.3)), int(round(size * 0.7)) - 1):
        image[eye_row, eye_col] = (40, 40, 40, 255)

    mouth_row = int(round(size * 0.7))
    image[mouth_row, int(round(size * 0.3)):int(round(size * 0.7))] = (40, 40, 40, 255)

    return image
