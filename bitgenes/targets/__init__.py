"""
Ready-made scoring functions

Targets for demos and tests: integer guessing and image approximation.
"""

from .integer_target import IntegerTarget
from .image_target import ImageTarget, smiley

__all__ = [
    "IntegerTarget",
    "ImageTarget",
    "smiley",
]
