"""
Image module for saoripng.
Contains output size planning and the Pillow-based resize pipeline.
"""

from .planner import plan_output_size
from .resize import ResizeErrorCode, ResizedPngError, get_image_type, to_resized_png

__all__ = [
    "plan_output_size",
    "ResizeErrorCode",
    "ResizedPngError",
    "get_image_type",
    "to_resized_png",
]
