"""Output size planning for ToResizedPng.

Width/height directives:
    < 0  derive from the other axis, keeping the source aspect ratio
    == 0 keep the source size on that axis
    > 0  exact pixel size
"""

from typing import Optional, Tuple


def plan_output_size(
    width_command: int,
    height_command: int,
    input_width: int,
    input_height: int,
) -> Optional[Tuple[int, int]]:
    """
    Compute the output size for a resize.

    Derived sizes are truncated toward zero and never go below 1.

    Args:
        width_command: Width directive
        height_command: Height directive
        input_width: Source width, > 0
        input_height: Source height, > 0

    Returns:
        (width, height), or None when both directives are negative

    Raises:
        ValueError: If a source dimension is not positive
    """
    if input_width <= 0 or input_height <= 0:
        raise ValueError(f"Source size must be positive, got {input_width}x{input_height}")

    if width_command < 0 and height_command < 0:
        return None

    width_origin = input_width if width_command == 0 else width_command
    height_origin = input_height if height_command == 0 else height_command

    if width_origin < 0:
        width = int(input_width * (height_origin / input_height))
    else:
        width = width_origin

    if height_origin < 0:
        height = int(input_height * (width_origin / input_width))
    else:
        height = height_origin

    return max(width, 1), max(height, 1)
