"""Command handlers.

``GET Version`` answers with the package version. ``EXECUTE`` reads the
sub-operation name from Argument0:

    GetImageType  path                          -> image type tag
    ToResizedPng  input, output, width, height  -> "0" or an error code

Paths are relative to the plugin directory. Image failures are reported in
Result as numeric codes; they never change the protocol status.
"""

import logging
import re
from typing import Callable, Dict, Optional, Sequence

from saoripng import __version__
from saoripng.core.context import PluginContext
from saoripng.core.request import SaoriCommand, SaoriRequest
from saoripng.core.response import SaoriResponse
from saoripng.image.resize import ResizedPngError, get_image_type, to_resized_png

logger = logging.getLogger(__name__)

SUCCESS_CODE = "0"

_DIRECTIVE_RE = re.compile(r"[+-]?[0-9]+")

# Directives are signed 64-bit integers.
_DIRECTIVE_MIN = -(2 ** 63)
_DIRECTIVE_MAX = 2 ** 63 - 1


def _arg(args: Sequence[str], index: int) -> Optional[str]:
    return args[index] if index < len(args) else None


def _parse_directive(text: str) -> Optional[int]:
    if not _DIRECTIVE_RE.fullmatch(text):
        return None
    value = int(text)
    if not _DIRECTIVE_MIN <= value <= _DIRECTIVE_MAX:
        return None
    return value


def get_version(
    context: PluginContext,
    request: SaoriRequest,
    response: SaoriResponse,
) -> None:
    response.result = __version__


def get_image_type_command(
    context: PluginContext,
    args: Sequence[str],
    response: SaoriResponse,
    max_pixels: Optional[int] = None,
) -> None:
    input_path = _arg(args, 1)
    if input_path is None:
        return
    response.result = get_image_type(context.resolve(input_path))


def to_resized_png_command(
    context: PluginContext,
    args: Sequence[str],
    response: SaoriResponse,
    max_pixels: Optional[int] = None,
) -> None:
    input_path, output_path, width_text, height_text = (_arg(args, i) for i in range(1, 5))
    if input_path is None or output_path is None or width_text is None or height_text is None:
        return

    width_command = _parse_directive(width_text)
    height_command = _parse_directive(height_text)
    if width_command is None or height_command is None:
        logger.info(f"ToResizedPng ignored, invalid size: {width_text!r} x {height_text!r}")
        return

    try:
        to_resized_png(
            context.resolve(input_path),
            context.resolve(output_path),
            width_command,
            height_command,
            max_pixels=max_pixels,
        )
        response.result = SUCCESS_CODE
    except ResizedPngError as e:
        logger.warning(f"ToResizedPng failed for {input_path!r}: {e}")
        response.result = str(int(e.code))


SUB_OPERATIONS: Dict[str, Callable[..., None]] = {
    "GetImageType": get_image_type_command,
    "ToResizedPng": to_resized_png_command,
}


def execute(
    context: PluginContext,
    request: SaoriRequest,
    response: SaoriResponse,
    max_pixels: Optional[int] = None,
) -> None:
    """
    Run the EXECUTE sub-operation named by Argument0.

    Unknown or missing sub-operations leave the response untouched.
    """
    args = request.argument
    name = _arg(args, 0)
    if name is None:
        return

    handler = SUB_OPERATIONS.get(name)
    if handler is None:
        logger.debug(f"Unknown sub-operation: {name!r}")
        return

    handler(context, args, response, max_pixels=max_pixels)


def dispatch(
    context: PluginContext,
    request: SaoriRequest,
    response: SaoriResponse,
    max_pixels: Optional[int] = None,
) -> None:
    """Route a parsed request to its command handler."""
    if request.command is SaoriCommand.GET_VERSION:
        get_version(context, request, response)
    elif request.command is SaoriCommand.EXECUTE:
        execute(context, request, response, max_pixels=max_pixels)
