"""Image type probing and resize-to-PNG.

Decoding, resampling and PNG encoding are done with Pillow. Failures are
reported as ResizedPngError carrying one of the stable numeric codes that
the ToResizedPng command hands back to the caller.
"""

import logging
from enum import IntEnum
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from saoripng.image.planner import plan_output_size

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

UNKNOWN = "UNKNOWN"

IMAGE_TYPES = (
    "PNG",
    "JPEG",
    "BMP",
    "GIF",
    "WEBP",
    "TIFF",
    "ICO",
    "TGA",
    "HDR",
    "DDS",
    "PNM",
    "FARBFELD",
    "OPENEXR",
    "AVIF",
)

# Pillow format id -> image type tag
_PILLOW_FORMATS: Dict[str, str] = {
    "PNG": "PNG",
    "JPEG": "JPEG",
    "MPO": "JPEG",
    "BMP": "BMP",
    "DIB": "BMP",
    "GIF": "GIF",
    "WEBP": "WEBP",
    "TIFF": "TIFF",
    "ICO": "ICO",
    "TGA": "TGA",
    "DDS": "DDS",
    "PPM": "PNM",
    "AVIF": "AVIF",
}

# Formats Pillow cannot open, recognised by their leading bytes.
_SIGNATURES: Tuple[Tuple[bytes, str], ...] = (
    (b"#?RADIANCE", "HDR"),
    (b"#?RGBE", "HDR"),
    (b"farbfeld", "FARBFELD"),
    (b"\x76\x2f\x31\x01", "OPENEXR"),
)

_AVIF_BRANDS = (b"ftypavif", b"ftypavis")

_EXTRA_EXTENSIONS: Dict[str, str] = {
    ".hdr": "HDR",
    ".ff": "FARBFELD",
    ".exr": "OPENEXR",
    ".avif": "AVIF",
    ".pnm": "PNM",
}


class ResizeErrorCode(IntEnum):
    UNSUPPORTED = 1
    NOT_FOUND = 2
    IO_ERROR = 3
    DECODING = 4
    ENCODING = 5
    PARAMETER = 6
    LIMITS = 7
    INPUT_SIZE = 8


class ResizedPngError(Exception):
    """A ToResizedPng failure. ``code`` is the value returned in Result."""

    def __init__(self, code: ResizeErrorCode, detail: str = ""):
        self.code = code
        self.detail = detail
        super().__init__(f"{code.name.lower()}: {detail}" if detail else code.name.lower())


def _from_os_error(e: OSError) -> ResizedPngError:
    if isinstance(e, FileNotFoundError):
        return ResizedPngError(ResizeErrorCode.NOT_FOUND, str(e))
    return ResizedPngError(ResizeErrorCode.IO_ERROR, str(e))


def _sniff_signature(path: Path) -> Optional[str]:
    with open(path, "rb") as f:
        head = f.read(16)
    for signature, image_type in _SIGNATURES:
        if head.startswith(signature):
            return image_type
    if head[4:12] in _AVIF_BRANDS:
        return "AVIF"
    return None


def _type_from_extension(path: Path) -> Optional[str]:
    extension = path.suffix.lower()
    if extension in _EXTRA_EXTENSIONS:
        return _EXTRA_EXTENSIONS[extension]
    pillow_format = Image.registered_extensions().get(extension)
    return _PILLOW_FORMATS.get(pillow_format or "")


def get_image_type(path: PathLike) -> str:
    """
    Identify the format of an image file.

    The file content decides; when it is not recognised, the file extension
    is used instead. Missing or unreadable files are UNKNOWN.

    Args:
        path: Image file path

    Returns:
        One of IMAGE_TYPES, or "UNKNOWN"
    """
    path = Path(path)
    try:
        with Image.open(path) as image:
            detected = _PILLOW_FORMATS.get(image.format or "")
    except UnidentifiedImageError:
        try:
            detected = _sniff_signature(path)
        except OSError as e:
            logger.debug(f"Cannot read {path}: {e}")
            return UNKNOWN
        if detected is None:
            detected = _type_from_extension(path)
    except Image.DecompressionBombError as e:
        logger.debug(f"Refusing to probe {path}: {e}")
        return UNKNOWN
    except OSError as e:
        logger.debug(f"Cannot open {path}: {e}")
        return UNKNOWN

    return detected or UNKNOWN


def _open_image(src_path: Path) -> Image.Image:
    try:
        return Image.open(src_path)
    except UnidentifiedImageError as e:
        raise ResizedPngError(ResizeErrorCode.UNSUPPORTED, str(e)) from e
    except Image.DecompressionBombError as e:
        raise ResizedPngError(ResizeErrorCode.LIMITS, str(e)) from e
    except OSError as e:
        raise _from_os_error(e) from e


def _check_pixel_limit(width: int, height: int, max_pixels: Optional[int]) -> None:
    if max_pixels is not None and width * height > max_pixels:
        raise ResizedPngError(
            ResizeErrorCode.LIMITS,
            f"{width}x{height} exceeds the limit of {max_pixels} pixels",
        )


def _to_8bit(image: Image.Image) -> Image.Image:
    """Scale 16-bit grayscale down to 8-bit; Pillow's own conversion clips."""
    if image.mode != "I" and not image.mode.startswith("I;16"):
        return image
    wide = image if image.mode == "I" else image.convert("I")
    return wide.point(lambda v: v * (1 / 257)).convert("L")


def _decode_rgba(src_path: Path, max_pixels: Optional[int]) -> Image.Image:
    """Decode ``src_path`` into a straight-alpha RGBA image."""
    with _open_image(src_path) as image:
        width, height = image.size
        if width == 0 or height == 0:
            raise ResizedPngError(ResizeErrorCode.INPUT_SIZE, f"{width}x{height}")
        _check_pixel_limit(width, height, max_pixels)

        try:
            image.load()
            return _to_8bit(image).convert("RGBA")
        except MemoryError as e:
            raise ResizedPngError(ResizeErrorCode.LIMITS, "out of memory while decoding") from e
        except (OSError, ValueError, EOFError) as e:
            raise ResizedPngError(ResizeErrorCode.DECODING, str(e)) from e


def _resize_lanczos(source: Image.Image, size: Tuple[int, int]) -> Image.Image:
    """Lanczos-3 resize computed on premultiplied alpha, returned as straight RGBA."""
    try:
        with source.convert("RGBa") as premultiplied:
            with premultiplied.resize(size, Image.Resampling.LANCZOS) as resized:
                return resized.convert("RGBA")
    except MemoryError as e:
        raise ResizedPngError(ResizeErrorCode.LIMITS, f"cannot allocate {size[0]}x{size[1]}") from e
    except (ValueError, OverflowError) as e:
        raise ResizedPngError(ResizeErrorCode.PARAMETER, str(e)) from e


def _save_png(image: Image.Image, dist_path: Path) -> None:
    try:
        image.save(dist_path, format="PNG")
    except OSError as e:
        # Pillow's encoder failures are OSErrors without an errno.
        if e.errno is None:
            raise ResizedPngError(ResizeErrorCode.ENCODING, str(e)) from e
        raise _from_os_error(e) from e
    except ValueError as e:
        raise ResizedPngError(ResizeErrorCode.ENCODING, str(e)) from e


def to_resized_png(
    src_path: PathLike,
    dist_path: PathLike,
    width_command: int,
    height_command: int,
    max_pixels: Optional[int] = None,
) -> None:
    """
    Resize an image and write it as PNG.

    When both directives are negative there is no target size and nothing
    is written; that still counts as success.

    Args:
        src_path: Source image, any format Pillow can decode
        dist_path: Destination PNG path
        width_command: Width directive (see plan_output_size)
        height_command: Height directive (see plan_output_size)
        max_pixels: Optional cap on source and output pixel counts

    Raises:
        ResizedPngError: With the code describing the failure
    """
    src_path = Path(src_path)
    dist_path = Path(dist_path)

    with _decode_rgba(src_path, max_pixels) as source:
        size = plan_output_size(width_command, height_command, source.width, source.height)
        if size is None:
            logger.debug(f"No target size for {src_path}, skipping")
            return
        _check_pixel_limit(size[0], size[1], max_pixels)

        logger.debug(f"Resizing {src_path} {source.width}x{source.height} -> {size[0]}x{size[1]}")
        output = _resize_lanczos(source, size)

    with output:
        _save_png(output, dist_path)
