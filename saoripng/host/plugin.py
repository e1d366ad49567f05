"""Host adapter for the SAORI plugin.

The host process calls ``load`` once with the plugin location, then
``request`` once per message with raw request bytes, and finally
``unload``. Each request gets a fresh request/response pair; nothing is
carried over between calls.

Usage:
    plugin = SaoriPlugin.from_settings(get_plugin_settings(), module_path)
    plugin.load()
    reply = plugin.request(raw_bytes)
"""

import logging
from pathlib import Path
from typing import Optional, Union

from saoripng import __version__
from saoripng.core.configs import PluginSettings
from saoripng.core.context import PluginContext
from saoripng.core.procedure import dispatch
from saoripng.core.request import SaoriRequest, SaoriRequestError
from saoripng.core.response import ResponseEncodeError, SaoriResponse

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "WARNING") -> None:
    """Configure root logging for the plugin process."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


class SaoriPlugin:
    """
    One loaded plugin instance.

    Holds only the immutable PluginContext and settings; every request is
    handled independently.
    """

    def __init__(
        self,
        context: PluginContext,
        max_image_pixels: Optional[int] = None,
    ):
        """
        Initialize the plugin.

        Args:
            context: Plugin location used to resolve request paths
            max_image_pixels: Optional pixel cap for image operations
        """
        self.context = context
        self.max_image_pixels = max_image_pixels
        self.loaded = False

    @classmethod
    def from_settings(
        cls,
        settings: PluginSettings,
        module_path: Union[str, Path, None] = None,
    ) -> "SaoriPlugin":
        """
        Build a plugin from settings.

        ``settings.base_dir`` wins over ``module_path``; with neither, the
        current working directory is used.
        """
        if settings.base_dir is not None:
            context = PluginContext.from_module_path(settings.base_dir)
        elif module_path is not None:
            context = PluginContext.from_module_path(module_path)
        else:
            context = PluginContext(base_dir=Path.cwd())
        return cls(context, max_image_pixels=settings.max_image_pixels)

    def load(self) -> bool:
        logger.info(f"saoripng {__version__} loaded from {self.context.base_dir}")
        self.loaded = True
        return True

    def unload(self) -> bool:
        logger.info("saoripng unloaded")
        self.loaded = False
        return True

    def handle(self, data: bytes) -> SaoriResponse:
        """
        Parse and execute one request.

        Malformed requests give a Bad Request response without running any
        command. An unexpected exception inside a command gives Internal
        Server Error.
        """
        try:
            request = SaoriRequest.from_bytes(data)
        except SaoriRequestError as e:
            logger.warning(f"Rejected request: {e}")
            return SaoriResponse.bad_request()

        response = SaoriResponse.from_request(request)
        try:
            dispatch(self.context, request, response, max_pixels=self.max_image_pixels)
        except Exception as e:
            logger.exception(f"Error handling {request.command.value}: {e}")
            response.mark_internal_error()

        return response

    def request(self, data: bytes) -> bytes:
        """
        Handle raw request bytes and return raw response bytes.

        Returns an empty payload when the response cannot be encoded.
        """
        response = self.handle(data)
        try:
            return response.to_bytes()
        except ResponseEncodeError as e:
            logger.error(f"Cannot encode response as {response.charset.value}: {e}")
            return b""
