"""
Tests for host/plugin.py - the load/request/unload surface.

Requests go in as raw bytes and responses are checked byte for byte.
"""

import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from PIL import Image

from saoripng import __version__
from saoripng.core.configs import PluginSettings
from saoripng.host import SaoriPlugin
from saoripng.core.context import PluginContext


class TestSaoriPlugin(unittest.TestCase):
    """Test cases for SaoriPlugin."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.plugin = SaoriPlugin(PluginContext(base_dir=self.temp_dir))
        self.plugin.load()

    def tearDown(self):
        self.plugin.unload()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_load_and_unload(self):
        self.assertTrue(self.plugin.loaded)
        self.assertTrue(self.plugin.unload())
        self.assertFalse(self.plugin.loaded)
        self.assertTrue(self.plugin.load())

    def test_get_version(self):
        reply = self.plugin.request(b"GET Version SAORI/1.0\r\nCharset: UTF-8\r\n\r\n\0")
        expected = f"SAORI/1.0 200 OK\r\nCharset: UTF-8\r\nResult: {__version__}\r\n\r\n\0"
        self.assertEqual(reply, expected.encode("utf-8"))

    def test_execute_without_arguments(self):
        reply = self.plugin.request(b"EXECUTE SAORI/1.0\r\nCharset: Shift_JIS\r\n\r\n\0")
        self.assertEqual(reply, b"SAORI/1.0 204 No Content\r\nCharset: Shift_JIS\r\n\r\n\0")

    def test_malformed_request(self):
        reply = self.plugin.request(b"EXECUTE SAORI/1.0\r\nArgument 0\r\n\r\n\0")
        self.assertEqual(reply, b"SAORI/1.0 400 Bad Request\r\nCharset: UTF-8\r\n\r\n\0")

    def test_undecodable_request(self):
        reply = self.plugin.request(b"EXECUTE SAORI/1.0\r\nCharset: UTF-8\r\nArgument0: \xff\r\n\r\n\0")
        self.assertTrue(reply.startswith(b"SAORI/1.0 400 Bad Request\r\n"))

    def test_get_image_type_with_japanese_path(self):
        folder = self.temp_dir / "画像"
        folder.mkdir()
        Image.new("RGB", (4, 4)).save(folder / "写真.gif")

        data = (
            "EXECUTE SAORI/1.0\r\n"
            "Charset: UTF-8\r\n"
            "Argument0: GetImageType\r\n"
            "Argument1: 画像/写真.gif\r\n"
            "\r\n\0"
        ).encode("utf-8")

        self.assertEqual(
            self.plugin.request(data),
            b"SAORI/1.0 200 OK\r\nCharset: UTF-8\r\nResult: GIF\r\n\r\n\0",
        )

    def test_to_resized_png_in_shift_jis(self):
        Image.new("RGBA", (100, 200), (0, 0, 255, 255)).save(self.temp_dir / "元.png")

        data = (
            "EXECUTE SAORI/1.0\r\n"
            "SecurityLevel: Local\r\n"
            "Argument0: ToResizedPng\r\n"
            "Argument1: 元.png\r\n"
            "Argument2: 先.png\r\n"
            "Argument3: -1\r\n"
            "Argument4: 100\r\n"
            "\r\n\0"
        ).encode("cp932")

        reply = self.plugin.request(data)

        self.assertEqual(reply, b"SAORI/1.0 200 OK\r\nCharset: Shift_JIS\r\nResult: 0\r\n\r\n\0")
        with Image.open(self.temp_dir / "先.png") as result:
            self.assertEqual(result.size, (50, 100))

    def test_handler_exception_gives_internal_error(self):
        with patch("saoripng.host.plugin.dispatch", side_effect=RuntimeError("boom")):
            reply = self.plugin.request(b"EXECUTE SAORI/1.0\r\nCharset: UTF-8\r\n\r\n\0")
        self.assertEqual(
            reply, b"SAORI/1.0 500 Internal Server Error\r\nCharset: UTF-8\r\n\r\n\0"
        )

    def test_unencodable_response_gives_empty_reply(self):
        def emit_emoji(context, request, response, max_pixels=None):
            response.result = "😀"

        with patch("saoripng.host.plugin.dispatch", side_effect=emit_emoji):
            reply = self.plugin.request(b"EXECUTE SAORI/1.0\r\nCharset: Shift_JIS\r\n\r\n\0")
        self.assertEqual(reply, b"")

    def test_max_image_pixels_is_passed_to_commands(self):
        plugin = SaoriPlugin(PluginContext(base_dir=self.temp_dir), max_image_pixels=12)
        with patch("saoripng.host.plugin.dispatch") as mock_dispatch:
            plugin.request(b"EXECUTE SAORI/1.0\r\n\r\n\0")
        self.assertEqual(mock_dispatch.call_args.kwargs["max_pixels"], 12)


class TestFromSettings(unittest.TestCase):
    """Test cases for SaoriPlugin.from_settings."""

    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_module_path_file_uses_its_directory(self):
        plugin = SaoriPlugin.from_settings(PluginSettings(), self.temp_dir / "saori_png.dll")
        self.assertEqual(plugin.context.base_dir, self.temp_dir)

    def test_module_path_directory(self):
        plugin = SaoriPlugin.from_settings(PluginSettings(), str(self.temp_dir))
        self.assertEqual(plugin.context.base_dir, self.temp_dir)

    def test_configured_base_dir_wins(self):
        configured = self.temp_dir / "configured"
        configured.mkdir()
        settings = PluginSettings(base_dir=configured, max_image_pixels=500)

        plugin = SaoriPlugin.from_settings(settings, self.temp_dir / "saori_png.dll")

        self.assertEqual(plugin.context.base_dir, configured)
        self.assertEqual(plugin.max_image_pixels, 500)

    def test_defaults_to_working_directory(self):
        plugin = SaoriPlugin.from_settings(PluginSettings())
        self.assertEqual(plugin.context.base_dir, Path.cwd())


if __name__ == "__main__":
    unittest.main()
