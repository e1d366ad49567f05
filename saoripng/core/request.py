"""SAORI/1.0 request parsing.

Request format (CRLF line endings, terminated by a blank line and NUL):

    EXECUTE SAORI/1.0
    SecurityLevel: Local
    Charset: Shift_JIS
    Argument0: GetImageType
    Argument1: image/sample.png
    Sender: materia

Parsing runs in two phases: the charset header is located on a lossy
ASCII-compatible view of the raw bytes, then the whole buffer is decoded
with that charset and the header lines are parsed from the decoded text.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional, Tuple

from saoripng.core import charset as chars
from saoripng.core.charset import CharsetDecodeError, SaoriCharset

logger = logging.getLogger(__name__)

CHARSET_PREFIX = "Charset: "
SECURITY_LEVEL_PREFIX = "SecurityLevel: "
ARGUMENT_PREFIX = "Argument"
SENDER_PREFIX = "Sender: "
HEADER_SEPARATOR = ": "

_INDEX_RE = re.compile(r"[0-9]+")


class SaoriVersion(Enum):
    V1_0 = "SAORI/1.0"


class SaoriCommand(Enum):
    EXECUTE = "EXECUTE"
    GET_VERSION = "GET Version"


class SaoriSecurityLevel(Enum):
    LOCAL = "Local"
    EXTERNAL = "External"


class CharsetErrorReason(Enum):
    DECODE_FAILED = "decode_failed"


class VersionLineErrorReason(Enum):
    EMPTY_REQUEST = "empty_request"
    NO_VERSION = "no_version"
    NO_COMMAND = "no_command"


class ArgumentErrorReason(Enum):
    INVALID_SEPARATOR = "invalid_separator"
    NO_INDEX = "no_index"


class SaoriRequestError(Exception):
    """Base class for malformed requests. ``reason`` names the leaf cause."""

    reason: Enum

    def __init__(self, reason: Enum, detail: str = ""):
        self.reason = reason
        self.detail = detail
        message = f"{type(self).__name__}: {reason.value}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class RequestCharsetError(SaoriRequestError):
    """The request body could not be decoded with its declared charset."""


class VersionLineError(SaoriRequestError):
    """The first line lacks the protocol version or a known command."""


class ArgumentError(SaoriRequestError):
    """An ``Argument<N>`` line is malformed."""


def iter_lines(text: str) -> Iterator[str]:
    """
    Split text into protocol lines.

    Lines end at LF with an optional preceding CR; a trailing line break
    does not produce an extra empty line.
    """
    if not text:
        return
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith("\r") else line


@dataclass(frozen=True)
class SaoriRequest:
    """A parsed SAORI request. ``argument`` has no gaps: skipped indices hold ``""``."""

    version: SaoriVersion
    command: SaoriCommand
    security_level: Optional[SaoriSecurityLevel]
    argument: Tuple[str, ...]
    charset: SaoriCharset
    sender: Optional[str]

    @classmethod
    def from_bytes(cls, data: bytes) -> "SaoriRequest":
        """
        Parse raw request bytes.

        Args:
            data: Request bytes as handed over by the host, NUL terminator included

        Returns:
            The parsed request

        Raises:
            RequestCharsetError: If the body cannot be decoded
            VersionLineError: If the first line is empty or malformed
            ArgumentError: If an Argument line is malformed
        """
        body, charset = cls.decode_bytes(data)
        version, command = cls.parse_version_line(body)

        security_level: Optional[SaoriSecurityLevel] = None
        argument: List[str] = []
        sender: Optional[str] = None

        for line in iter_lines(body):
            if security_level is None:
                security_level = cls.parse_security_level(line)
            cls.parse_argument(line, argument)
            if sender is None:
                sender = cls.parse_sender(line)

        logger.debug(
            f"Parsed {command.value} request: charset={charset.value}, "
            f"{len(argument)} argument(s), sender={sender!r}"
        )

        return cls(
            version=version,
            command=command,
            security_level=security_level,
            argument=tuple(argument),
            charset=charset,
            sender=sender,
        )

    @staticmethod
    def detect_charset(data: bytes) -> SaoriCharset:
        """
        Find the declared charset on a lossy view of the raw bytes.

        The last ``Charset:`` line decides; an unknown name or a missing
        header selects Shift_JIS.
        """
        preview = bytes(data).decode("utf-8", errors="replace")
        detected = chars.DEFAULT_CHARSET

        for line in iter_lines(preview):
            if not line.startswith(CHARSET_PREFIX):
                continue
            detected = chars.DEFAULT_CHARSET
            for candidate in SaoriCharset:
                if line.endswith(candidate.value):
                    detected = candidate
                    break

        return detected

    @classmethod
    def decode_bytes(cls, data: bytes) -> Tuple[str, SaoriCharset]:
        """Detect the charset and decode the entire buffer with it."""
        charset = cls.detect_charset(data)
        try:
            body = chars.decode(data, charset.codepage)
        except CharsetDecodeError as e:
            raise RequestCharsetError(CharsetErrorReason.DECODE_FAILED, str(e)) from e
        return body, charset

    @staticmethod
    def parse_version_line(body: str) -> Tuple[SaoriVersion, SaoriCommand]:
        """
        Parse the request line into version and command.

        Raises:
            VersionLineError: EMPTY_REQUEST, NO_VERSION or NO_COMMAND
        """
        first_line = next(iter_lines(body), None)
        if first_line is None:
            raise VersionLineError(VersionLineErrorReason.EMPTY_REQUEST)

        if not first_line.endswith(SaoriVersion.V1_0.value):
            raise VersionLineError(VersionLineErrorReason.NO_VERSION, first_line)
        version = SaoriVersion.V1_0

        for command in (SaoriCommand.EXECUTE, SaoriCommand.GET_VERSION):
            if first_line.startswith(command.value):
                return version, command

        raise VersionLineError(VersionLineErrorReason.NO_COMMAND, first_line)

    @staticmethod
    def parse_security_level(line: str) -> Optional[SaoriSecurityLevel]:
        if not line.startswith(SECURITY_LEVEL_PREFIX):
            return None
        for level in SaoriSecurityLevel:
            if line.endswith(level.value):
                return level
        return None

    @staticmethod
    def parse_argument(line: str, argument: List[str]) -> None:
        """
        Store an ``Argument<N>: value`` line into ``argument``.

        The list grows with empty strings until index N exists; a later line
        with the same index overwrites the earlier value. Lines that do not
        start with ``Argument`` are left alone.

        Raises:
            ArgumentError: INVALID_SEPARATOR or NO_INDEX
        """
        if not line.startswith(ARGUMENT_PREFIX):
            return

        header, separator, value = line.partition(HEADER_SEPARATOR)
        if not separator:
            raise ArgumentError(ArgumentErrorReason.INVALID_SEPARATOR, line)

        index_text = header[len(ARGUMENT_PREFIX):]
        if not _INDEX_RE.fullmatch(index_text):
            raise ArgumentError(ArgumentErrorReason.NO_INDEX, header)
        index = int(index_text)

        while len(argument) <= index:
            argument.append("")
        argument[index] = value

    @staticmethod
    def parse_sender(line: str) -> Optional[str]:
        if not line.startswith(SENDER_PREFIX):
            return None
        return line[len(SENDER_PREFIX):]
