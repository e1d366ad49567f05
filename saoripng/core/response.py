"""SAORI/1.0 response model and serialization.

Response format:

    SAORI/1.0 200 OK
    Charset: Shift_JIS
    Result: 0
    Value0: ...

Result and Value lines are only written for ``200 OK``. The status follows
the content: any non-empty result or value means OK, otherwise No Content.
Bad Request and Internal Server Error are sticky once set.
"""

from enum import Enum
from typing import Iterable, List, Tuple

from saoripng.core import charset as chars
from saoripng.core.charset import CharsetDecodeError, SaoriCharset
from saoripng.core.request import SaoriRequest, SaoriVersion


class SaoriStatus(Enum):
    OK = (200, "OK")
    NO_CONTENT = (204, "No Content")
    BAD_REQUEST = (400, "Bad Request")
    INTERNAL_SERVER_ERROR = (500, "Internal Server Error")

    @property
    def code(self) -> int:
        return self.value[0]

    @property
    def phrase(self) -> str:
        return self.value[1]


_STICKY = (SaoriStatus.BAD_REQUEST, SaoriStatus.INTERNAL_SERVER_ERROR)


class ResponseEncodeError(Exception):
    """Raised when the response text cannot be encoded in its charset."""


class SaoriResponse:
    """
    Response under construction for a single request.

    Use ``from_request`` for a well-formed request and ``bad_request`` for a
    rejected one; then set ``result``/``value`` and call ``to_bytes`` once.
    """

    def __init__(
        self,
        version: SaoriVersion,
        status: SaoriStatus,
        charset: SaoriCharset,
    ):
        self._version = version
        self._status = status
        self._charset = charset
        self._result = ""
        self._value: List[str] = []

    @classmethod
    def from_request(cls, request: SaoriRequest) -> "SaoriResponse":
        return cls(request.version, SaoriStatus.NO_CONTENT, request.charset)

    @classmethod
    def bad_request(cls) -> "SaoriResponse":
        return cls(SaoriVersion.V1_0, SaoriStatus.BAD_REQUEST, SaoriCharset.UTF_8)

    @property
    def version(self) -> SaoriVersion:
        return self._version

    @property
    def charset(self) -> SaoriCharset:
        return self._charset

    @property
    def status(self) -> SaoriStatus:
        return self._status

    @property
    def result(self) -> str:
        return self._result

    @result.setter
    def result(self, result: str) -> None:
        self._result = result
        self._on_content_changed()

    @property
    def value(self) -> Tuple[str, ...]:
        return tuple(self._value)

    @value.setter
    def value(self, value: Iterable[str]) -> None:
        self._value = list(value)
        self._on_content_changed()

    def mark_internal_error(self) -> None:
        """Switch to Internal Server Error unless the request was already rejected."""
        if self._status is not SaoriStatus.BAD_REQUEST:
            self._status = SaoriStatus.INTERNAL_SERVER_ERROR

    def _on_content_changed(self) -> None:
        if self._status in _STICKY:
            return
        if self._result or self._value:
            self._status = SaoriStatus.OK
        else:
            self._status = SaoriStatus.NO_CONTENT

    def to_text(self) -> str:
        """Render the response as protocol text, NUL terminator included."""
        lines = [
            f"{self._version.value} {self._status.code} {self._status.phrase}",
            f"Charset: {self._charset.value}",
        ]
        if self._status is SaoriStatus.OK:
            if self._result:
                lines.append(f"Result: {self._result}")
            lines.extend(f"Value{index}: {value}" for index, value in enumerate(self._value))

        return "".join(f"{line}\r\n" for line in lines) + "\r\n" + chars.TERMINATOR

    def to_bytes(self) -> bytes:
        """
        Encode the response for the wire using its charset.

        Raises:
            ResponseEncodeError: If the text is not representable in the charset
        """
        try:
            return chars.encode(self.to_text(), self._charset.codepage)
        except CharsetDecodeError as e:
            raise ResponseEncodeError(str(e)) from e

    def __repr__(self) -> str:
        return (
            f"SaoriResponse(status={self._status.name}, result={self._result!r}, "
            f"value={self._value!r}, charset={self._charset.value})"
        )
