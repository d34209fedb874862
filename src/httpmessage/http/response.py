"""Immutable HTTP response.

Adds a status code and reason phrase to ``Message``. Status codes are
limited to the recommended reason-phrase table.
"""

from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Self

from httpmessage.errors import InvalidArgumentError
from httpmessage.http.message import Message
from httpmessage.http.status import REASON_PHRASES
from httpmessage.validation import is_valid


@dataclass(frozen=True, slots=True)
class Response(Message):
    """An HTTP response built through immutable transformations.

    Start from the default ``200 OK`` and chain ``.with_*()`` calls::

        response = Response().with_status(404).with_header("Content-Type", "text/plain")
    """

    status_code: int = 200
    reason_phrase: str = "OK"

    @staticmethod
    def recommended_reason_phrases() -> Mapping[int, str]:
        """The read-only status code → reason phrase table."""
        return REASON_PHRASES

    def with_status(self, code: int, reason_phrase: str | None = None) -> Self:
        """Return a copy with status *code*.

        Without *reason_phrase* the recommended phrase for *code* is used.

        Raises:
            InvalidArgumentError: If *code* is not an integer in the table.
        """
        if not is_valid("status_code", code):
            msg = f"Trying to create a response with an invalid status code {code!r}."
            raise InvalidArgumentError(msg)
        if reason_phrase is None:
            reason_phrase = REASON_PHRASES[code]
        return replace(self, status_code=code, reason_phrase=reason_phrase)

    def render_status_line(self) -> str:
        """``HTTP/{version} {code} {reason}``, as written on the wire."""
        return f"HTTP/{self.protocol_version} {self.status_code} {self.reason_phrase}".strip()
