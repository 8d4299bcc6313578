# crossloom/unwrapper.py
"""Crossref-specific response unwrapping.

The Crossref REST API wraps every payload in the same envelope:

```json
{
    "status": "ok",
    "message-type": "work-list",
    "message-version": "1.0.0",
    "message": {
        "next-cursor": "AoJ...",
        "total-results": 1000,
        "items-per-page": 20,
        "items": [{"DOI": "10.1000/1"}, {"DOI": "10.1000/2"}]
    }
}
```

The unwrapper turns decoded JSON into a :class:`ResponseEnvelope` and
exposes the list and pagination parts of it.
"""

from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .exceptions import ResponseDecodeError, UnexpectedMessageError
from .models.base import ResponseEnvelope


class CrossrefUnwrapper:
    """Decodes Crossref envelopes and extracts their parts."""

    def unwrap(self, response_json: Any) -> ResponseEnvelope:
        """Validate the outer envelope of a decoded response.

        Args:
            response_json: The decoded JSON body.

        Returns:
            ResponseEnvelope: The envelope, message left undecoded.

        Raises:
            ResponseDecodeError: If the body is not a Crossref envelope.
        """
        if not isinstance(response_json, dict):
            raise ResponseDecodeError(
                f"Response JSON must be an object, got {type(response_json).__name__}"
            )
        try:
            return ResponseEnvelope.model_validate(response_json)
        except PydanticValidationError as e:
            raise ResponseDecodeError(f"Malformed Crossref envelope: {e}") from e

    def unwrap_results(self, envelope: ResponseEnvelope) -> list[dict[str, Any]]:
        """Return the items of a list message, or an empty list."""
        return envelope.items

    def unwrap_single_item(
        self, envelope: ResponseEnvelope, expected_type: str | None = None
    ) -> dict[str, Any]:
        """Return the record carried by a single item message.

        Args:
            envelope: The decoded envelope.
            expected_type: The message type the caller asked for, e.g. ``work``.

        Raises:
            UnexpectedMessageError: If the message type differs from
                ``expected_type`` or the message is not a record.
        """
        if expected_type is not None and envelope.message_type != expected_type:
            raise UnexpectedMessageError(expected_type, envelope.message_type)
        if not isinstance(envelope.message, dict):
            raise UnexpectedMessageError(
                expected_type or "record", envelope.message_type
            )
        return envelope.message

    def get_next_page_token(self, envelope: ResponseEnvelope) -> str | None:
        return envelope.next_cursor

    def get_total_results(self, envelope: ResponseEnvelope) -> int | None:
        total = envelope.total_results
        if total is None:
            return None
        try:
            return int(total)
        except (TypeError, ValueError):
            return None
