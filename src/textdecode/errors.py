"""Error taxonomy shared by the engine and the boundary layer."""

from __future__ import annotations

from textdecode.kinds import EncodingKind


class TextDecodeError(Exception):
    """Base class for every error raised by textdecode."""


class ValidationError(TextDecodeError):
    """Malformed request: empty text, unknown mode, non-integer shift, bad config."""


class DecodeError(TextDecodeError):
    """A decoder could not interpret its input under the given kind."""

    def __init__(self, kind: EncodingKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class UnsupportedKindError(TextDecodeError):
    """An encoding outside the fixed enumeration was requested."""


class FileRejectedError(TextDecodeError):
    """Uploaded file has a disallowed extension, is too large, or is not UTF-8."""
