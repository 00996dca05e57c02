"""Errors raised while capturing and converting plugin messages."""

from .types import Form, MessageKind


class CaptureError(RuntimeError):
    """Base exception for all pipeline failures."""


class InputReadError(CaptureError):
    """Raised when the input stream cannot be read in full."""


class ParseError(CaptureError):
    """Raised when input bytes are not a valid message of the selected kind and form."""

    def __init__(self, form: Form, kind: MessageKind, cause: Exception) -> None:
        self.form = form
        self.kind = kind
        super().__init__(f"{form.wire_name} unmarshal error ({kind.type_name}): {cause}")


class DescriptorError(CaptureError):
    """Raised when an embedded descriptor set cannot be turned into types."""


class MarshalError(CaptureError):
    """Raised when a message cannot be serialized in the requested form."""

    def __init__(self, form: Form, cause: Exception) -> None:
        self.form = form
        super().__init__(f"{form.wire_name} marshal error: {cause}")


class OutputWriteError(CaptureError):
    """Raised when the output stream rejects the converted message."""
