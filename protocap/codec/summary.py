"""Summary of a captured CodeGeneratorRequest."""

from google.protobuf.message import Message

from .decoder import decode_with_registry, load_registry
from .types import Form, MessageKind, RequestSummary


def _set_extensions(message: Message, found: set[str]) -> None:
    for field, value in message.ListFields():
        if field.is_extension:
            found.add(field.full_name)
        if field.message_type is None:
            continue
        if isinstance(value, Message):
            _set_extensions(value, found)
            continue
        # repeated or map field
        items = value.values() if hasattr(value, "values") else value
        for item in items:
            if isinstance(item, Message):
                _set_extensions(item, found)


def _compiler_version(request: Message) -> str | None:
    if not request.HasField("compiler_version"):
        return None
    version = request.compiler_version
    return f"{version.major}.{version.minor}.{version.patch}{version.suffix}"


def summarize(data: bytes, form: Form = Form.BINARY) -> RequestSummary:
    """Decode a request and describe what it asks for."""
    registry = load_registry(data, form)
    request = decode_with_registry(data, MessageKind.REQUEST.type_name, registry, form)

    extensions: set[str] = set()
    _set_extensions(request, extensions)

    return RequestSummary(
        files_to_generate=list(request.file_to_generate),
        parameter=request.parameter,
        compiler_version=_compiler_version(request),
        proto_files=len(request.proto_file),
        message_types=len(registry.messages),
        enum_types=len(registry.enums),
        extensions=len(registry.extensions),
        resolved_extensions=sorted(extensions),
    )
