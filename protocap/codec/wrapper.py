"""Wrapping of encoded messages into a CodeGeneratorResponse."""

from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2
from google.protobuf.message import Message

from . import registry as _registry
from .types import DEFAULT_ARTIFACT_NAME, RESPONSE_TYPE

SUPPORTED_FEATURES = plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL


def _byte_content_response() -> Message:
    """Return an empty response whose file content field is typed ``bytes``.

    Identical on the wire to CodeGeneratorResponse, but able to carry
    content that is not valid UTF-8.
    """
    plugin_file = _registry.bundled_file(plugin_pb2.DESCRIPTOR)
    response = next(m for m in plugin_file.message_type if m.name == "CodeGeneratorResponse")
    file_entry = next(m for m in response.nested_type if m.name == "File")
    content = next(f for f in file_entry.field if f.name == "content")
    content.type = descriptor_pb2.FieldDescriptorProto.TYPE_BYTES
    return _registry.build([plugin_file]).new_message(RESPONSE_TYPE)


def wrap(content: bytes, file_name: str = DEFAULT_ARTIFACT_NAME) -> Message:
    """Embed ``content`` as the single generated file ``file_name``."""
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError:
        response = _byte_content_response()
        response.file.add(name=file_name, content=content)
    else:
        response = plugin_pb2.CodeGeneratorResponse()
        response.file.add(name=file_name, content=text)
    response.supported_features = SUPPORTED_FEATURES
    return response
