"""Decoding of plugin requests and responses.

Requests are decoded twice. The first pass only knows the static layout of
CodeGeneratorRequest, which is enough to recover ``proto_file``. Those
descriptors are turned into a TypeRegistry, and the same input is decoded
again with classes from that registry, so extensions declared by the request
(custom options, typically) come out as named fields.
"""

from google.protobuf import json_format
from google.protobuf.compiler import plugin_pb2
from google.protobuf.message import DecodeError, Message

from ..logging import get_logger
from . import registry as _registry
from .errors import ParseError
from .registry import TypeRegistry
from .types import Form, MessageKind

logger = get_logger("codec.decoder")

_STATIC_TYPES: dict[MessageKind, type[Message]] = {
    MessageKind.REQUEST: plugin_pb2.CodeGeneratorRequest,
    MessageKind.RESPONSE: plugin_pb2.CodeGeneratorResponse,
}


def _parse_into(
    message: Message,
    data: bytes,
    form: Form,
    kind: MessageKind,
    *,
    registry: TypeRegistry | None = None,
    ignore_unknown_fields: bool = False,
) -> None:
    try:
        if form is Form.TEXT:
            # json_format accepts any top-level JSON value and leaves the message empty
            head = data.lstrip()[:1]
            if head not in (b"{", "{"):
                raise ParseError(form, kind, ValueError("top-level JSON value must be an object"))
            json_format.Parse(
                data,
                message,
                ignore_unknown_fields=ignore_unknown_fields,
                descriptor_pool=registry.pool if registry else None,
            )
        else:
            message.ParseFromString(data)
    except (DecodeError, json_format.ParseError, UnicodeDecodeError) as exc:
        raise ParseError(form, kind, exc) from exc


def decode_generic(
    data: bytes,
    kind: MessageKind,
    form: Form = Form.BINARY,
    *,
    ignore_unknown_fields: bool = False,
) -> Message:
    """Decode using only the statically known message layout.

    Fields outside that layout are kept as unknown fields in binary input;
    in JSON input they fail unless ``ignore_unknown_fields`` is set. File
    contents of a response are left as they are, even if they hold
    serialized protos.
    """
    message = _STATIC_TYPES[kind]()
    _parse_into(message, data, form, kind, ignore_unknown_fields=ignore_unknown_fields)
    return message


def decode_with_registry(
    data: bytes,
    type_name: str,
    registry: TypeRegistry,
    form: Form = Form.BINARY,
    *,
    kind: MessageKind = MessageKind.REQUEST,
) -> Message:
    """Decode a message of any type known to ``registry``.

    Extensions registered for the message, or for any message nested in it,
    are resolved to typed values.
    """
    message = registry.new_message(type_name)
    _parse_into(message, data, form, kind, registry=registry)
    return message


def load_registry(data: bytes, form: Form = Form.BINARY) -> TypeRegistry:
    """Build the registry for the descriptors embedded in a request."""
    logger.debug("Bootstrap pass: reading embedded descriptors")
    bootstrap = decode_generic(data, MessageKind.REQUEST, form, ignore_unknown_fields=True)
    return _registry.build(bootstrap.proto_file)


def decode_request(data: bytes, form: Form = Form.BINARY) -> Message:
    """Decode a CodeGeneratorRequest with its extensions resolved.

    Extensions whose declarations are themselves only reachable through
    another extension are not discovered.

    Raises:
        ParseError: If the input is not a valid request in either pass.
        DescriptorError: If the embedded descriptors cannot be loaded.
    """
    registry = load_registry(data, form)
    logger.debug("Resolved pass: decoding with %d extensions", len(registry.extensions))
    return decode_with_registry(data, MessageKind.REQUEST.type_name, registry, form)


def decode(data: bytes, kind: MessageKind, form: Form = Form.BINARY) -> Message:
    """Decode input of the given kind and form."""
    if kind is MessageKind.REQUEST:
        return decode_request(data, form)
    return decode_generic(data, kind, form)
