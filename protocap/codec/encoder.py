"""Encoding of decoded messages to deterministic binary or JSON text."""

from collections.abc import Iterator

from google.protobuf import json_format
from google.protobuf.descriptor import FieldDescriptor
from google.protobuf.message import EncodeError, Message

from .errors import MarshalError
from .types import Form

TEXT_INDENT = 2


def _undecodable_strings(message: Message, path: str = "") -> Iterator[str]:
    """Yield the paths of string fields holding bytes that are not valid UTF-8.

    The runtime hands such proto2 strings back as ``bytes``; JSON has no
    faithful rendering for them.
    """
    for field, value in message.ListFields():
        name = f"{path}{field.name}"
        item_field = field
        if isinstance(value, (str, bytes, Message)):
            items = [value]
        elif field.message_type is not None and field.message_type.GetOptions().map_entry:
            item_field = field.message_type.fields_by_name["value"]
            items = list(value.values())
        else:
            items = list(value)

        for item in items:
            if isinstance(item, Message):
                yield from _undecodable_strings(item, f"{name}.")
            elif isinstance(item, bytes) and item_field.type == FieldDescriptor.TYPE_STRING:
                yield name


def encode(message: Message, form: Form) -> bytes:
    """Serialize a message.

    Binary output is deterministic, so two runs over the same content can
    be diffed byte for byte. Text output is multi-line JSON that keeps the
    field names as declared in the .proto files.

    Raises:
        MarshalError: If the message cannot be represented in ``form``.
    """
    try:
        if form is Form.TEXT:
            for name in _undecodable_strings(message):
                raise ValueError(f"string field {name} is not valid UTF-8")
            text = json_format.MessageToJson(
                message,
                preserving_proto_field_name=True,
                indent=TEXT_INDENT,
                descriptor_pool=message.DESCRIPTOR.file.pool,
                ensure_ascii=False,
            )
            return text.encode("utf-8")
        return message.SerializeToString(deterministic=True)
    except (EncodeError, json_format.SerializeToJsonError, TypeError, ValueError) as exc:
        raise MarshalError(form, exc) from exc
