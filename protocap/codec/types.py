"""Configuration and result types for the capture pipeline."""

from dataclasses import dataclass, field
from enum import StrEnum, auto

from dataclasses_json import DataClassJsonMixin

DEFAULT_ARTIFACT_NAME = "out.proto.msg"

REQUEST_TYPE = "google.protobuf.compiler.CodeGeneratorRequest"
RESPONSE_TYPE = "google.protobuf.compiler.CodeGeneratorResponse"


class MessageKind(StrEnum):
    """Which of the two plugin protocol messages is being handled."""

    REQUEST = auto()
    RESPONSE = auto()

    @property
    def type_name(self) -> str:
        """Fully qualified proto name of the message."""
        return REQUEST_TYPE if self is MessageKind.REQUEST else RESPONSE_TYPE


class Form(StrEnum):
    """Serialized form of a message: protobuf wire format or JSON text."""

    BINARY = auto()
    TEXT = auto()

    @property
    def wire_name(self) -> str:
        return "json" if self is Form.TEXT else "proto"


@dataclass
class CaptureOptions(DataClassJsonMixin):
    """Options controlling a single pipeline run.

    wrap embeds the encoded message as the single file ``artifact_name``
    of a synthesized CodeGeneratorResponse, which is what protoc expects
    back when this tool runs as a plugin.
    """

    message_kind: MessageKind = MessageKind.REQUEST
    input_form: Form = Form.BINARY
    output_form: Form = Form.BINARY
    wrap: bool = True
    artifact_name: str = DEFAULT_ARTIFACT_NAME


@dataclass
class RequestSummary(DataClassJsonMixin):
    """Overview of a captured CodeGeneratorRequest."""

    files_to_generate: list[str]
    parameter: str
    compiler_version: str | None
    proto_files: int
    message_types: int
    enum_types: int
    extensions: int
    resolved_extensions: list[str] = field(default_factory=list)
