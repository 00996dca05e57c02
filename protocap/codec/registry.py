"""Run-time type registry built from embedded file descriptors.

protoc sends every file needed to compile the request, including the ones
declaring custom options, inside the request itself. The registry turns those
descriptors into message classes so that extension fields can be parsed as
typed values instead of unknown bytes.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory
from google.protobuf.compiler import plugin_pb2
from google.protobuf.descriptor import (
    Descriptor,
    EnumDescriptor,
    Error as ProtobufDescriptorError,
    FieldDescriptor,
    FileDescriptor,
)
from google.protobuf.message import Message

from ..logging import get_logger
from .errors import DescriptorError

logger = get_logger("codec.registry")

# Files declaring the request and response messages themselves.
_HOSTING_FILES: tuple[FileDescriptor, ...] = (descriptor_pb2.DESCRIPTOR, plugin_pb2.DESCRIPTOR)


@dataclass(frozen=True, slots=True)
class TypeRegistry:
    """Message classes, enums and extensions declared by a descriptor set."""

    pool: descriptor_pool.DescriptorPool
    messages: Mapping[str, type[Message]]
    enums: Mapping[str, EnumDescriptor]
    extensions: Mapping[str, FieldDescriptor]
    extensions_by_number: Mapping[tuple[str, int], FieldDescriptor]

    def message_class(self, full_name: str) -> type[Message]:
        """Return the class for a fully qualified message name."""
        try:
            return self.messages[full_name]
        except KeyError as exc:
            raise DescriptorError(f"Message type {full_name} is not registered") from exc

    def new_message(self, full_name: str) -> Message:
        """Create an empty message of the given type."""
        return self.message_class(full_name)()

    def find_extension_by_name(self, full_name: str) -> FieldDescriptor | None:
        return self.extensions.get(full_name)

    def find_extension_by_number(self, message_name: str, number: int) -> FieldDescriptor | None:
        return self.extensions_by_number.get((message_name, number))


def bundled_file(file: FileDescriptor) -> descriptor_pb2.FileDescriptorProto:
    """Return the descriptor proto of a file compiled into the protobuf runtime."""
    return descriptor_pb2.FileDescriptorProto.FromString(file.serialized_pb)


def _dependency_order(
    files: dict[str, descriptor_pb2.FileDescriptorProto],
) -> list[descriptor_pb2.FileDescriptorProto]:
    """Order files so that every import precedes the file importing it."""
    ordered: list[descriptor_pb2.FileDescriptorProto] = []
    done: set[str] = set()
    visiting: set[str] = set()

    def visit(name: str, importer: str | None) -> None:
        if name in done:
            return
        if name in visiting:
            raise DescriptorError(f"Import cycle through {name}")
        if name not in files:
            raise DescriptorError(f"{importer} imports {name}, which is not in the descriptor set")

        visiting.add(name)
        for dependency in files[name].dependency:
            visit(dependency, name)
        visiting.remove(name)

        done.add(name)
        ordered.append(files[name])

    for name in files:
        visit(name, None)
    return ordered


class _RegistryBuilder:
    """Collects the types of every file in a pool, at every nesting depth."""

    def __init__(self) -> None:
        self.messages: dict[str, type[Message]] = {}
        self.enums: dict[str, EnumDescriptor] = {}
        self.extensions: dict[str, FieldDescriptor] = {}
        self.extensions_by_number: dict[tuple[str, int], FieldDescriptor] = {}
        self._names: set[str] = set()

    def _claim(self, full_name: str) -> None:
        if full_name in self._names:
            raise DescriptorError(f"{full_name} is declared more than once")
        self._names.add(full_name)

    def add_file(self, file: FileDescriptor) -> None:
        self.add_enums(file.enum_types_by_name.values())
        self.add_extensions(file.extensions_by_name.values())
        self.add_messages(file.message_types_by_name.values())

    def add_enums(self, enums: Iterable[EnumDescriptor]) -> None:
        for enum in enums:
            self._claim(enum.full_name)
            self.enums[enum.full_name] = enum

    def add_extensions(self, extensions: Iterable[FieldDescriptor]) -> None:
        for extension in extensions:
            self._claim(extension.full_name)
            key = (extension.containing_type.full_name, extension.number)
            if key in self.extensions_by_number:
                other = self.extensions_by_number[key]
                raise DescriptorError(
                    f"{extension.full_name} and {other.full_name} both extend "
                    f"{key[0]} with field number {key[1]}"
                )
            self.extensions[extension.full_name] = extension
            self.extensions_by_number[key] = extension

    def add_messages(self, messages: Iterable[Descriptor]) -> None:
        for message in messages:
            self._claim(message.full_name)
            self.messages[message.full_name] = message_factory.GetMessageClass(message)
            # inner types
            self.add_enums(message.enum_types)
            self.add_extensions(message.extensions)
            self.add_messages(message.nested_types)

    def freeze(self, pool: descriptor_pool.DescriptorPool) -> TypeRegistry:
        return TypeRegistry(
            pool=pool,
            messages=MappingProxyType(self.messages),
            enums=MappingProxyType(self.enums),
            extensions=MappingProxyType(self.extensions),
            extensions_by_number=MappingProxyType(self.extensions_by_number),
        )


def build(files: Iterable[descriptor_pb2.FileDescriptorProto]) -> TypeRegistry:
    """Build a registry from a set of file descriptors.

    The set must be closed under imports, except for descriptor.proto and
    plugin.proto which are taken from the protobuf runtime when missing.

    Args:
        files: File descriptors, e.g. ``CodeGeneratorRequest.proto_file``.

    Returns:
        A registry backed by its own, freshly created descriptor pool.

    Raises:
        DescriptorError: If the files cannot be loaded or declare a name twice.
    """
    by_name: dict[str, descriptor_pb2.FileDescriptorProto] = {}
    for file_proto in files:
        if file_proto.name in by_name:
            raise DescriptorError(f"File {file_proto.name} appears more than once")
        by_name[file_proto.name] = file_proto

    for hosting in _HOSTING_FILES:
        if hosting.name not in by_name:
            by_name[hosting.name] = bundled_file(hosting)

    ordered = _dependency_order(by_name)

    pool = descriptor_pool.DescriptorPool()
    for file_proto in ordered:
        try:
            pool.AddSerializedFile(file_proto.SerializePartialToString())
        except (ProtobufDescriptorError, TypeError, ValueError, KeyError) as exc:
            raise DescriptorError(f"File {file_proto.name} could not be loaded: {exc}") from exc

    # Classes are created only now, so extendable messages see every extension.
    builder = _RegistryBuilder()
    for file_proto in ordered:
        builder.add_file(pool.FindFileByName(file_proto.name))

    registry = builder.freeze(pool)
    logger.debug(
        "Registered %d messages, %d enums and %d extensions from %d files",
        len(registry.messages),
        len(registry.enums),
        len(registry.extensions),
        len(ordered),
    )
    return registry
