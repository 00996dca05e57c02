"""Tests for the type registry builder."""

# pylint: disable=redefined-outer-name,unused-variable,expression-not-assigned,singleton-comparison

from dataclasses import FrozenInstanceError

import pytest
from google.protobuf import descriptor_pb2

from protocap.codec import DescriptorError, Form, build_registry, encode

FileProto = descriptor_pb2.FileDescriptorProto
FieldProto = descriptor_pb2.FieldDescriptorProto


@pytest.fixture
def nested_file():
    file = FileProto(name="capture/test/nested.proto", package="capture.test", syntax="proto2")
    file.enum_type.add(name="Level").value.add(name="LEVEL_LOW", number=0)

    outer = file.message_type.add(name="Outer")
    outer.extension_range.add(start=100, end=200)
    outer.enum_type.add(name="Color").value.add(name="RED", number=0)

    inner = outer.nested_type.add(name="Inner")
    inner.enum_type.add(name="Shade").value.add(name="LIGHT", number=0)

    deepest = inner.nested_type.add(name="Deepest")
    deepest.extension.add(
        name="note",
        number=150,
        label=FieldProto.LABEL_OPTIONAL,
        type=FieldProto.TYPE_STRING,
        extendee=".capture.test.Outer",
    )
    return file


def _message_file(name, message_name):
    file = FileProto(name=name, package="capture.test", syntax="proto3")
    file.message_type.add(name=message_name)
    return file


def describe_build():
    def registers_declarations_at_every_depth(expect, nested_file):
        registry = build_registry([nested_file])

        messages = [
            "capture.test.Outer",
            "capture.test.Outer.Inner",
            "capture.test.Outer.Inner.Deepest",
        ]
        enums = ["capture.test.Level", "capture.test.Outer.Color", "capture.test.Outer.Inner.Shade"]
        expect(all(name in registry.messages for name in messages)) == True
        expect(all(name in registry.enums for name in enums)) == True

        note = registry.find_extension_by_name("capture.test.Outer.Inner.Deepest.note")
        expect(note.number) == 150
        expect(registry.find_extension_by_number("capture.test.Outer", 150)) == note
        expect(registry.find_extension_by_number("capture.test.Outer", 151)) == None

    def creates_messages_that_accept_nested_extensions(expect, nested_file):
        registry = build_registry([nested_file])
        note = registry.find_extension_by_name("capture.test.Outer.Inner.Deepest.note")

        outer = registry.new_message("capture.test.Outer")
        outer.Extensions[note] = "hi"
        # field 150, length delimited, "hi"
        expect(encode(outer, Form.BINARY)) == b"\xb2\x09\x02hi"

    def registers_the_hosting_files(expect, scenario_files):
        registry = build_registry(scenario_files)
        expect("google.protobuf.compiler.CodeGeneratorRequest" in registry.messages) == True
        expect("google.protobuf.FileDescriptorProto" in registry.messages) == True
        expect("google.protobuf.FieldDescriptorProto.Type" in registry.enums) == True

    def uses_the_carried_descriptor_file(expect, descriptor_file, options_file):
        registry = build_registry([descriptor_file, options_file])
        expect("capture.test.greeting" in registry.extensions) == True

    def ignores_file_order(expect, descriptor_file, options_file, greeter_file):
        registry = build_registry([greeter_file, options_file, descriptor_file])
        expect("capture.test.Greeter" in registry.messages) == True

    def builds_independent_registries(expect, scenario_files):
        first = build_registry(scenario_files)
        second = build_registry(scenario_files)
        expect(first.pool is second.pool) == False
        expect(first.messages["capture.test.N"] is second.messages["capture.test.N"]) == False

    def is_read_only(expect, scenario_files):
        registry = build_registry(scenario_files)
        with pytest.raises(TypeError):
            registry.messages["capture.test.Other"] = registry.messages["capture.test.N"]
        with pytest.raises(FrozenInstanceError):
            registry.messages = {}

    def rejects_unknown_message_names(expect, scenario_files):
        registry = build_registry(scenario_files)
        with pytest.raises(DescriptorError):
            registry.new_message("capture.test.Missing")


def describe_build_errors():
    def rejects_duplicate_file_names(expect):
        files = [_message_file("a.proto", "A"), _message_file("a.proto", "B")]
        with pytest.raises(DescriptorError) as info:
            build_registry(files)
        expect("a.proto" in str(info.value)) == True

    def rejects_duplicate_symbols(expect):
        files = [_message_file("a.proto", "A"), _message_file("b.proto", "A")]
        with pytest.raises(DescriptorError):
            build_registry(files)

    def rejects_missing_imports(expect):
        file = _message_file("a.proto", "A")
        file.dependency.append("missing.proto")
        with pytest.raises(DescriptorError) as info:
            build_registry([file])
        expect("missing.proto" in str(info.value)) == True

    def rejects_import_cycles(expect):
        first = _message_file("a.proto", "A")
        second = _message_file("b.proto", "B")
        first.dependency.append("b.proto")
        second.dependency.append("a.proto")
        with pytest.raises(DescriptorError):
            build_registry([first, second])

    def rejects_unresolvable_references(expect):
        file = FileProto(name="a.proto", package="capture.test", syntax="proto2")
        file.extension.add(
            name="orphan",
            number=100,
            label=FieldProto.LABEL_OPTIONAL,
            type=FieldProto.TYPE_STRING,
            extendee=".capture.test.Missing",
        )
        with pytest.raises(DescriptorError):
            build_registry([file])
