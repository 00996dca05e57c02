"""Unit tests configuration file."""

import pytest
from google.protobuf import descriptor_pb2
from google.protobuf.compiler import plugin_pb2

FileProto = descriptor_pb2.FileDescriptorProto
FieldProto = descriptor_pb2.FieldDescriptorProto

# MessageOptions field 50100, length delimited, "hello"
GREETING_OPTION = b"\xa2\xbb\x18\x05hello"
# field 100, length delimited, "hello"
EXT_PAYLOAD = b"\xa2\x06\x05hello"


def pytest_configure(config):
    """Disable verbose output when running tests."""
    terminal = config.pluginmanager.getplugin("terminal")
    if terminal:
        terminal.TerminalReporter.showfspath = False


def _descriptor_file():
    return FileProto.FromString(descriptor_pb2.DESCRIPTOR.serialized_pb)


def _options_file():
    file = FileProto(
        name="capture/test/options.proto",
        package="capture.test",
        dependency=["google/protobuf/descriptor.proto"],
        syntax="proto2",
    )
    file.extension.add(
        name="greeting",
        number=50100,
        label=FieldProto.LABEL_OPTIONAL,
        type=FieldProto.TYPE_STRING,
        extendee=".google.protobuf.MessageOptions",
    )
    return file


def _greeter_file():
    file = FileProto(
        name="capture/test/greeter.proto",
        package="capture.test",
        dependency=["capture/test/options.proto"],
        syntax="proto3",
    )
    message = file.message_type.add(name="Greeter")
    message.field.add(
        name="display_name",
        number=1,
        label=FieldProto.LABEL_OPTIONAL,
        type=FieldProto.TYPE_STRING,
        json_name="displayName",
    )
    # option (capture.test.greeting) = "hello"; unknown to the static runtime
    message.options.MergeFromString(GREETING_OPTION)
    return file


def _scenario_file(with_extension):
    file = FileProto(name="capture/test/n.proto", package="capture.test", syntax="proto2")
    message = file.message_type.add(name="N")
    message.extension_range.add(start=100, end=200)
    if with_extension:
        file.extension.add(
            name="ext",
            number=100,
            label=FieldProto.LABEL_OPTIONAL,
            type=FieldProto.TYPE_STRING,
            extendee=".capture.test.N",
        )
    return file


@pytest.fixture
def greeting_option():
    return GREETING_OPTION


@pytest.fixture
def descriptor_file():
    return _descriptor_file()


@pytest.fixture
def options_file():
    return _options_file()


@pytest.fixture
def greeter_file():
    return _greeter_file()


@pytest.fixture
def generation_request():
    return plugin_pb2.CodeGeneratorRequest(
        file_to_generate=["capture/test/greeter.proto"],
        parameter="paths=source_relative",
        compiler_version=plugin_pb2.Version(major=5, minor=27, patch=1),
        proto_file=[_descriptor_file(), _options_file(), _greeter_file()],
    )


@pytest.fixture
def request_bytes(generation_request):
    return generation_request.SerializeToString()


@pytest.fixture
def generation_response():
    return plugin_pb2.CodeGeneratorResponse(
        supported_features=plugin_pb2.CodeGeneratorResponse.FEATURE_PROTO3_OPTIONAL,
        file=[
            plugin_pb2.CodeGeneratorResponse.File(
                name="capture/test/greeter_pb.txt", content="Greeter says hello\n"
            ),
            plugin_pb2.CodeGeneratorResponse.File(
                name="capture/test/index.txt",
                insertion_point="imports",
                content="greeter_pb\n",
            ),
        ],
    )


@pytest.fixture
def response_bytes(generation_response):
    return generation_response.SerializeToString()


@pytest.fixture
def scenario_files():
    """Message N with extension ext = 100 of type string."""
    return [_scenario_file(with_extension=True)]


@pytest.fixture
def bare_scenario_files():
    """Message N without any extension declared."""
    return [_scenario_file(with_extension=False)]


@pytest.fixture
def ext_payload():
    """An N instance with ext = "hello"."""
    return EXT_PAYLOAD
