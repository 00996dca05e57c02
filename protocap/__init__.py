"""protocap - Capture, replay and convert protoc plugin messages."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("protocap")
except PackageNotFoundError:
    __version__ = "(local)"
