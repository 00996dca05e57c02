"""Extension-aware decoding and encoding of protoc plugin messages."""

from .decoder import decode as decode
from .decoder import decode_generic as decode_generic
from .decoder import decode_request as decode_request
from .decoder import decode_with_registry as decode_with_registry
from .decoder import load_registry as load_registry
from .encoder import encode as encode
from .errors import *
from .pipeline import run as run
from .registry import TypeRegistry as TypeRegistry
from .registry import build as build_registry
from .summary import summarize as summarize
from .types import *
from .wrapper import wrap as wrap
