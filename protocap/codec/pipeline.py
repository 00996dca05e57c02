"""Single pass over one input: decode, encode and optionally wrap."""

from ..logging import get_logger
from .decoder import decode
from .encoder import encode
from .types import CaptureOptions
from .wrapper import wrap

logger = get_logger("codec.pipeline")


def run(data: bytes, options: CaptureOptions) -> bytes:
    """Convert one captured message according to ``options``.

    The result is fully buffered; if any stage fails, an exception is raised
    and nothing is returned.
    """
    message = decode(data, options.message_kind, options.input_form)
    out = encode(message, options.output_form)
    if options.wrap:
        logger.debug("Wrapping %d bytes as %s", len(out), options.artifact_name)
        out = encode(wrap(out, options.artifact_name), options.output_form)
    logger.debug("Encoded %d bytes as %s", len(out), options.output_form)
    return out
