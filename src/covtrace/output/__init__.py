"""Model encoders."""

from covtrace.output.encoders import (
    DECODABLE_FORMATS,
    FORMATS,
    ROOT_KEY,
    decode,
    decode_project,
    decode_suites,
    encode,
    to_plain,
)

__all__ = [
    "DECODABLE_FORMATS",
    "FORMATS",
    "ROOT_KEY",
    "decode",
    "decode_project",
    "decode_suites",
    "encode",
    "to_plain",
]
