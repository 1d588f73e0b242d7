"""Versioned binary serialization for move trees."""

from .tree_format import (
    CURRENT_VERSION,
    MAGIC,
    SUPPORTED_VERSIONS,
    decode,
    dumps,
    encode,
    loads,
    pack_hash,
    read_header,
    unpack_hash,
)

__all__ = [
    "CURRENT_VERSION",
    "MAGIC",
    "SUPPORTED_VERSIONS",
    "decode",
    "dumps",
    "encode",
    "loads",
    "pack_hash",
    "read_header",
    "unpack_hash",
]
