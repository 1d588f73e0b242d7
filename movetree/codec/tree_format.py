"""Binary TREE file format.

Layout::

    FileHeader := b"TREE" | version:u8
    NodeRecord := HashRecord | move_index:u32 | wins:u32 | losses:u32
                  | child_count:u8 | NodeRecord * child_count

Integers are little-endian and node records are written depth-first.

Version 1 hash records are ``length:u8 | ASCII slot chars | viewpoint:u8 |
opponent:u8``. Version 2 packs the nine slots into three bytes, two bits per
slot starting at the least significant bit of byte 0 (``00`` empty, ``01``
mine, ``10`` theirs), with the viewpoint identity (``0`` for X, ``1`` for O)
in the top two bits of byte 2.

The reader accepts versions 1 through ``CURRENT_VERSION``; the writer always
emits ``CURRENT_VERSION``.
"""

from __future__ import annotations

import io
import struct
from typing import BinaryIO, List, Tuple

from movetree.core import (
    BOARD_SIZE,
    CorruptHeaderError,
    InvalidHashError,
    MalformedRecordError,
    PerspectiveHash,
    Piece,
    SlotState,
    TooManyChildrenError,
    UnsupportedVersionError,
)
from movetree.tree import MAX_CHILDREN, MoveNode

MAGIC = b"TREE"
CURRENT_VERSION = 2
SUPPORTED_VERSIONS = (1, 2)

_NODE_FIELDS = struct.Struct("<IIIB")
_PACKED_HASH_SIZE = 3
_IDENTITY_SHIFT = 22
_SLOT_MASK = 0b11
_PADDING_MASK = ((1 << _IDENTITY_SHIFT) - 1) & ~((1 << (2 * BOARD_SIZE)) - 1)
_VALID_PIECES = (Piece.X, Piece.O)


# ----------------------------------------------------------------------
# Public API
# ----------------------------------------------------------------------
def encode(node: MoveNode, stream: BinaryIO) -> None:
    """Write ``node`` and its subtree, header included, to ``stream``."""
    # Serialize fully before touching the stream so a capacity error writes nothing.
    stream.write(dumps(node))


def dumps(node: MoveNode) -> bytes:
    buffer = bytearray(MAGIC)
    buffer.append(CURRENT_VERSION)
    stack = [node]
    while stack:
        current = stack.pop()
        if len(current.children) > MAX_CHILDREN:
            raise TooManyChildrenError(
                f"Node {current.hash} has {len(current.children)} children; "
                f"the format stores at most {MAX_CHILDREN}."
            )
        buffer += pack_hash(current.hash)
        buffer += _NODE_FIELDS.pack(
            current.move_index, current.wins, current.losses, len(current.children)
        )
        stack.extend(reversed(current.children))
    return bytes(buffer)


def read_header(stream: BinaryIO) -> int:
    """Validate the file header and return its version byte."""
    header = stream.read(len(MAGIC) + 1)
    if len(header) < len(MAGIC) + 1 or header[: len(MAGIC)] != MAGIC:
        raise CorruptHeaderError(f"Expected a {MAGIC!r} header, got {header[:len(MAGIC)]!r}")
    version = header[len(MAGIC)]
    if version not in SUPPORTED_VERSIONS:
        raise UnsupportedVersionError(version, SUPPORTED_VERSIONS)
    return version


def decode(stream: BinaryIO) -> MoveNode:
    """Read a whole tree from ``stream``.

    The tree is built from scratch and only returned once every record has been
    read, so a failure never leaves a half-populated tree behind.
    """
    version = read_header(stream)
    root, remaining = _read_node(stream, version)
    stack: List[Tuple[MoveNode, int]] = [(root, remaining)]
    while stack:
        parent, remaining = stack.pop()
        if remaining == 0:
            continue
        stack.append((parent, remaining - 1))
        child, child_count = _read_node(stream, version)
        if parent.find_child(child.hash) is not None:
            raise MalformedRecordError(f"Duplicate child {child.hash} under {parent.hash}.")
        parent.children.append(child)
        stack.append((child, child_count))
    return root


def loads(data: bytes) -> MoveNode:
    return decode(io.BytesIO(data))


# ----------------------------------------------------------------------
# Hash records
# ----------------------------------------------------------------------
def pack_hash(hash: PerspectiveHash) -> bytes:
    value = 0
    for i, code in enumerate(hash.codes):
        value |= int(code) << (2 * i)
    value |= int(hash.viewpoint) << _IDENTITY_SHIFT
    return value.to_bytes(_PACKED_HASH_SIZE, "little")


def unpack_hash(data: bytes) -> PerspectiveHash:
    if len(data) != _PACKED_HASH_SIZE:
        raise MalformedRecordError(f"Packed hash must be {_PACKED_HASH_SIZE} bytes, got {len(data)}")
    value = int.from_bytes(data, "little")
    identity = value >> _IDENTITY_SHIFT
    if identity not in _VALID_PIECES:
        raise MalformedRecordError(f"Invalid viewpoint identity {identity} in packed hash.")
    if value & _PADDING_MASK:
        raise MalformedRecordError("Packed hash has bits set between the slots and the identity.")

    codes = []
    for i in range(BOARD_SIZE):
        code = (value >> (2 * i)) & _SLOT_MASK
        if code not in (SlotState.EMPTY, SlotState.MINE, SlotState.THEIRS):
            raise MalformedRecordError(f"Invalid slot code {code:#04b} at index {i}.")
        codes.append(code)
    return PerspectiveHash(Piece(identity), codes)


def _read_hash_v1(stream: BinaryIO) -> PerspectiveHash:
    (length,) = _read_exact(stream, 1)
    raw = _read_exact(stream, length)
    try:
        text = raw.decode("ascii")
    except UnicodeDecodeError as exc:
        raise InvalidHashError(f"Hash text is not ASCII: {raw!r}") from exc
    viewpoint, opponent = _read_exact(stream, 2)
    if viewpoint not in _VALID_PIECES or opponent not in _VALID_PIECES or viewpoint == opponent:
        raise MalformedRecordError(
            f"Invalid viewpoint/opponent bytes ({viewpoint}, {opponent}) in version 1 hash."
        )
    return PerspectiveHash(Piece(viewpoint), text)


def _read_hash(stream: BinaryIO, version: int) -> PerspectiveHash:
    if version == 1:
        return _read_hash_v1(stream)
    return unpack_hash(_read_exact(stream, _PACKED_HASH_SIZE))


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------
def _read_node(stream: BinaryIO, version: int) -> Tuple[MoveNode, int]:
    hash = _read_hash(stream, version)
    move_index, wins, losses, child_count = _NODE_FIELDS.unpack(
        _read_exact(stream, _NODE_FIELDS.size)
    )
    return MoveNode(hash, move_index, wins, losses), child_count


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    data = stream.read(size)
    if len(data) != size:
        raise MalformedRecordError(f"Unexpected end of stream: wanted {size} bytes, got {len(data)}")
    return data
