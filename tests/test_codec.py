import io
import struct

import pytest

from movetree.codec import CURRENT_VERSION, decode, dumps, encode, loads, pack_hash, read_header, unpack_hash
from movetree.core import (
    CorruptHeaderError,
    InvalidHashError,
    MalformedRecordError,
    PerspectiveHash,
    Piece,
    TooManyChildrenError,
    UnsupportedVersionError,
)
from movetree.tree import MAX_CHILDREN, SENTINEL, MoveNode


def sample_tree() -> MoveNode:
    root = MoveNode.root()
    a = root.add_child(MoveNode(PerspectiveHash(Piece.X, "M........"), 0, 3, 5))
    root.add_child(MoveNode(PerspectiveHash(Piece.X, ".M......."), 1, 1, 4))
    b = a.add_child(MoveNode(PerspectiveHash(Piece.O, "MO......."), 1, 2, 3))
    a.add_child(MoveNode(PerspectiveHash(Piece.X, "M.O......"), 2, 0, 7))
    b.add_child(MoveNode(PerspectiveHash(Piece.O, "MOM......"), 2, 2**32 - 1, 0))
    return root


def v1_hash(text: str, piece: Piece) -> bytes:
    return bytes([len(text)]) + text.encode("ascii") + bytes([piece, piece.opponent])


def node_fields(index: int, wins: int, losses: int, children: int) -> bytes:
    return struct.pack("<IIIB", index, wins, losses, children)


def v1_sample_bytes() -> bytes:
    return b"".join(
        [
            b"TREE\x01",
            v1_hash(".........", Piece.X) + node_fields(SENTINEL, 0, 0, 2),
            v1_hash("M........", Piece.X) + node_fields(0, 3, 5, 2),
            v1_hash("MO.......", Piece.O) + node_fields(1, 2, 3, 1),
            v1_hash("MOM......", Piece.O) + node_fields(2, 2**32 - 1, 0, 0),
            v1_hash("M.O......", Piece.X) + node_fields(2, 0, 7, 0),
            v1_hash(".M.......", Piece.X) + node_fields(1, 1, 4, 0),
        ]
    )


def test_round_trip_through_stream():
    root = sample_tree()
    stream = io.BytesIO()
    encode(root, stream)
    stream.seek(0)
    assert decode(stream) == root
    assert stream.read() == b""


def test_writer_emits_current_version_header():
    data = dumps(MoveNode.root())
    assert data[:4] == b"TREE"
    assert data[4] == CURRENT_VERSION == 2
    assert read_header(io.BytesIO(data)) == 2


def test_version_1_bytes_decode_to_same_tree():
    assert loads(v1_sample_bytes()) == sample_tree()


def test_version_2_layout_is_packed():
    root = MoveNode.root()
    root.add_child(MoveNode(PerspectiveHash(Piece.O, "MO......."), 4, 1, 2))
    expected = (
        b"TREE\x02"
        + b"\x00\x00\x00" + node_fields(SENTINEL, 0, 0, 1)
        + b"\x09\x00\x40" + node_fields(4, 1, 2, 0)
    )
    assert dumps(root) == expected


def test_pack_hash_uses_all_slots():
    hash = PerspectiveHash(Piece.X, "OMOMOMOMO")
    packed = pack_hash(hash)
    assert len(packed) == 3
    assert packed[2] & 0b11 == 0b10  # slot 8 is theirs
    assert packed[2] >> 6 == 0  # identity X
    assert unpack_hash(packed) == hash


@pytest.mark.parametrize("header", [b"TRE", b"", b"EERT\x02", b"tree\x02"])
def test_bad_magic_is_corrupt_header(header):
    with pytest.raises(CorruptHeaderError):
        loads(header + b"\x00" * 20)


@pytest.mark.parametrize("version", [0, 3, 255])
def test_unknown_version_is_rejected(version):
    data = bytearray(dumps(MoveNode.root()))
    data[4] = version
    with pytest.raises(UnsupportedVersionError) as info:
        loads(bytes(data))
    assert info.value.version == version
    assert info.value.supported == (1, 2)
    assert "supported versions are 1, 2" in str(info.value)


def test_invalid_slot_code_is_malformed():
    data = bytearray(dumps(MoveNode.root()))
    data[5] = 0b11  # slot 0 = 11
    with pytest.raises(MalformedRecordError):
        loads(bytes(data))


def test_invalid_identity_is_malformed():
    data = bytearray(dumps(MoveNode.root()))
    data[7] = 0b10 << 6
    with pytest.raises(MalformedRecordError):
        loads(bytes(data))


def test_padding_bits_are_malformed():
    data = bytearray(dumps(MoveNode.root()))
    data[7] = 0b0000_0100
    with pytest.raises(MalformedRecordError):
        loads(bytes(data))


def test_truncated_stream_is_malformed():
    data = dumps(sample_tree())
    with pytest.raises(MalformedRecordError):
        loads(data[:-3])


def test_version_1_bad_piece_bytes_are_malformed():
    data = b"TREE\x01" + bytes([9]) + b"........." + bytes([Piece.X, Piece.X]) + node_fields(SENTINEL, 0, 0, 0)
    with pytest.raises(MalformedRecordError):
        loads(data)


def test_version_1_bad_text_is_invalid_hash():
    data = b"TREE\x01" + v1_hash("MX.......", Piece.X) + node_fields(SENTINEL, 0, 0, 0)
    with pytest.raises(InvalidHashError):
        loads(data)


def test_duplicate_children_in_file_are_malformed():
    child = b"\x01\x00\x00" + node_fields(0, 1, 0, 0)
    data = b"TREE\x02" + b"\x00\x00\x00" + node_fields(SENTINEL, 0, 0, 2) + child + child
    with pytest.raises(MalformedRecordError):
        loads(data)


def test_too_many_children_fails_before_writing():
    root = MoveNode.root()
    # Bypass add_child to build a node the format cannot hold.
    root.children.extend(
        MoveNode(PerspectiveHash(Piece.X), i) for i in range(MAX_CHILDREN + 1)
    )
    stream = io.BytesIO()
    with pytest.raises(TooManyChildrenError):
        encode(root, stream)
    assert stream.getvalue() == b""


def test_max_children_round_trips():
    root = MoveNode.root()
    for i in range(MAX_CHILDREN):
        viewpoint = Piece.X if i % 2 else Piece.O
        text = "".join("M" if (i >> bit) & 1 else "." for bit in range(8)) + "."
        root.add_child(MoveNode(PerspectiveHash(viewpoint, text), i % 9, i, 0))
    assert loads(dumps(root)) == root
