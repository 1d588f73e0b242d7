import struct

from movetree.codec import CURRENT_VERSION, read_header
from movetree.core import PerspectiveHash, Piece
from movetree.storage import TreeStore
from movetree.tree import SENTINEL, MoveNode

from scripts.train_vs_random import train
from scripts.upgrade_tree import upgrade_tree


def v1_tree_bytes() -> bytes:
    def hash_bytes(text, piece):
        return bytes([len(text)]) + text.encode("ascii") + bytes([piece, piece.opponent])

    return (
        b"TREE\x01"
        + hash_bytes(".........", Piece.X) + struct.pack("<IIIB", SENTINEL, 0, 0, 1)
        + hash_bytes("....M....", Piece.X) + struct.pack("<IIIB", 4, 7, 2, 0)
    )


def test_train_persists_tree_and_reports(tmp_path):
    store = TreeStore(str(tmp_path))
    summary = train(store=store, tree_name="learner", matches=30, seed=0, save_every=10, progress=False)

    assert summary["matches"] == 30
    assert summary["wins"] + summary["losses"] + summary["draws"] == 30
    assert summary["tree_moves"] + summary["fallback_moves"] > 0
    loaded = store.load("learner")
    assert loaded.count_nodes() == summary["tree_nodes"]
    assert sum(child.total for child in loaded.children) == summary["wins"] + summary["losses"]


def test_train_continues_existing_tree(tmp_path):
    store = TreeStore(str(tmp_path))
    first = train(store=store, tree_name="learner", matches=10, seed=1, progress=False)
    second = train(store=store, tree_name="learner", matches=10, seed=2, progress=False)
    decisive = sum(s["wins"] + s["losses"] for s in (first, second))
    root = store.load("learner")
    assert sum(child.total for child in root.children) == decisive
    assert second["tree_nodes"] >= first["tree_nodes"]


def test_train_as_second_player(tmp_path):
    store = TreeStore(str(tmp_path))
    summary = train(
        store=store,
        tree_name="o",
        matches=10,
        learner_piece=Piece.O,
        seed=3,
        progress=False,
    )
    assert summary["learner_piece"] == "O"
    root = store.load("o")
    assert all(child.hash.viewpoint == Piece.O for child in root.children)


def test_upgrade_tree_rewrites_version_1(tmp_path):
    store = TreeStore(str(tmp_path))
    with open(store.path_for("old"), "wb") as fh:
        fh.write(v1_tree_bytes())

    summary = upgrade_tree(store, "old", dry_run=True)
    assert summary["from_version"] == 1
    assert not summary["upgraded"]

    summary = upgrade_tree(store, "old")
    assert summary["upgraded"]
    assert summary["nodes"] == 2
    with open(store.path_for("old"), "rb") as fh:
        assert read_header(fh) == CURRENT_VERSION

    child = store.load("old").children[0]
    assert child.hash == PerspectiveHash(Piece.X, "....M....")
    assert (child.move_index, child.wins, child.losses) == (4, 7, 2)


def test_upgrade_tree_skips_current_version(tmp_path):
    store = TreeStore(str(tmp_path))
    store.save("new", MoveNode.root())
    summary = upgrade_tree(store, "new")
    assert summary == {"name": "new", "from_version": CURRENT_VERSION, "to_version": CURRENT_VERSION, "upgraded": False}
