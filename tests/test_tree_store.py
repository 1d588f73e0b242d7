import pytest

from movetree.core import CorruptHeaderError, PerspectiveHash, Piece
from movetree.storage import TreeStore
from movetree.tree import MoveNode

WINS = 20
LOSSES = 30


def simple_tree() -> MoveNode:
    root = MoveNode.root()
    a = root.add_child(MoveNode(PerspectiveHash(Piece.X, "M........"), 0, WINS, LOSSES))
    root.add_child(MoveNode(PerspectiveHash(Piece.X, "O........"), 0, LOSSES, WINS))
    a.add_child(MoveNode(PerspectiveHash(Piece.X, "MO......."), 1, WINS, LOSSES))
    return root


def test_exists_and_remove(tmp_path):
    store = TreeStore(str(tmp_path / "trees"))
    assert not store.exists("dummy")
    store.save("dummy", MoveNode.root())
    assert store.exists("dummy")
    assert store.names() == ["dummy"]

    store.remove("dummy")
    assert not store.exists("dummy")
    store.remove("dummy")
    with pytest.raises(FileNotFoundError):
        store.remove("dummy", must_exist=True)


def test_save_creates_directory_and_round_trips(tmp_path):
    store = TreeStore(str(tmp_path / "data" / "trees"))
    path = store.save("learner", simple_tree())

    assert path.endswith("learner.tree")
    loaded = store.load("learner")
    assert loaded == simple_tree()
    node = loaded.children[1]
    assert node.hash.to_canonical_string() == "O........"
    assert (node.move_index, node.wins, node.losses) == (0, LOSSES, WINS)


def test_save_without_overwrite_refuses_existing(tmp_path):
    store = TreeStore(str(tmp_path))
    store.save("learner", simple_tree())
    with pytest.raises(FileExistsError):
        store.save("learner", MoveNode.root(), overwrite=False)
    assert store.load("learner") == simple_tree()


def test_save_rejects_missing_root(tmp_path):
    with pytest.raises(ValueError):
        TreeStore(str(tmp_path)).save("s", None)


def test_load_missing_tree(tmp_path):
    store = TreeStore(str(tmp_path))
    assert store.load("missing", must_exist=False) is None
    with pytest.raises(FileNotFoundError):
        store.load("missing")


def test_load_or_create(tmp_path):
    store = TreeStore(str(tmp_path))
    fresh = store.load_or_create("learner")
    assert fresh == MoveNode.root()

    store.save("learner", simple_tree())
    assert store.load_or_create("learner") == simple_tree()


def test_load_corrupt_file_raises(tmp_path):
    store = TreeStore(str(tmp_path))
    with open(store.path_for("broken"), "wb") as fh:
        fh.write(b"NOPE\x02")
    with pytest.raises(CorruptHeaderError):
        store.load("broken")


def test_failed_save_keeps_previous_file(tmp_path):
    store = TreeStore(str(tmp_path))
    store.save("learner", simple_tree())

    bad = MoveNode.root()
    bad.children.extend(MoveNode(PerspectiveHash(Piece.X), i) for i in range(256))
    with pytest.raises(OverflowError):
        store.save("learner", bad)
    assert store.load("learner") == simple_tree()
