import pytest

from movetree.core import PerspectiveHash, Piece
from movetree.tree import MoveNode, PathAverage, statistically_best


def make_node(text: str, index: int, wins: int, losses: int) -> MoveNode:
    return MoveNode(PerspectiveHash(Piece.X, text), index, wins, losses)


def test_statistically_best_prefers_highest_average_path():
    root = MoveNode.root()
    a = root.add_child(make_node("M........", 0, 6, 6))  # 50%
    b = root.add_child(make_node(".M.......", 1, 9, 3))  # 75%
    a.add_child(make_node("M..M.....", 3, 3, 9))  # 25% -> path average 37.5%
    b.add_child(make_node("MM.......", 0, 9, 3))  # 75% -> path average 75%

    best = statistically_best(root)

    assert best.average_win_percent == pytest.approx(75.0)
    assert [node.hash.to_canonical_string() for node in best.path] == [".M.......", "MM......."]
    assert best.path[0] is b


def test_statistically_best_uses_mean_over_whole_path():
    root = MoveNode.root()
    a = root.add_child(make_node("M........", 0, 6, 6))  # 50%
    a.add_child(make_node("M.M......", 2, 6, 6))  # 50% -> 50%
    a.add_child(make_node("M..M.....", 3, 9, 3))  # 75% -> 62.5%
    root.add_child(make_node(".M.......", 1, 3, 2))  # 60%

    best = statistically_best(root)
    assert best.average_win_percent == pytest.approx(62.5)
    assert [node.move_index for node in best.path] == [0, 3]


def test_statistically_best_on_childless_root():
    best = statistically_best(MoveNode.root())
    assert best.path == []
    assert best.average_win_percent == 0.0


def test_statistically_best_ties_keep_first_path():
    root = MoveNode.root()
    first = root.add_child(make_node("M........", 0, 1, 1))
    root.add_child(make_node(".M.......", 1, 2, 2))

    best = statistically_best(root)
    assert best.path == [first]


def test_statistically_best_with_no_wins_has_no_basis():
    root = MoveNode.root()
    root.add_child(make_node("M........", 0, 0, 4))
    root.add_child(make_node(".M.......", 1, 0, 0))

    best = statistically_best(root)
    assert best.path == []
    assert best.average_win_percent == 0.0


def test_path_average_handles_unplayed_nodes():
    path = PathAverage([make_node("M........", 0, 0, 0), make_node("MO.......", 1, 4, 0)])
    assert path.average_win_percent == pytest.approx(50.0)
    assert len(path) == 2
    with pytest.raises(IndexError):
        PathAverage().first
