# tests/test_describe.py
import pytest

from conftest import sha
from tagver.describe import DescribeResult, describe
from tagver.errors import GraphAccessError
from tagver.memgraph import MemoryGraph

A, B, C, D = sha("A"), sha("B"), sha("C"), sha("D")


def _linear() -> MemoryGraph:
    # A(root) -> B -> C -> D
    g = MemoryGraph()
    g.commit(A)
    g.commit(B, A)
    g.commit(C, B)
    g.commit(D, C)
    g.branch("main", D)
    g.checkout("main")
    return g


def test_no_tags_anywhere():
    assert describe(_linear()) == DescribeResult(tag=None, distance=0, abbrev=None)


def test_tag_only_on_descendants_is_invisible():
    g = _linear()
    g.tag("v9.0.0", D)
    assert describe(g, B) == DescribeResult()


def test_exactly_on_tag():
    g = _linear()
    g.tag("v1.0.0", B)
    assert describe(g, B) == DescribeResult(tag="v1.0.0", distance=0, abbrev=None)


def test_one_past_tag_uses_start_hash():
    g = _linear()
    g.tag("v1.0.0", B)

    r = describe(g, C)

    assert r == DescribeResult(tag="v1.0.0", distance=1, abbrev=C[:8])
    assert r.abbrev != B[:8]


def test_distance_counts_commits_before_tag():
    g = _linear()
    g.tag("v0.1.0", A, annotated=True)

    r = describe(g)  # HEAD == D

    assert (r.tag, r.distance, r.abbrev) == ("v0.1.0", 3, D[:8])


def test_nearest_tag_wins():
    g = _linear()
    g.tag("v0.1.0", A)
    g.tag("v0.2.0", C)
    assert describe(g, D).tag == "v0.2.0"


def test_tie_break_on_shared_commit():
    g = _linear()
    g.tag("v1.0.0-rc1", B)
    g.tag("v1.0.0", B, annotated=True)
    g.tag("latest", B)

    assert describe(g, B) == DescribeResult(tag="v1.0.0")
    assert describe(g, D).tag == "v1.0.0"


def test_start_accepts_branch_and_tag_names():
    g = _linear()
    g.tag("v1.0.0", B)
    assert describe(g, "main").distance == 2
    assert describe(g, "v1.0.0").distance == 0


def test_idempotent():
    g = _linear()
    g.tag("v1.0.0", B)
    assert describe(g, D) == describe(g, D)


def test_merge_walks_by_committer_time():
    #   A -- B -------- M
    #    \             /
    #     X(v2, newer)
    g = MemoryGraph()
    g.commit(A, time=1)
    g.commit(B, A, time=2)
    x = g.commit(sha("X"), A, time=5)
    m = g.commit(sha("M"), B, x, time=6)
    g.tag("v1.0.0", A)
    g.tag("v2.0.0", x)

    r = describe(g, m)

    # M, then X (newest parent) is tagged
    assert (r.tag, r.distance, r.abbrev) == ("v2.0.0", 1, m[:8])


def test_merge_counts_every_ancestor_visited_first():
    g = MemoryGraph()
    g.commit(A, time=1)
    g.commit(B, A, time=10)
    x = g.commit(sha("X"), A, time=5)
    m = g.commit(sha("M"), B, x, time=11)
    g.tag("v1.0.0", A)

    # M, B, X, then A
    assert describe(g, m).distance == 3


def test_unknown_start_is_a_graph_error():
    with pytest.raises(GraphAccessError):
        describe(_linear(), "no-such-ref")
