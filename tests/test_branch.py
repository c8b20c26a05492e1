# tests/test_branch.py
import pytest

from conftest import sha
from tagver.branch import current_branch, resolve_branch
from tagver.errors import NotFoundError
from tagver.memgraph import MemoryGraph

A, B, C = sha("A"), sha("B"), sha("C")


def _graph() -> MemoryGraph:
    # A -> B -> C, plus an unrelated feature tip F off A
    g = MemoryGraph()
    g.commit(A)
    g.commit(B, A)
    g.commit(C, B)
    g.commit(sha("F"), A)
    g.add_remote("origin")
    return g


def test_local_branch_preferred_over_remote():
    g = _graph()
    g.branch("origin/main", C, remote=True)
    g.branch("main", C)
    g.detach(C)

    assert resolve_branch(g) == "main"


def test_branch_tip_ahead_of_head_still_contains_it():
    g = _graph()
    g.branch("main", C)
    g.branch("topic", sha("F"))
    g.detach(B)

    assert resolve_branch(g) == "main"


def test_first_local_match_in_name_order():
    g = _graph()
    g.branch("zeta", C)
    g.branch("alpha", C)
    g.detach(B)

    assert resolve_branch(g) == "alpha"


def test_remote_prefix_stripped():
    g = _graph()
    g.branch("main", A)
    g.branch("origin/feature-x", C, remote=True)
    g.detach(C)

    assert resolve_branch(g) == "feature-x"


def test_remote_prefix_uses_configured_remote_names():
    g = _graph()
    g.add_remote("upstream/mirror")
    g.branch("upstream/mirror/release/1.x", C, remote=True)
    g.detach(C)

    assert resolve_branch(g) == "release/1.x"


def test_no_containing_branch():
    g = _graph()
    g.branch("main", A)
    g.branch("origin/topic", sha("F"), remote=True)
    g.detach(C)

    with pytest.raises(NotFoundError, match=C[:8]):
        resolve_branch(g)


def test_current_branch_attached_head():
    g = _graph()
    g.branch("main", C)
    g.branch("other", C)
    g.checkout("other")

    assert current_branch(g) == "other"


def test_current_branch_detached_head():
    g = _graph()
    g.branch("origin/main", C, remote=True)
    g.detach(A)

    assert current_branch(g) == "main"
