# tagver/branch.py
from __future__ import annotations

from typing import List

from .errors import NotFoundError
from .gitgraph import BranchRef, CommitGraph
from .reach import ReachabilityMemo, reaches


def resolve_branch(repo: CommitGraph) -> str:
    """
    Name the branch containing a detached HEAD.

    Local branches win over remote-tracking ones; among either, the first in
    enumeration order wins. Remote names come back without their
    `<remote>/` prefix.
    """
    head = repo.head()
    memo: ReachabilityMemo = {}

    matches: List[BranchRef] = [
        b for b in repo.branches() if reaches(repo, b.commit, head.commit, memo)
    ]

    for b in matches:
        if not b.remote:
            return b.name

    if matches:
        name = matches[0].name
        for remote in repo.remotes():
            prefix = remote + "/"
            if name.startswith(prefix):
                return name[len(prefix):]
        return name

    raise NotFoundError(f"no branch found in detached head at {head.commit[:8]}")


def current_branch(repo: CommitGraph) -> str:
    """Branch HEAD is on, falling back to resolve_branch() when detached."""
    head = repo.head()
    if not head.detached:
        return head.branch
    return resolve_branch(repo)
