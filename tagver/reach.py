# tagver/reach.py
from __future__ import annotations

from typing import Dict

from .gitgraph import CommitGraph, CommitHash

ReachabilityMemo = Dict[CommitHash, bool]


def reaches(
    repo: CommitGraph, start: CommitHash, target: CommitHash, memo: ReachabilityMemo
) -> bool:
    """
    True if `target` is `start` or one of its ancestors.

    Depth-first over parent links with an explicit stack. Every commit whose
    answer gets settled is recorded in `memo`; a memo must only ever be used
    with one `target`.
    """
    if start in memo:
        return memo[start]
    if start == target:
        memo[start] = True
        return True

    # frames: (commit, its parents, index of next parent to try)
    stack = [(start, repo.parents(start), 0)]
    on_path = {start}
    while stack:
        commit, parents, i = stack[-1]
        if i == len(parents):
            memo[commit] = False
            on_path.discard(commit)
            stack.pop()
            continue
        stack[-1] = (commit, parents, i + 1)

        p = parents[i]
        if p == target or memo.get(p):
            memo[p] = True
            # everything on the current path reaches target as well
            for c, _, _ in stack:
                memo[c] = True
            return True
        if p in memo or p in on_path:
            continue
        on_path.add(p)
        stack.append((p, repo.parents(p), 0))

    return memo[start]
