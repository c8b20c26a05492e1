# tagver/describe.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .config import Defaults
from .gitgraph import CommitGraph
from .semver import pick_best
from .tagindex import build_tag_index


@dataclass(frozen=True)
class DescribeResult:
    tag: Optional[str] = None
    distance: int = 0
    abbrev: Optional[str] = None


def describe(repo: CommitGraph, start: str = Defaults.start_ref) -> DescribeResult:
    """
    Find the nearest tag reachable from `start`, like `git describe --tags`.

    Commits are visited newest first by committer time. `distance` counts the
    commits seen before the tagged one, and `abbrev` is the short hash of
    `start` itself (not of the tagged ancestor); both are empty when `start`
    is tagged. No reachable tag yields an empty result, not an error.
    """
    commit = repo.resolve(start)
    index = build_tag_index(repo)

    count = 0
    for c in repo.log(commit):
        refs = index.get(c.hash)
        if refs:
            tag = pick_best(refs).name
            if count == 0:
                return DescribeResult(tag=tag)
            return DescribeResult(tag=tag, distance=count, abbrev=commit[: Defaults.abbrev_len])
        count += 1

    return DescribeResult()
