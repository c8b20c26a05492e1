# tagver/tagindex.py
from __future__ import annotations

from typing import Dict, List

from .gitgraph import CommitGraph, CommitHash, TagRef

TagIndex = Dict[CommitHash, List[TagRef]]


def build_tag_index(repo: CommitGraph) -> TagIndex:
    """
    Map each commit to every tag that effectively points at it.

    Annotated tags are keyed by their target commit, lightweight tags by their
    own hash. A commit can collect several tags (e.g. a release and an rc cut
    at the same point). Errors from tag enumeration propagate as-is.
    """
    index: TagIndex = {}
    for ref in repo.tags():
        index.setdefault(ref.target, []).append(ref)
    return index
