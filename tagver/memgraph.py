# tagver/memgraph.py
"""In-memory CommitGraph.

Useful for hosts that already hold a commit graph, and for tests. Build it
up with commit()/tag()/branch() and point HEAD somewhere with checkout() or
detach().
"""
from __future__ import annotations

import hashlib
import heapq
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import GraphAccessError
from .gitgraph import (
    AnnotatedTag,
    BranchRef,
    Commit,
    CommitHash,
    Head,
    LightweightTag,
    TagRef,
)


@dataclass
class MemoryGraph:
    _commits: Dict[CommitHash, Tuple[Tuple[CommitHash, ...], int]] = field(default_factory=dict)
    _tags: List[TagRef] = field(default_factory=list)
    _branches: List[BranchRef] = field(default_factory=list)
    _remotes: List[str] = field(default_factory=list)
    _head: Optional[Head] = None

    # --- building ---------------------------------------------------------

    def commit(self, h: CommitHash, *parents: CommitHash, time: Optional[int] = None) -> CommitHash:
        """Add commit `h`. Committer time defaults to one tick after its newest parent."""
        for p in parents:
            if p not in self._commits:
                raise ValueError(f"parent {p} of {h} is not in the graph")
        if time is None:
            time = max((self._commits[p][1] for p in parents), default=0) + 1
        self._commits[h] = (tuple(parents), time)
        return h

    def tag(self, name: str, commit: CommitHash, annotated: bool = False) -> TagRef:
        if annotated:
            obj = hashlib.sha1(f"tag {name} {commit}".encode("utf-8")).hexdigest()
            ref = TagRef(name=name, kind=AnnotatedTag(target=commit, object=obj))
        else:
            ref = TagRef(name=name, kind=LightweightTag(commit=commit))
        self._tags.append(ref)
        return ref

    def branch(self, name: str, commit: CommitHash, remote: bool = False) -> BranchRef:
        ref = BranchRef(name=name, commit=commit, remote=remote)
        self._branches.append(ref)
        return ref

    def add_remote(self, name: str) -> None:
        self._remotes.append(name)

    def checkout(self, branch: str) -> None:
        for b in self._branches:
            if b.name == branch and not b.remote:
                self._head = Head(commit=b.commit, branch=branch)
                return
        raise ValueError(f"no local branch '{branch}'")

    def detach(self, commit: CommitHash) -> None:
        self._head = Head(commit=commit)

    # --- CommitGraph ------------------------------------------------------

    def tags(self) -> List[TagRef]:
        return list(self._tags)

    def branches(self) -> List[BranchRef]:
        # local first, then remote-tracking; each in name order like for-each-ref
        return sorted(self._branches, key=lambda b: (b.remote, b.name))

    def head(self) -> Head:
        if self._head is None:
            raise GraphAccessError("HEAD does not point at a commit")
        return self._head

    def resolve(self, rev: str) -> CommitHash:
        if rev == "HEAD":
            return self.head().commit
        if rev in self._commits:
            return rev
        for b in self.branches():
            if b.name == rev:
                return b.commit
        for t in self._tags:
            if t.name == rev:
                return t.target
        raise GraphAccessError(f"unknown revision '{rev}'")

    def log(self, start: CommitHash) -> Iterator[Commit]:
        self._require(start)
        seq = 0
        queue = [(-self._commits[start][1], seq, start)]
        seen = {start}
        while queue:
            _, _, h = heapq.heappop(queue)
            parents = self._commits[h][0]
            yield Commit(hash=h, parents=parents)
            for p in parents:
                if p in seen:
                    continue
                seen.add(p)
                seq += 1
                heapq.heappush(queue, (-self._commits[p][1], seq, p))

    def parents(self, commit: CommitHash) -> Tuple[CommitHash, ...]:
        self._require(commit)
        return self._commits[commit][0]

    def remotes(self) -> List[str]:
        return list(self._remotes)

    def _require(self, commit: CommitHash) -> None:
        if commit not in self._commits:
            raise GraphAccessError(f"commit {commit} not found")
