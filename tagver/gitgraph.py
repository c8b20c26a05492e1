# tagver/gitgraph.py
from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Protocol, Tuple, Union

from .errors import GraphAccessError, NotARepositoryError

CommitHash = str

_TAGS_PREFIX = "refs/tags/"
_HEADS_PREFIX = "refs/heads/"
_REMOTES_PREFIX = "refs/remotes/"


@dataclass(frozen=True)
class LightweightTag:
    commit: CommitHash


@dataclass(frozen=True)
class AnnotatedTag:
    target: CommitHash
    object: str


TagKind = Union[LightweightTag, AnnotatedTag]


@dataclass(frozen=True)
class TagRef:
    name: str
    kind: TagKind

    @property
    def target(self) -> CommitHash:
        """Commit the tag effectively points at (never the tag object's own hash)."""
        if isinstance(self.kind, AnnotatedTag):
            return self.kind.target
        return self.kind.commit


@dataclass(frozen=True)
class BranchRef:
    name: str
    commit: CommitHash
    remote: bool = False


@dataclass(frozen=True)
class Head:
    commit: CommitHash
    branch: Optional[str] = None

    @property
    def detached(self) -> bool:
        return self.branch is None


@dataclass(frozen=True)
class Commit:
    hash: CommitHash
    parents: Tuple[CommitHash, ...] = ()


class CommitGraph(Protocol):
    """Read-only view of a repository's refs and commit graph."""

    def tags(self) -> List[TagRef]: ...

    def branches(self) -> List[BranchRef]: ...

    def head(self) -> Head: ...

    def resolve(self, rev: str) -> CommitHash: ...

    def log(self, start: CommitHash) -> Iterator[Commit]: ...

    def parents(self, commit: CommitHash) -> Tuple[CommitHash, ...]: ...

    def remotes(self) -> List[str]: ...


def _run(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(
            ["git", *args],
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as e:
        # git missing, cwd vanished, ...
        raise GraphAccessError(f"could not run git: {e}") from e


def _stream(args: list[str], cwd: Path) -> Iterator[str]:
    """Yield git's stdout line by line; the process is killed if the caller stops early."""
    try:
        proc = subprocess.Popen(
            ["git", *args],
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise GraphAccessError(f"could not run git: {e}") from e

    finished = False
    try:
        assert proc.stdout is not None and proc.stderr is not None
        for line in proc.stdout:
            line = line.strip()
            if line:
                yield line
        err = proc.stderr.read()
        if proc.wait() != 0:
            raise GraphAccessError(err.strip() or f"git {' '.join(args)} failed")
        finished = True
    finally:
        if not finished and proc.poll() is None:
            proc.kill()
        proc.wait()
        proc.stdout.close()
        proc.stderr.close()


def _git(args: list[str], cwd: Path) -> str:
    r = _run(args, cwd)
    if r.returncode != 0:
        raise GraphAccessError(r.stderr.strip() or f"git {' '.join(args)} failed")
    return r.stdout.strip()


def _commit_line(line: str) -> Commit:
    h, *parents = line.split()
    return Commit(hash=h, parents=tuple(parents))


@dataclass
class GitRepo:
    """CommitGraph backed by the `git` executable."""

    path: Path
    _parents: Dict[CommitHash, Tuple[CommitHash, ...]] = field(
        default_factory=dict, init=False, repr=False
    )

    def tags(self) -> List[TagRef]:
        out = _git(
            [
                "for-each-ref",
                "--format=%(objectname)%09%(objecttype)%09%(*objectname)%09%(refname)",
                _TAGS_PREFIX,
            ],
            self.path,
        )
        refs: List[TagRef] = []
        for line in out.splitlines():
            obj, obj_type, peeled, refname = line.split("\t", 3)
            name = refname[len(_TAGS_PREFIX):]
            if obj_type == "tag":
                if not peeled:
                    raise GraphAccessError(f"tag object {obj} for '{name}' has no target")
                refs.append(TagRef(name=name, kind=AnnotatedTag(target=peeled, object=obj)))
            else:
                refs.append(TagRef(name=name, kind=LightweightTag(commit=obj)))
        return refs

    def branches(self) -> List[BranchRef]:
        out = _git(
            [
                "for-each-ref",
                "--format=%(objectname)%09%(symref)%09%(refname)",
                _HEADS_PREFIX,
                _REMOTES_PREFIX,
            ],
            self.path,
        )
        refs: List[BranchRef] = []
        for line in out.splitlines():
            obj, symref, refname = line.split("\t", 2)
            if symref:
                # origin/HEAD and friends
                continue
            if refname.startswith(_HEADS_PREFIX):
                refs.append(BranchRef(name=refname[len(_HEADS_PREFIX):], commit=obj))
            else:
                refs.append(
                    BranchRef(name=refname[len(_REMOTES_PREFIX):], commit=obj, remote=True)
                )
        return refs

    def head(self) -> Head:
        commit = self.resolve("HEAD")
        r = _run(["symbolic-ref", "-q", "HEAD"], self.path)
        if r.returncode != 0:
            return Head(commit=commit)
        ref = r.stdout.strip()
        if ref.startswith(_HEADS_PREFIX):
            ref = ref[len(_HEADS_PREFIX):]
        return Head(commit=commit, branch=ref)

    def resolve(self, rev: str) -> CommitHash:
        return _git(["rev-parse", "--verify", f"{rev}^{{commit}}"], self.path)

    def log(self, start: CommitHash) -> Iterator[Commit]:
        # rev-list's default order is reverse chronological by committer time;
        # streamed so a walk that stops at the first tag stops git too
        for line in _stream(["rev-list", "--parents", start], self.path):
            yield _commit_line(line)

    def parents(self, commit: CommitHash) -> Tuple[CommitHash, ...]:
        if commit not in self._parents:
            # one call loads the whole ancestry of a branch tip, so later
            # lookups below it are served from the map
            out = _git(["rev-list", "--parents", commit], self.path)
            for c in map(_commit_line, out.splitlines()):
                self._parents[c.hash] = c.parents
            if commit not in self._parents:
                raise GraphAccessError(f"commit {commit} not found")
        return self._parents[commit]

    def remotes(self) -> List[str]:
        return _git(["remote"], self.path).splitlines()


def open_repo(path: Path) -> GitRepo:
    """Open the repository containing `path` (work tree or bare)."""
    if not path.is_dir():
        raise NotARepositoryError(f"Directory {path} does not exist")
    r = _run(["rev-parse", "--git-dir"], path)
    if r.returncode != 0:
        raise NotARepositoryError(f"Directory {path} is not a git repository")
    return GitRepo(path=path)
