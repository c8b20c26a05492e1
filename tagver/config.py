from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class Defaults:
    abbrev_len: int = 8
    separator: str = "-"
    repo_path: str = "."
    start_ref: str = "HEAD"


@dataclass(frozen=True)
class DescribeOptions:
    """Per-invocation flags. Passed explicitly; nothing is read from globals."""

    tag: bool = False
    branch: bool = False
    commit: bool = False
    ignore_unclean_tag: bool = False
    use_ci: bool = True

    @property
    def default(self) -> bool:
        # no selector given => behave like `git describe --tags`
        return not (self.tag or self.branch or self.commit)


def repo_path(path: Path | None = None) -> Path:
    return (path or Path(Defaults.repo_path)).resolve()
