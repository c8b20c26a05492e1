# tagver/versioninfo.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .branch import current_branch
from .ci import refs_from_ci
from .config import Defaults, DescribeOptions
from .describe import describe
from .errors import NotFoundError
from .gitgraph import CommitGraph


@dataclass(frozen=True)
class VersionInfo:
    commit: str = ""
    branch: str = ""
    tag: str = ""
    distance: int = 0
    source: str = "repo"


def _needs_branch(info_tag: Optional[str], options: DescribeOptions) -> bool:
    return options.branch or (options.default and not info_tag)


def collect_version_info(
    repo: CommitGraph,
    options: DescribeOptions = DescribeOptions(),
    env: Optional[Mapping[str, str]] = None,
) -> VersionInfo:
    """
    Gather commit, branch, tag and distance for HEAD.

    In a recognised CI environment the values the CI system reports win
    (distance is always 0 there). Otherwise the repository is described
    directly. The branch is only resolved when the output asks for it. A
    detached HEAD no branch contains is an error when -b asked for the branch;
    the default output then falls back to the bare commit.
    """
    if options.use_ci and env is not None:
        ci = refs_from_ci(env)
        if ci is not None:
            return VersionInfo(
                commit=ci.commit[: Defaults.abbrev_len],
                branch=ci.branch,
                tag=ci.tag,
                source=ci.provider,
            )

    head = repo.head()
    result = describe(repo, head.commit)
    branch = ""
    if _needs_branch(result.tag, options):
        try:
            branch = current_branch(repo)
        except NotFoundError:
            if options.branch:
                raise
    return VersionInfo(
        commit=head.commit[: Defaults.abbrev_len],
        branch=branch,
        tag=result.tag or "",
        distance=result.distance,
    )
