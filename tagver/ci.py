# tagver/ci.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import CIEnvironmentError


@dataclass(frozen=True)
class CIRefs:
    provider: str
    commit: str = ""
    branch: str = ""
    tag: str = ""


def is_ci(env: Mapping[str, str]) -> bool:
    # the one variable every mainstream CI sets
    return "CI" in env


def _github(env: Mapping[str, str]) -> CIRefs:
    # https://docs.github.com/en/actions/learn-github-actions/variables#default-environment-variables
    ref_type = env.get("GITHUB_REF_TYPE")
    if ref_type is None:
        raise CIEnvironmentError("GITHUB_ACTIONS is set but GITHUB_REF_TYPE is missing")
    commit = env.get("GITHUB_SHA", "")
    name = env.get("GITHUB_REF_NAME", "")
    if ref_type == "branch":
        return CIRefs(provider="github", commit=commit, branch=name)
    if ref_type == "tag":
        return CIRefs(provider="github", commit=commit, tag=name)
    return CIRefs(provider="github", commit=commit)


def _gitlab(env: Mapping[str, str]) -> CIRefs:
    # https://docs.gitlab.com/ee/ci/variables/predefined_variables.html
    commit = env.get("CI_COMMIT_SHA", "")

    # tag pipelines only
    tag = env.get("CI_COMMIT_TAG", "")
    if tag:
        return CIRefs(provider="gitlab", commit=commit, tag=tag)

    # branch pipelines, then merge request / external pull request pipelines
    for var in (
        "CI_COMMIT_BRANCH",
        "CI_MERGE_REQUEST_SOURCE_BRANCH_NAME",
        "CI_EXTERNAL_PULL_REQUEST_SOURCE_BRANCH_NAME",
    ):
        branch = env.get(var, "")
        if branch:
            return CIRefs(provider="gitlab", commit=commit, branch=branch)

    return CIRefs(provider="gitlab", commit=commit)


def refs_from_ci(env: Mapping[str, str]) -> Optional[CIRefs]:
    """
    Commit, branch and tag as the CI system reports them.

    Returns None outside CI or under a provider we don't know, in which case
    the repository itself is the source of truth.
    """
    if not is_ci(env):
        return None
    if env.get("GITHUB_ACTIONS"):
        return _github(env)
    if env.get("GITLAB_CI"):
        return _gitlab(env)
    return None
