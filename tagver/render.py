# tagver/render.py
from __future__ import annotations

from typing import Any, Dict, List

from .config import Defaults, DescribeOptions
from .versioninfo import VersionInfo


def render_version(info: VersionInfo, options: DescribeOptions) -> str:
    """
    Join the requested identifiers as <tag>-<branch>-<commit>.

    Without selector flags the output mirrors `git describe --tags`:
    "v1.0.5" on a tagged commit, "v1.0.4-1-5227b593" past one, and
    "<branch>-<commit>" when there is no tag at all. The distance/commit
    suffix is only added when the tag is the sole selector.
    """
    want_tag, want_branch, want_commit = options.tag, options.branch, options.commit
    if options.default:
        if info.tag:
            want_tag = True
        else:
            want_branch = want_commit = True

    parts: List[str] = []
    if want_tag and info.tag:
        parts.append(info.tag)
    if want_branch and info.branch:
        parts.append(info.branch)

    unclean = (
        want_tag
        and bool(info.tag)
        and info.distance > 0
        and not options.ignore_unclean_tag
        and not (want_branch or want_commit)
    )
    if unclean:
        parts.append(str(info.distance))
        want_commit = True
    if want_commit and info.commit:
        parts.append(info.commit)

    return Defaults.separator.join(parts)


def build_version_json(info: VersionInfo, text: str) -> Dict[str, Any]:
    return {
        "version": text or None,
        "tag": info.tag or None,
        "distance": info.distance,
        "branch": info.branch or None,
        "commit": info.commit or None,
        "source": info.source,
    }
