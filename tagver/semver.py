# tagver/semver.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from .gitgraph import TagRef

# Lenient the way release tags are written in practice: "v" prefix and
# missing minor/patch are accepted ("v2" == 2.0.0).
_SEMVER_RE = re.compile(
    r"v?(0|[1-9]\d*)(?:\.(0|[1-9]\d*))?(?:\.(0|[1-9]\d*))?"
    r"(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
    r"(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?"
)


@dataclass(frozen=True)
class Version:
    major: int
    minor: int
    patch: int
    prerelease: Tuple[Union[int, str], ...] = ()
    build: str = ""

    def sort_key(self) -> tuple:
        """
        Key implementing semver 2.0 precedence.

        A release ranks above any of its pre-releases. Pre-release identifiers
        compare left to right: numeric ones numerically and below alphanumeric
        ones; a shorter list ranks lower when the shared part is equal. Build
        metadata is ignored.
        """
        if not self.prerelease:
            pre: tuple = (1,)
        else:
            pre = (
                0,
                tuple((0, p, "") if isinstance(p, int) else (1, 0, p) for p in self.prerelease),
            )
        return (self.major, self.minor, self.patch, pre)


def parse_version(name: str) -> Optional[Version]:
    """Parse a tag name as a semantic version; None when it is not one."""
    m = _SEMVER_RE.fullmatch(name.strip())
    if not m:
        return None
    major, minor, patch, pre, build = m.groups()
    prerelease: List[Union[int, str]] = []
    for ident in (pre.split(".") if pre else []):
        if ident.isdigit():
            if len(ident) > 1 and ident.startswith("0"):
                return None
            prerelease.append(int(ident))
        else:
            prerelease.append(ident)
    return Version(
        major=int(major),
        minor=int(minor or 0),
        patch=int(patch or 0),
        prerelease=tuple(prerelease),
        build=build or "",
    )


def pick_best(refs: Sequence[TagRef]) -> TagRef:
    """
    Pick the tag with the highest semantic version.

    Names that are not semver ("latest", "stable") are left out of the
    comparison. Ties, and the case where no name parses at all, go to the
    lexicographically greatest name so the pick never depends on ref order.
    """
    if not refs:
        raise ValueError("pick_best() needs at least one tag")
    if len(refs) == 1:
        return refs[0]

    candidates = []
    for ref in refs:
        v = parse_version(ref.name)
        if v is not None:
            candidates.append((v.sort_key(), ref.name, ref))

    if not candidates:
        return max(refs, key=lambda r: r.name)
    return max(candidates, key=lambda c: (c[0], c[1]))[2]
