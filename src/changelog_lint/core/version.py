"""Semantic version parsing and formatting (semver 2.0.0)."""

from __future__ import annotations

import re
from dataclasses import dataclass

# Grammar from https://semver.org/#is-there-a-suggested-regular-expression-regex-to-check-a-semver-string
_NUM = r"0|[1-9]\d*"
_PRE_ID = r"0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*"
_SEMVER_RE = re.compile(
    rf"(?P<major>{_NUM})\.(?P<minor>{_NUM})\.(?P<patch>{_NUM})"
    rf"(?:-(?P<pre_release>(?:{_PRE_ID})(?:\.(?:{_PRE_ID}))*))?"
    r"(?:\+(?P<build_metadata>[0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?"
)
_MAJOR_MINOR_RE = re.compile(rf"(?P<major>{_NUM})\.(?P<minor>{_NUM})")


class VersionError(ValueError):
    """Raised when a version string does not follow the semver grammar."""


@dataclass(frozen=True, slots=True)
class Version:
    major: int
    minor: int
    patch: int
    pre_release: str | None = None
    build_metadata: str | None = None

    def __str__(self) -> str:
        s = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre_release is not None:
            s += f"-{self.pre_release}"
        if self.build_metadata is not None:
            s += f"+{self.build_metadata}"
        return s

    @property
    def precedence(self) -> tuple:
        """Sort key implementing semver precedence (build metadata ignored)."""
        if self.pre_release is None:
            return (self.major, self.minor, self.patch, 1, ())
        ids = tuple(
            (0, int(part), "") if part.isdigit() else (1, 0, part)
            for part in self.pre_release.split(".")
        )
        return (self.major, self.minor, self.patch, 0, ids)

    def to_dict(self) -> dict:
        return {
            "major": self.major,
            "minor": self.minor,
            "patch": self.patch,
            "pre_release": self.pre_release,
            "build_metadata": self.build_metadata,
            "text": str(self),
        }


@dataclass(frozen=True, slots=True)
class MajorMinorVersion:
    major: int
    minor: int

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


def parse_version(text: str) -> Version:
    m = _SEMVER_RE.fullmatch(text)
    if m is None:
        raise VersionError(f"Could not parse version string: {text}")
    return Version(
        major=int(m.group("major")),
        minor=int(m.group("minor")),
        patch=int(m.group("patch")),
        pre_release=m.group("pre_release"),
        build_metadata=m.group("build_metadata"),
    )


def parse_major_minor(text: str) -> MajorMinorVersion:
    m = _MAJOR_MINOR_RE.fullmatch(text)
    if m is None:
        raise VersionError(f"Could not parse major.minor version string: {text}")
    return MajorMinorVersion(major=int(m.group("major")), minor=int(m.group("minor")))


def compare_versions(a: Version, b: Version) -> int:
    """Return -1, 0 or 1 following semver precedence."""
    ka, kb = a.precedence, b.precedence
    return (ka > kb) - (ka < kb)
