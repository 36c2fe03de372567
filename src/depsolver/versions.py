from __future__ import annotations

import re
from typing import Tuple, Union

_IDENTIFIER = r"(?:0|[1-9]\d*|\d*[A-Za-z-][0-9A-Za-z-]*)"

_VERSION_RE = re.compile(
    r"^(?P<major>0|[1-9]\d*)"
    r"\.(?P<minor>0|[1-9]\d*)"
    r"\.(?P<patch>0|[1-9]\d*)"
    r"(?:-(?P<prerelease>{0}(?:\.{0})*))?"
    r"(?:\+(?P<build>[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$".format(_IDENTIFIER)
)


class ParseError(ValueError):
    """Raised when version or constraint text cannot be parsed."""

    def __init__(self, text: str, reason: str = "") -> None:
        message = f"invalid {reason or 'syntax'}: {text!r}"
        super(ParseError, self).__init__(message)
        self.text = text


def _prerelease_key(
    identifiers: Tuple[str, ...]
) -> Tuple[Tuple[int, Union[int, str]], ...]:
    # Numeric identifiers sort before alphanumeric ones.
    return tuple(
        (0, int(ident)) if ident.isdigit() else (1, ident) for ident in identifiers
    )


class Version(object):
    """A released package version, ordered by semantic versioning precedence.

    Build metadata is kept for display but takes no part in comparisons.
    """

    __slots__ = ("major", "minor", "patch", "prerelease", "build", "_key")

    def __init__(
        self,
        major: int,
        minor: int,
        patch: int,
        prerelease: Tuple[str, ...] = (),
        build: Tuple[str, ...] = (),
    ) -> None:
        if min(major, minor, patch) < 0:
            raise ValueError("version components must not be negative")
        self.major = major
        self.minor = minor
        self.patch = patch
        self.prerelease = tuple(prerelease)
        self.build = tuple(build)
        # A release sorts after all of its pre-releases.
        self._key = (
            major,
            minor,
            patch,
            0 if self.prerelease else 1,
            _prerelease_key(self.prerelease),
        )

    @classmethod
    def parse(cls, text: str) -> Version:
        match = _VERSION_RE.match(text.strip())
        if not match:
            raise ParseError(text, "version")
        prerelease = match.group("prerelease")
        build = match.group("build")
        return cls(
            int(match.group("major")),
            int(match.group("minor")),
            int(match.group("patch")),
            tuple(prerelease.split(".")) if prerelease else (),
            tuple(build.split(".")) if build else (),
        )

    def __repr__(self) -> str:
        return f"<Version({str(self)!r})>"

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            text += "-" + ".".join(self.prerelease)
        if self.build:
            text += "+" + ".".join(self.build)
        return text

    def __hash__(self) -> int:
        return hash(self._key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key == other._key

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key != other._key

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key < other._key

    def __le__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key <= other._key

    def __gt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key > other._key

    def __ge__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key >= other._key

    @property
    def is_prerelease(self) -> bool:
        return bool(self.prerelease)
