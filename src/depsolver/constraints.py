from __future__ import annotations

import re
from typing import Optional, Tuple

from .versions import ParseError, Version

_V = r"[0-9A-Za-z.+-]+"

_RANGE_RE = re.compile(
    rf"^(?P<lower>{_V})\s*(?P<lower_op><=|<)\s*v"
    rf"\s*(?P<upper_op><=|<)\s*(?P<upper>{_V})$"
)
_LOWER_ONLY_RE = re.compile(rf"^(?P<lower>{_V})\s*(?P<lower_op><=|<)\s*v$")
_UPPER_ONLY_RE = re.compile(rf"^v\s*(?P<upper_op><=|<)\s*(?P<upper>{_V})$")
_COMPARISON_RE = re.compile(rf"(?P<op><=|>=|==|<|>)\s*(?P<version>{_V})")
_SEPARATOR_RE = re.compile(r"\s*,\s*|\s+")

Bound = Tuple[Optional[Version], bool]


def _parse_version(version: str, text: str) -> Version:
    try:
        return Version.parse(version)
    except ParseError:
        raise ParseError(text, "constraint version") from None


def _tighter_lower(a: Bound, b: Bound) -> Bound:
    if a[0] is None:
        return b
    if b[0] is None or a[0] > b[0]:
        return a
    if b[0] > a[0]:
        return b
    return a[0], a[1] and b[1]


def _tighter_upper(a: Bound, b: Bound) -> Bound:
    if a[0] is None:
        return b
    if b[0] is None or a[0] < b[0]:
        return a
    if b[0] < a[0]:
        return b
    return a[0], a[1] and b[1]


def _is_empty(lower: Bound, upper: Bound) -> bool:
    if lower[0] is None or upper[0] is None:
        return False
    if lower[0] == upper[0]:
        return not (lower[1] and upper[1])
    return lower[0] > upper[0]


class Constraint(object):
    """A range of acceptable versions.

    A constraint has an optional lower and an optional upper bound, each
    either inclusive or exclusive. A missing bound is unbounded on that
    side. Instances are immutable and never empty; an intersection that
    would leave no version behind is reported as ``None`` instead.
    """

    __slots__ = ("lower", "lower_inclusive", "upper", "upper_inclusive")

    def __init__(
        self,
        lower: Optional[Version] = None,
        upper: Optional[Version] = None,
        lower_inclusive: bool = True,
        upper_inclusive: bool = False,
    ) -> None:
        if _is_empty((lower, lower_inclusive), (upper, upper_inclusive)):
            raise ValueError("constraint range is empty")
        self.lower = lower
        self.upper = upper
        # Inclusivity of a missing bound is meaningless; normalise it so
        # that equal ranges compare equal.
        self.lower_inclusive = lower_inclusive and lower is not None
        self.upper_inclusive = upper_inclusive and upper is not None

    @classmethod
    def any(cls) -> Constraint:
        return cls()

    @classmethod
    def exactly(cls, version: Version) -> Constraint:
        return cls(version, version, lower_inclusive=True, upper_inclusive=True)

    @classmethod
    def parse(cls, text: str) -> Constraint:
        """Parse a range expression.

        Accepted forms are ``"1.0.0 <= v < 2.0.0"`` and its one-sided
        variants (``"1.0.0 <= v"``, ``"v < 2.0.0"``), comparison lists such
        as ``">=1.0.0 <2.0.0"`` or ``">= 1.0.0, < 2.0.0"`` (all comparisons
        must hold), ``"*"`` for any version, and a bare version meaning
        exactly that version.
        """
        stripped = text.strip()
        if stripped == "*":
            return cls.any()
        if not stripped:
            raise ParseError(text, "constraint")

        lower: Bound = (None, False)
        upper: Bound = (None, False)
        range_match = _RANGE_RE.match(stripped)
        lower_match = _LOWER_ONLY_RE.match(stripped)
        upper_match = _UPPER_ONLY_RE.match(stripped)
        if range_match:
            lower = (
                _parse_version(range_match.group("lower"), text),
                range_match.group("lower_op") == "<=",
            )
            upper = (
                _parse_version(range_match.group("upper"), text),
                range_match.group("upper_op") == "<=",
            )
        elif lower_match:
            lower = (
                _parse_version(lower_match.group("lower"), text),
                lower_match.group("lower_op") == "<=",
            )
        elif upper_match:
            upper = (
                _parse_version(upper_match.group("upper"), text),
                upper_match.group("upper_op") == "<=",
            )
        elif stripped[0] not in "<>=":
            version = _parse_version(stripped, text)
            return cls.exactly(version)
        else:
            lower, upper = cls._parse_comparisons(stripped, text)

        if _is_empty(lower, upper):
            raise ParseError(text, "empty range")
        return cls(lower[0], upper[0], lower[1], upper[1])

    @staticmethod
    def _parse_comparisons(stripped: str, text: str) -> Tuple[Bound, Bound]:
        lower: Bound = (None, False)
        upper: Bound = (None, False)
        pos = 0
        while True:
            match = _COMPARISON_RE.match(stripped, pos)
            if not match:
                raise ParseError(text, "constraint")
            op = match.group("op")
            version = _parse_version(match.group("version"), text)
            if op in (">=", ">", "=="):
                lower = _tighter_lower(lower, (version, op != ">"))
            if op in ("<=", "<", "=="):
                upper = _tighter_upper(upper, (version, op != "<"))
            pos = match.end()
            if pos == len(stripped):
                return lower, upper
            # A separator must be followed by another comparison.
            separator = _SEPARATOR_RE.match(stripped, pos)
            if not separator:
                raise ParseError(text, "constraint")
            pos = separator.end()

    def __repr__(self) -> str:
        return f"<Constraint({str(self)!r})>"

    def __str__(self) -> str:
        parts = []
        if self.lower is not None:
            parts.append(f"{self.lower} {'<=' if self.lower_inclusive else '<'}")
        if self.upper is not None:
            parts.append(f"v {'<=' if self.upper_inclusive else '<'} {self.upper}")
        elif parts:
            parts.append("v")
        return " ".join(parts) or "*"

    def _astuple(self):
        return (self.lower, self.lower_inclusive, self.upper, self.upper_inclusive)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Constraint):
            return NotImplemented
        return self._astuple() == other._astuple()

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Constraint):
            return NotImplemented
        return self._astuple() != other._astuple()

    def __hash__(self) -> int:
        return hash(self._astuple())

    def __contains__(self, version: Version) -> bool:
        return self.contains(version)

    def contains(self, version: Version) -> bool:
        if self.lower is not None:
            if version < self.lower:
                return False
            if version == self.lower and not self.lower_inclusive:
                return False
        if self.upper is not None:
            if version > self.upper:
                return False
            if version == self.upper and not self.upper_inclusive:
                return False
        return True

    def intersect(self, other: Constraint) -> Optional[Constraint]:
        """Return the range satisfying both constraints, or ``None``."""
        lower = _tighter_lower(
            (self.lower, self.lower_inclusive),
            (other.lower, other.lower_inclusive),
        )
        upper = _tighter_upper(
            (self.upper, self.upper_inclusive),
            (other.upper, other.upper_inclusive),
        )
        if _is_empty(lower, upper):
            return None
        return type(self)(lower[0], upper[0], lower[1], upper[1])
