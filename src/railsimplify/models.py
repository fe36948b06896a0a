"""
Pydantic data models for railsimplify.

Network pieces flow through these models so every stage sees the same
validated shapes. Models are frozen: each stage builds new pieces rather
than editing the ones it was given.
"""

from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Severity(str, Enum):
    """Severity levels for validation checks."""
    ERROR = "error"
    WARN = "warn"
    INFO = "info"


class Point(BaseModel):
    """A 3D control point."""
    x: float
    y: float
    z: float = 0.0

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def _from_sequence(cls, data):
        # accept [x, y] or [x, y, z]
        if isinstance(data, (list, tuple)):
            if len(data) not in (2, 3):
                raise ValueError(f"Expected 2 or 3 coordinates, got {len(data)}")
            return dict(zip(("x", "y", "z"), data))
        return data

    def as_list(self):
        return [self.x, self.y, self.z]


class Piece(BaseModel):
    """
    A chain of control points with one visibility flag per segment.

    visible[i] describes the segment from points[i] to points[i + 1].
    """
    points: List[Point] = Field(default_factory=list)
    visible: List[bool] = Field(default_factory=list)
    kind: str = ""

    model_config = ConfigDict(frozen=True, extra="forbid")

    @property
    def origin(self):
        """The first control point."""
        return self.points[0]

    @property
    def segment_count(self):
        return len(self.visible)

    @property
    def point_count(self):
        return len(self.points)

    @property
    def is_visible(self):
        """True if at least one segment is visible."""
        return any(self.visible)

    @property
    def is_simplified(self):
        """True if only the first and/or last segment is hidden."""
        return self.is_visible and all(self.visible[1:-1])

    def reversed(self):
        """Return the same piece traversed from the other end."""
        return Piece(
            points=self.points[::-1],
            visible=self.visible[::-1],
            kind=self.kind,
        )


class Network(BaseModel):
    """An ordered collection of pieces describing a rail network."""
    pieces: List[Piece] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class CheckResult(BaseModel):
    """Result of a single validation check."""
    rule_id: str
    severity: Severity
    passed: bool
    message: str
    evidence: Dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class ValidationReport(BaseModel):
    """Collection of validation check results."""
    checks: List[CheckResult] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    @property
    def has_errors(self):
        """Check if any errors exist."""
        return any(c.severity == Severity.ERROR and not c.passed for c in self.checks)

    @property
    def error_count(self):
        """Count of failed error-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.ERROR and not c.passed)

    @property
    def warning_count(self):
        """Count of failed warning-level checks."""
        return sum(1 for c in self.checks if c.severity == Severity.WARN and not c.passed)


def count_points(pieces):
    """Total number of control points across pieces."""
    return sum(len(p.points) for p in pieces)


def make_piece(coords, visible, kind=""):
    """
    Build a piece from plain coordinate lists.

    Each coordinate is [x, y] or [x, y, z].
    """
    points = [Point(x=c[0], y=c[1], z=c[2] if len(c) > 2 else 0.0) for c in coords]
    return Piece(points=points, visible=list(visible), kind=kind)
