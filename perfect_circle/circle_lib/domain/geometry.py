"""Geometric value objects for stroke tracking."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Tuple, Iterator


@dataclass(frozen=True)
class Point:
    """Immutable 2D point in rendering-surface coordinates."""
    x: float
    y: float

    def midpoint(self, other: Point) -> Point:
        """Point halfway between this point and another."""
        return Point((self.x + other.x) / 2, (self.y + other.y) / 2)

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Point:
        return Point(self.x * scalar, self.y * scalar)

    def to_tuple(self) -> Tuple[float, float]:
        """Convert to tuple for Pillow drawing calls."""
        return (self.x, self.y)

    def to_list(self) -> List[float]:
        """Convert to list for JSON serialization."""
        return [float(self.x), float(self.y)]


@dataclass(frozen=True)
class Viewport:
    """Size of the rendering surface the player draws on."""
    width: float
    height: float

    def __post_init__(self):
        if not (self.width > 0 and self.height > 0):
            raise ValueError(f"Viewport must have positive size, got {self.width}x{self.height}")

    @property
    def center(self) -> Point:
        """Fixed point the circle is drawn around."""
        return Point(self.width / 2, self.height / 2)


@dataclass
class Stroke:
    """Append-only sequence of pointer samples."""
    points: List[Point] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[Point]:
        return iter(self.points)

    def append(self, point: Point) -> None:
        """Add a sample to the end of the stroke."""
        self.points.append(point)

    def last_pair(self) -> Tuple[Point, Point]:
        """The two most recent samples, oldest first."""
        return self.points[-2], self.points[-1]

    def scaled(self, factor: float, origin: Point) -> Stroke:
        """Return a copy scaled by ``factor`` about ``origin``."""
        return Stroke([origin + (p - origin) * factor for p in self.points])
