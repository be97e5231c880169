"""Stroke smoothing and rendering utilities.

This module turns raw pointer samples into the smoothed curve shown to the
player and renders strokes as images. The smoothing is a midpoint
quadratic scheme: every interior sample acts as the control point of a
quadratic Bezier segment that ends halfway to the next sample, so the curve
has no corners yet stays close to every sample. The last segment ends
exactly on the last sample.

The module provides the following:
    QuadSegment: One quadratic Bezier segment (control point, end point).
    SmoothPath: Start point plus a list of QuadSegments.
    smooth_path: Build a SmoothPath from raw samples.
    render_stroke_image: Draw a stroke and the center dot with Pillow.

Example usage:
    Building and serializing a curve::

        from circle_lib.utils.rendering import smooth_path

        path = smooth_path(points)
        if path is not None:
            payload = path.to_dict()       # for the rendering sink
            polyline = path.flatten(8)     # for raster drawing

    Rendering a preview::

        from circle_lib.utils.rendering import render_stroke_image

        img = render_stroke_image(points, center, (0, 255, 0), size=(800, 600))
        img.save('preview.png')
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw

from ..domain.geometry import Point

LINE_WIDTH = 5
CENTER_DOT_RADIUS = 5
CURVE_STEPS = 8               # Polyline points per quadratic segment
BACKGROUND_COLOR = (0, 0, 0)
CENTER_DOT_COLOR = (255, 255, 255)


@dataclass(frozen=True)
class QuadSegment:
    """Quadratic Bezier segment starting where the previous one ended."""
    control: Point
    end: Point

    def point_at(self, start: Point, t: float) -> Point:
        """Evaluate the segment at parameter ``t`` in [0, 1]."""
        u = 1.0 - t
        return Point(
            u * u * start.x + 2 * u * t * self.control.x + t * t * self.end.x,
            u * u * start.y + 2 * u * t * self.control.y + t * t * self.end.y,
        )


@dataclass
class SmoothPath:
    """Drawable curve: a start point and consecutive quadratic segments."""
    start: Point
    segments: List[QuadSegment] = field(default_factory=list)

    @property
    def end(self) -> Point:
        return self.segments[-1].end if self.segments else self.start

    def flatten(self, steps: int = CURVE_STEPS) -> List[Point]:
        """Sample the curve into a polyline.

        Args:
            steps: Points generated per segment, excluding its start.

        Returns:
            List of points beginning at ``start`` and ending exactly at
            ``end``.
        """
        out = [self.start]
        seg_start = self.start
        for seg in self.segments:
            for i in range(1, steps):
                out.append(seg.point_at(seg_start, i / steps))
            out.append(seg.end)
            seg_start = seg.end
        return out

    def to_dict(self) -> dict:
        """Serialize for JSON: ``{'start': [x, y], 'segments': [[cx, cy, x, y], ...]}``."""
        return {
            'start': self.start.to_list(),
            'segments': [seg.control.to_list() + seg.end.to_list() for seg in self.segments],
        }


def smooth_path(points: Sequence[Point]) -> Optional[SmoothPath]:
    """Build the midpoint-quadratic curve through a sequence of samples.

    Args:
        points: Raw samples in drawing order.

    Returns:
        SmoothPath starting at ``points[0]`` and ending at ``points[-1]``,
        or None for fewer than two points.

    Example:
        >>> path = smooth_path([Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)])
        >>> [(s.control.to_tuple(), s.end.to_tuple()) for s in path.segments]
        [((10.0, 0.0), (10.0, 5.0)), ((10.0, 10.0), (0.0, 10.0))]
    """
    n = len(points)
    if n < 2:
        return None

    path = SmoothPath(points[0])
    for i in range(1, n - 2):
        path.segments.append(QuadSegment(points[i], points[i].midpoint(points[i + 1])))
    path.segments.append(QuadSegment(points[n - 2], points[n - 1]))
    return path


def render_stroke_image(
    points: Sequence[Point],
    center: Point,
    color: Tuple[int, int, int],
    size: Tuple[int, int],
    line_width: int = LINE_WIDTH,
) -> Image.Image:
    """Render a stroke the way the game canvas shows it.

    Draws the smoothed stroke with round joints and the white center dot
    on a black background.

    Args:
        points: Stroke samples; fewer than two draws only the center dot.
        center: Fixed center of the circle.
        color: RGB colour of the stroke.
        size: Image size as (width, height).
        line_width: Stroke width in pixels.

    Returns:
        RGB PIL Image of the given size.
    """
    img = Image.new('RGB', size, BACKGROUND_COLOR)
    draw = ImageDraw.Draw(img)

    path = smooth_path(points)
    if path is not None:
        polyline = [p.to_tuple() for p in path.flatten()]
        draw.line(polyline, fill=color, width=line_width, joint='curve')
        r = line_width / 2
        for cap in (polyline[0], polyline[-1]):
            draw.ellipse([cap[0] - r, cap[1] - r, cap[0] + r, cap[1] + r], fill=color)

    r = CENTER_DOT_RADIUS
    draw.ellipse([center.x - r, center.y - r, center.x + r, center.y + r],
                 fill=CENTER_DOT_COLOR)
    return img
