# This file is part of svg-path-model.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import override

import numpy as np

from .math import DEFAULT_PRECISION, Precision, lerp, real_roots_in_unit_interval

# ------------------------------------------------------------------------------
# Basic geometric primitives
# ------------------------------------------------------------------------------


@dataclass(frozen=True)
class Point:
    """2D point with float coordinates, compared exactly."""

    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        """Iterate as ``(x, y)``."""
        yield self.x
        yield self.y

    @override
    def __str__(self) -> str:
        """Human-readable representation ``(x, y)``."""
        return f"({self.x}, {self.y})"

    @property
    def length(self) -> float:
        """Euclidean norm :math:`‖v‖_2 = \\sqrt{x^2 + y^2}`."""
        return math.hypot(self.x, self.y)

    def distance(self, other: Point) -> float:
        """Euclidean distance to ``other``."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def lerp(self, other: Point, fraction: float) -> Point:
        """Interpolate coordinate-wise towards ``other``; see :func:`~.math.lerp`."""
        return Point(lerp(self.x, other.x, fraction), lerp(self.y, other.y, fraction))

    # ---- vector arithmetic -------------------------------------------------------

    def __neg__(self) -> Point:
        """Unary minus :math:`-v`."""
        return Point(-self.x, -self.y)

    def __add__(self, other: Point) -> Point:
        """Vector addition :math:`v + w`."""
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        """Vector subtraction :math:`v - w`."""
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, other: float) -> Point:
        r"""Scalar multiplication :math:`v ⋅ λ`."""
        return Point(self.x * other, self.y * other)

    def __truediv__(self, other: float) -> Point:
        """Scalar division :math:`v / λ`."""
        return Point(self.x / other, self.y / other)


@dataclass(frozen=True)
class Projection:
    """
    Nearest point on a curve to some query point.

    :ivar x: Abscissa of the nearest point.
    :ivar y: Ordinate of the nearest point.
    :ivar distance: Distance between the query point and the nearest point.
    :ivar t: Curve parameter of the nearest point in :math:`[0, 1]`.
    """

    x: float
    y: float
    distance: float
    t: float

    @property
    def point(self) -> Point:
        """The nearest point as a :class:`Point`."""
        return Point(self.x, self.y)


# ------------------------------------------------------------------------------
# Bézier curves
# ------------------------------------------------------------------------------


def _power_basis_matrix(degree: int) -> np.ndarray:
    r"""
    Matrix mapping Bernstein control points to power-basis coefficients.

    Entry :math:`(j, i)` is :math:`\binom{n}{j}\binom{j}{i}(-1)^{j-i}` for
    :math:`i ≤ j` and zero otherwise.
    """
    m = np.zeros((degree + 1, degree + 1))
    for j in range(degree + 1):
        for i in range(j + 1):
            m[j, i] = math.comb(degree, j) * math.comb(j, i) * (-1) ** (j - i)
    return m


class Bezier:
    r"""
    Bézier curve of degree 0 to 3.

    .. math::

        B(t) = \sum_{i=0}^{n} \binom{n}{i} (1 - t)^{n-i} t^i P_i,
        \quad t \in [0, 1].

    A degree-0 curve is a single point, a degree-1 curve a line segment.
    """

    def __init__(self, points: Sequence[Point]) -> None:
        if not 1 <= len(points) <= 4:
            raise ValueError(f"Unsupported Bézier degree: {len(points) - 1}")
        self.points: tuple[Point, ...] = tuple(points)

    @property
    def degree(self) -> int:
        """Polynomial degree :math:`n`."""
        return len(self.points) - 1

    @property
    def start(self) -> Point:
        return self.points[0]

    @property
    def end(self) -> Point:
        return self.points[-1]

    def coefficients(self) -> np.ndarray:
        """
        Power-basis coefficients in ascending powers.

        :return: Array of shape ``(n + 1, 2)``; row ``j`` holds the ``x`` and
                 ``y`` coefficients of :math:`t^j`.
        """
        pts = np.array([[p.x, p.y] for p in self.points], dtype=float)
        return _power_basis_matrix(self.degree) @ pts

    def _subdivide(self, t: float) -> tuple[list[Point], list[Point]]:
        """De Casteljau subdivision at ``t`` into left and right control points."""
        left: list[Point] = [self.points[0]]
        right: list[Point] = [self.points[-1]]
        current = list(self.points)
        while len(current) > 1:
            current = [a.lerp(b, t) for a, b in zip(current, current[1:])]
            left.append(current[0])
            right.append(current[-1])
        right.reverse()
        return left, right

    def __call__(self, t: float) -> Point:
        """Evaluate :math:`B(t)`."""
        if t == 0:
            return self.points[0]
        if t == 1:
            return self.points[-1]
        left, _ = self._subdivide(t)
        return left[-1]

    def split(self, t0: float, t1: float) -> Bezier:
        """
        Sub-curve covering the parameter range :math:`[t_0, t_1]`.

        The result has the same degree; its end points are :math:`B(t_0)` and
        :math:`B(t_1)`.
        """
        if t0 == 0 and t1 == 1:
            return Bezier(self.points)
        if t0 == 1:
            return Bezier([self.points[-1]] * len(self.points))

        right = self._subdivide(t0)[1] if t0 != 0 else list(self.points)
        left, _ = Bezier(right)._subdivide((t1 - t0) / (1 - t0))
        return Bezier(left)

    def arc_length(self, *, n: Precision = DEFAULT_PRECISION) -> float:
        r"""
        Arc length :math:`\int_0^1 ‖B'(t)‖_2 \, dt`.

        Lines are measured exactly; curves are integrated with
        Gauss–Legendre quadrature using ``n.length_samples`` nodes.
        """
        from numpy.polynomial import legendre
        from numpy.polynomial import polynomial as P

        if self.degree == 0:
            return 0.0
        if self.degree == 1:
            return self.start.distance(self.end)

        nodes, weights = legendre.leggauss(n.length_samples)
        ts = (nodes + 1) / 2
        derivative = P.polyder(self.coefficients())
        dx = P.polyval(ts, derivative[:, 0])
        dy = P.polyval(ts, derivative[:, 1])
        return float(np.sum(weights * np.hypot(dx, dy)) / 2)

    @property
    def length(self) -> float:
        """Arc length using :data:`~.math.DEFAULT_PRECISION`."""
        return self.arc_length()

    def project(self, point: Point, *, n: Precision = DEFAULT_PRECISION) -> Projection:
        r"""
        Nearest point of the curve to ``point``.

        The stationary points of :math:`‖B(t) - p‖^2` are the roots of
        :math:`(B(t) - p) ⋅ B'(t)` in :math:`[0, 1]`; they are compared with
        both end points. Among equally distant candidates the smallest
        parameter wins.
        """
        from numpy.polynomial import polynomial as P

        candidates = [0.0]
        if self.degree > 0:
            q = self.coefficients()
            q[0] -= (point.x, point.y)
            dq = P.polyder(q)
            poly = P.polyadd(
                P.polymul(q[:, 0], dq[:, 0]),
                P.polymul(q[:, 1], dq[:, 1]),
            )
            candidates.extend(real_roots_in_unit_interval(poly, n=n))
            candidates.append(1.0)

        best: Projection | None = None
        for t in candidates:
            p = self(t)
            d = p.distance(point)
            if best is None or d < best.distance:
                best = Projection(p.x, p.y, d, t)
        assert best is not None
        return best

    def elevated(self) -> Bezier:
        """Degree elevation by one; the geometry is unchanged."""
        pts = self.points
        n = self.degree
        if n >= 3:
            raise ValueError("Cannot elevate a cubic Bézier curve")
        inner = [
            pts[i - 1] * (i / (n + 1)) + pts[i] * (1 - i / (n + 1))
            for i in range(1, n + 1)
        ]
        return Bezier([pts[0], *inner, pts[-1]])

    @override
    def __repr__(self) -> str:
        return f"Bezier({', '.join(str(p) for p in self.points)})"


# ------------------------------------------------------------------------------
# Elliptical arcs
# ------------------------------------------------------------------------------


def _angle(ux: float, uy: float, vx: float, vy: float) -> float:
    """Signed angle in radians from ``u`` to ``v``."""
    return math.atan2(ux * vy - uy * vx, ux * vx + uy * vy)


def arc_to_beziers(
    start: Point,
    rx: float,
    ry: float,
    rotation: float,
    large_arc: bool,
    sweep: bool,
    end: Point,
    *,
    n: Precision = DEFAULT_PRECISION,
) -> list[tuple[Point, Point, Point]]:
    """
    Approximate an SVG elliptical arc by cubic Bézier curves.

    The arc is converted to center parametrisation (SVG 1.1, F.6.5), radii that
    are too small are scaled up (F.6.6), and the sweep is divided into pieces
    of at most ``n.arc_segment_degrees`` degrees.

    :param start: Current point.
    :param rx: Radius along the rotated x-axis.
    :param ry: Radius along the rotated y-axis.
    :param rotation: Rotation of the ellipse's x-axis in degrees.
    :param large_arc: SVG ``large-arc-flag``.
    :param sweep: SVG ``sweep-flag``.
    :param end: Arc end point.
    :return: One ``(control1, control2, end)`` triple per cubic segment; empty
             if ``start == end``. A zero radius degrades to a straight cubic.
    """
    if start == end:
        return []
    rx, ry = abs(rx), abs(ry)
    if rx == 0 or ry == 0:
        return [(start.lerp(end, 1 / 3), start.lerp(end, 2 / 3), end)]

    phi = math.radians(rotation)
    cos_phi, sin_phi = math.cos(phi), math.sin(phi)

    # Step 1: compute (x1', y1')
    dx2, dy2 = (start.x - end.x) / 2, (start.y - end.y) / 2
    x1p = cos_phi * dx2 + sin_phi * dy2
    y1p = -sin_phi * dx2 + cos_phi * dy2

    # Correct out-of-range radii
    lam = (x1p / rx) ** 2 + (y1p / ry) ** 2
    if lam > 1:
        rx, ry = rx * math.sqrt(lam), ry * math.sqrt(lam)

    # Step 2: compute (cx', cy')
    num = rx * rx * ry * ry - rx * rx * y1p * y1p - ry * ry * x1p * x1p
    den = rx * rx * y1p * y1p + ry * ry * x1p * x1p
    coef = math.sqrt(max(0.0, num / den))
    if large_arc == sweep:
        coef = -coef
    cxp, cyp = coef * rx * y1p / ry, -coef * ry * x1p / rx

    # Step 3: compute (cx, cy)
    cx = cos_phi * cxp - sin_phi * cyp + (start.x + end.x) / 2
    cy = sin_phi * cxp + cos_phi * cyp + (start.y + end.y) / 2

    # Step 4: start angle and sweep
    ux, uy = (x1p - cxp) / rx, (y1p - cyp) / ry
    vx, vy = (-x1p - cxp) / rx, (-y1p - cyp) / ry
    theta1 = _angle(1, 0, ux, uy)
    dtheta = _angle(ux, uy, vx, vy)
    if not sweep and dtheta > 0:
        dtheta -= 2 * math.pi
    elif sweep and dtheta < 0:
        dtheta += 2 * math.pi

    segments = max(1, math.ceil(abs(dtheta) / math.radians(n.arc_segment_degrees) - 1e-9))
    delta = dtheta / segments
    k = 4 / 3 * math.tan(delta / 4)

    # Unit-circle control points of all segments, mapped onto the ellipse at once
    a1 = theta1 + delta * np.arange(segments)
    a2 = a1 + delta
    unit = np.stack(
        [
            np.cos(a1) - k * np.sin(a1),
            np.sin(a1) + k * np.cos(a1),
            np.cos(a2) + k * np.sin(a2),
            np.sin(a2) - k * np.cos(a2),
            np.cos(a2),
            np.sin(a2),
        ],
        axis=1,
    ).reshape(segments, 3, 2)
    transform = np.array([[rx * cos_phi, -ry * sin_phi], [rx * sin_phi, ry * cos_phi]])
    mapped = unit @ transform.T + np.array([cx, cy])

    result: list[tuple[Point, Point, Point]] = []
    for c1, c2, e in mapped:
        result.append(
            (
                Point(float(c1[0]), float(c1[1])),
                Point(float(c2[0]), float(c2[1])),
                Point(float(e[0]), float(e[1])),
            )
        )
    # Snap the final point onto the exact arc end
    c1, c2, _ = result[-1]
    result[-1] = (c1, c2, end)
    return result
