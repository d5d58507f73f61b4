# This file is part of svg-path-model.
#
# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Final

import numpy as np


@dataclass(frozen=True)
class Precision:
    """
    Control the numerical behaviour of the geometric computations.

    :ivar length_samples: Number of Gauss–Legendre nodes used to integrate
                          arc lengths.
    :ivar arc_segment_degrees: Largest sweep (in degrees) approximated by a
                               single cubic Bézier when converting arcs.
    :ivar root_tolerance: Imaginary parts (and overshoot of ``[0, 1]``) up to
                          this magnitude are accepted when collecting real roots.
    """

    length_samples: int = 24
    arc_segment_degrees: float = 90
    root_tolerance: float = 1e-9


DEFAULT_PRECISION: Final = Precision()


def lerp(a: float, b: float, fraction: float) -> float:
    r"""
    Linear interpolation :math:`(1 - f)\,a + f\,b`.

    The formula is exact at both ends: ``fraction=0`` returns ``a`` and
    ``fraction=1`` returns ``b``.
    """
    return (1 - fraction) * a + fraction * b


def real_roots_in_unit_interval(
    coeffs: Sequence[float] | np.ndarray,
    *,
    n: Precision = DEFAULT_PRECISION,
) -> list[float]:
    """
    Real roots of a polynomial that lie in :math:`[0, 1]`.

    :param coeffs: Polynomial coefficients in *ascending* powers.
    :param n: Tolerances used to classify roots as real and in range.
    :return: The roots clamped to :math:`[0, 1]`, sorted in nondecreasing order.
             A constant polynomial has no roots.
    """
    from numpy.polynomial import polynomial as P

    c = np.asarray(coeffs, dtype=float)
    scale = float(np.max(np.abs(c))) if len(c) else 0.0
    if scale == 0:
        return []

    # Leading coefficients that vanish up to rounding would blow up the
    # companion matrix, so drop them relative to the largest coefficient.
    trimmed = P.polytrim(c, tol=scale * 1e-12)
    if len(trimmed) <= 1:
        return []

    tol = n.root_tolerance
    roots = P.polyroots(trimmed)
    result = [
        float(min(max(r.real, 0.0), 1.0))
        for r in np.atleast_1d(roots)
        if abs(r.imag) <= tol and -tol <= r.real <= 1 + tol
    ]
    return sorted(result)
