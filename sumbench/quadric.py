"""
Quadric surface evaluation under translation.

Evaluating ``|pos + trans|^2 - radius^2`` is a short sum of products whose
terms cancel heavily when the point lies near the surface.  The evaluators
below expand the square as

    -radius^2 + sum(pos*trans + trans*trans) + sum(pos*(pos + trans))

and differ only in how that sum is accumulated.
"""

from dataclasses import dataclass
from typing import Callable, NamedTuple

import numpy as np

from .exact import ExactContext
from .precision import Precision

QUADRIC_DIM = 3

# Operands are drawn uniformly from [-MAX_MAGNITUDE, MAX_MAGNITUDE].
MAX_MAGNITUDE = 1024.0 * 1024.0


@dataclass(frozen=True, eq=False)
class QuadricCase:
    """
    One point, one translation and a radius, with the exact quadric value.

    Attributes:
        pos: Point coordinates
        trans: Translation applied to the point
        radius: Radius of the surface
        reference: Exact value of ``|pos + trans|^2 - radius^2``
    """

    pos: np.ndarray
    trans: np.ndarray
    radius: object
    reference: object

    @classmethod
    def from_values(cls, pos, trans, radius, context: ExactContext,
                    precision: Precision = Precision.SINGLE) -> "QuadricCase":
        pos = np.asarray(pos, dtype=precision.dtype).copy()
        trans = np.asarray(trans, dtype=precision.dtype).copy()
        radius = precision.dtype(radius)
        pos.flags.writeable = False
        trans.flags.writeable = False

        exact_radius = context.exact(radius)
        terms = [-(exact_radius * exact_radius)]
        for p, t in zip(pos, trans):
            shifted = context.exact(p) + context.exact(t)
            terms.append(shifted * shifted)
        return cls(pos, trans, radius, context.fsum(terms))

    @property
    def precision(self) -> Precision:
        return Precision.from_dtype(self.pos.dtype)


def sphere_case(rng: np.random.Generator, context: ExactContext,
                precision: Precision = Precision.SINGLE) -> QuadricCase:
    """Random point against a randomly translated sphere."""
    dtype = precision.dtype
    radius = np.abs(dtype(rng.uniform(-MAX_MAGNITUDE, MAX_MAGNITUDE)))
    pos = np.empty(QUADRIC_DIM, dtype=dtype)
    trans = np.empty(QUADRIC_DIM, dtype=dtype)
    for i in range(QUADRIC_DIM):
        pos[i] = rng.uniform(-MAX_MAGNITUDE, MAX_MAGNITUDE)
        trans[i] = rng.uniform(-MAX_MAGNITUDE, MAX_MAGNITUDE)
    return QuadricCase.from_values(pos, trans, radius, context, precision)


def axis_cylinder_case(rng: np.random.Generator, context: ExactContext,
                       precision: Precision = Precision.SINGLE) -> QuadricCase:
    """Random point against a translated cylinder aligned with a random axis."""
    dtype = precision.dtype
    axis = int(rng.integers(QUADRIC_DIM))
    radius = np.abs(dtype(rng.uniform(-MAX_MAGNITUDE, MAX_MAGNITUDE)))
    pos = np.empty(QUADRIC_DIM, dtype=dtype)
    trans = np.zeros(QUADRIC_DIM, dtype=dtype)
    for i in range(QUADRIC_DIM):
        if i != axis:
            trans[i] = rng.uniform(-MAX_MAGNITUDE, MAX_MAGNITUDE)
        pos[i] = rng.uniform(-MAX_MAGNITUDE, MAX_MAGNITUDE)
    return QuadricCase.from_values(pos, trans, radius, context, precision)


def null_quadric(case: QuadricCase):
    """Does no work; its timings measure harness overhead."""
    return case.precision.zero()


def naive_quadric(case: QuadricCase):
    pos, trans, radius = case.pos, case.trans, case.radius
    shifted = pos + trans
    trans_sum = -radius * radius
    for p, t in zip(pos, trans):
        trans_sum += p * t + t * t
    accumulator = trans_sum
    for p, s in zip(pos, shifted):
        accumulator += p * s
    return accumulator


def fma_quadric(case: QuadricCase):
    precision = case.precision
    pos, trans, radius = case.pos, case.trans, case.radius
    shifted = pos + trans
    trans_sum = -radius * radius
    for p, t in zip(pos, trans):
        trans_sum = precision.fma(p, t, trans_sum)
        trans_sum = precision.fma(t, t, trans_sum)
    accumulator = trans_sum
    for p, s in zip(pos, shifted):
        accumulator = precision.fma(p, s, accumulator)
    return accumulator


def kahan_fma_quadric(case: QuadricCase):
    """
    FMA evaluation with separate Kahan compensation for the two
    translation terms; the final pass is a plain FMA chain.
    """
    precision = case.precision
    pos, trans, radius = case.pos, case.trans, case.radius
    shifted = pos + trans
    trans_sum = -radius * radius
    c1 = precision.zero()
    c2 = precision.zero()
    for p, t in zip(pos, trans):
        mod1 = precision.fma(p, t, -c1)
        tmp = trans_sum + mod1
        c1 = (tmp - trans_sum) - mod1
        trans_sum = tmp

        mod2 = precision.fma(t, t, -c2)
        tmp = trans_sum + mod2
        c2 = (tmp - trans_sum) - mod2
        trans_sum = tmp
    accumulator = trans_sum
    for p, s in zip(pos, shifted):
        accumulator = precision.fma(p, s, accumulator)
    return accumulator


class QuadricEvaluator(NamedTuple):
    key: str
    label: str
    function: Callable


QUADRIC_EVALUATORS = [
    QuadricEvaluator("null", "Null", null_quadric),
    QuadricEvaluator("naive", "Naive", naive_quadric),
    QuadricEvaluator("fma", "FMA", fma_quadric),
    QuadricEvaluator("kahan_fma", "Kahan FMA", kahan_fma_quadric),
]

QUADRIC_CASES = {
    "Sphere Tests": sphere_case,
    "Axis Aligned Cylinder Tests": axis_cylinder_case,
}
