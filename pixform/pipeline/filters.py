"""Resampling filters used by the resizer.

A filter is a support radius plus a weight function that is zero outside
``[-support, support]``. The named filters form a closed set; ``custom``
builds an ad-hoc filter from any callable.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
import math

from pixform.exceptions import UnsupportedKernelError


class FilterKind(Enum):
    """Family a ResampleFilter belongs to."""

    NEAREST = "nearest"
    BOX = "box"
    LINEAR = "linear"
    CUBIC = "cubic"
    LANCZOS = "lanczos"
    WINDOWED = "windowed"
    CUSTOM = "custom"


@dataclass(frozen=True)
class ResampleFilter:
    """1-D resampling kernel.

    Attributes:
        name: Lookup name, e.g. ``"lanczos"``.
        kind: Filter family.
        support: Radius in source pixels beyond which the weight is zero.
            A support of 0 selects nearest-neighbour sampling.
        kernel: Weight function of the (unscaled) distance.
    """

    name: str
    kind: FilterKind
    support: float
    kernel: Callable[[float], float]

    def weight(self, distance: float) -> float:
        if abs(distance) > self.support:
            return 0.0
        return self.kernel(distance)

    @classmethod
    def custom(cls, support: float, kernel: Callable[[float], float], name: str = "custom") -> ResampleFilter:
        """Wrap an arbitrary weight function as a filter."""
        if support < 0 or math.isnan(support):
            raise UnsupportedKernelError(f"Filter support must be non-negative, got {support}")
        return cls(name=name, kind=FilterKind.CUSTOM, support=float(support), kernel=kernel)


def sinc(x: float) -> float:
    if x == 0:
        return 1.0
    return math.sin(math.pi * x) / (math.pi * x)


def bc_spline(x: float, b: float, c: float) -> float:
    """Mitchell–Netravali family of cubic splines."""
    x = abs(x)
    if x < 1.0:
        return ((12 - 9 * b - 6 * c) * x**3 + (-18 + 12 * b + 6 * c) * x**2 + (6 - 2 * b)) / 6
    if x < 2.0:
        return ((-b - 6 * c) * x**3 + (6 * b + 30 * c) * x**2 + (-12 * b - 48 * c) * x + (8 * b + 24 * c)) / 6
    return 0.0


def _box(x: float) -> float:
    return 1.0 if abs(x) <= 0.5 else 0.0


def _linear(x: float) -> float:
    x = abs(x)
    return 1.0 - x if x < 1.0 else 0.0


def _lanczos(x: float) -> float:
    x = abs(x)
    return sinc(x) * sinc(x / 3.0) if x < 3.0 else 0.0


def _windowed(window: Callable[[float], float]) -> Callable[[float], float]:
    """Sinc windowed over a support of 3."""

    def kernel(x: float) -> float:
        x = abs(x)
        if x < 3.0:
            return sinc(x) * window(x)
        return 0.0

    return kernel


NEAREST = ResampleFilter("nearest", FilterKind.NEAREST, 0.0, lambda x: 0.0)
BOX = ResampleFilter("box", FilterKind.BOX, 0.5, _box)
LINEAR = ResampleFilter("linear", FilterKind.LINEAR, 1.0, _linear)
HERMITE = ResampleFilter("hermite", FilterKind.CUBIC, 1.0, lambda x: bc_spline(x, 0.0, 0.0))
MITCHELL_NETRAVALI = ResampleFilter(
    "mitchell_netravali", FilterKind.CUBIC, 2.0, lambda x: bc_spline(x, 1.0 / 3.0, 1.0 / 3.0)
)
CATMULL_ROM = ResampleFilter("catmull_rom", FilterKind.CUBIC, 2.0, lambda x: bc_spline(x, 0.0, 0.5))
CUBIC = CATMULL_ROM
BSPLINE = ResampleFilter("bspline", FilterKind.CUBIC, 2.0, lambda x: bc_spline(x, 1.0, 0.0))
GAUSSIAN = ResampleFilter(
    "gaussian", FilterKind.WINDOWED, 2.0, lambda x: math.exp(-2 * x * x) if abs(x) < 2.0 else 0.0
)
LANCZOS = ResampleFilter("lanczos", FilterKind.LANCZOS, 3.0, _lanczos)
BARTLETT = ResampleFilter("bartlett", FilterKind.WINDOWED, 3.0, _windowed(lambda x: (3.0 - x) / 3.0))
HANN = ResampleFilter("hann", FilterKind.WINDOWED, 3.0, _windowed(lambda x: 0.5 + 0.5 * math.cos(math.pi * x / 3.0)))
HAMMING = ResampleFilter(
    "hamming", FilterKind.WINDOWED, 3.0, _windowed(lambda x: 0.54 + 0.46 * math.cos(math.pi * x / 3.0))
)
BLACKMAN = ResampleFilter(
    "blackman",
    FilterKind.WINDOWED,
    3.0,
    _windowed(lambda x: 0.42 - 0.5 * math.cos(math.pi * x / 3.0 + math.pi) + 0.08 * math.cos(2.0 * math.pi * x / 3.0)),
)
WELCH = ResampleFilter("welch", FilterKind.WINDOWED, 3.0, _windowed(lambda x: 1.0 - (x * x / 9.0)))
COSINE = ResampleFilter("cosine", FilterKind.WINDOWED, 3.0, _windowed(lambda x: math.cos((math.pi / 2.0) * (x / 3.0))))

FILTERS: dict[str, ResampleFilter] = {
    f.name: f
    for f in (
        NEAREST,
        BOX,
        LINEAR,
        HERMITE,
        MITCHELL_NETRAVALI,
        CATMULL_ROM,
        BSPLINE,
        GAUSSIAN,
        LANCZOS,
        BARTLETT,
        HANN,
        HAMMING,
        BLACKMAN,
        WELCH,
        COSINE,
    )
}
FILTERS["cubic"] = CUBIC


def get_filter(name: str) -> ResampleFilter:
    """Look up a named filter (case-insensitive, '-' and ' ' treated as '_')."""
    key = name.strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return FILTERS[key]
    except KeyError:
        raise UnsupportedKernelError(f"Unknown resample filter: {name!r}") from None


def resolve_filter(selector: ResampleFilter | str) -> ResampleFilter:
    """Accept either a filter or its name."""
    if isinstance(selector, ResampleFilter):
        return selector
    if isinstance(selector, str):
        return get_filter(selector)
    raise UnsupportedKernelError(f"Unsupported filter selector: {selector!r}")
