"""Value and category scales used to lay bars out in pixel space."""

from __future__ import annotations

import math
from typing import Sequence


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class LinearScale:
    """Maps ``[d0, d1]`` linearly onto ``[r0, r1]``; a zero-width domain maps to ``r0``."""

    def __init__(self, domain: tuple[float, float], range_: tuple[float, float]):
        self.domain = domain
        self.range = range_

    def __call__(self, value: float | None) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if value is None:
            value = 0
        span = d1 - d0
        t = (value - d0) / span if span else 0
        return r0 + (r1 - r0) * t


class BandScale:
    """
    Ordinal scale with rounded bands over a pixel extent.

    ``padding`` is the share of each step left empty between bands and
    ``outer_padding`` the share of a step reserved at each end. Steps and
    band widths are whole pixels; leftover space is split evenly around the
    bands. Repeated categories share the band of their first occurrence.
    """

    def __init__(
        self,
        domain: Sequence[str],
        extent: tuple[float, float],
        padding: float,
        outer_padding: float,
    ):
        self.domain: list[str] = list(dict.fromkeys(domain))
        start, stop = extent
        n = len(self.domain)
        self.step = math.floor((stop - start) / (n - padding + 2 * outer_padding))
        offset = start + _round_half_up((stop - start - (n - padding) * self.step) / 2)
        self._positions = {key: offset + self.step * i for i, key in enumerate(self.domain)}
        self.bandwidth = _round_half_up(self.step * (1 - padding))

    def __call__(self, key: str) -> float:
        return self._positions[key]

    def positions(self) -> list[tuple[str, float]]:
        return list(self._positions.items())
