"""Growth functions deciding how much an organ elongates per time step."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from math import exp


class GrowthFunction(ABC):
    """Elongation law consulted by an organ during ``simulate``."""

    @abstractmethod
    def length_at(self, param, age: float) -> float:
        """Organ length reached at ``age`` days after emergence."""

    def next_length(self, param, age: float, dt: float) -> float:
        """Additional length gained between ``age`` and ``age + dt`` (never negative)."""
        if dt <= 0:
            return 0.0
        return max(0.0, self.length_at(param, age + dt) - self.length_at(param, age))


@dataclass(frozen=True)
class ConstantGrowth(GrowthFunction):
    """Linear elongation with the parameter's initial growth rate ``r`` [cm/day].

    ``rate`` overrides ``param.r`` when given.
    """

    rate: float | None = None

    def _rate(self, param) -> float:
        return self.rate if self.rate is not None else getattr(param, "r", 0.0)

    def length_at(self, param, age: float) -> float:
        return self._rate(param) * max(age, 0.0)


@dataclass(frozen=True)
class NegativeExponentialGrowth(GrowthFunction):
    """Elongation approaching ``lmax``: l(t) = lmax * (1 - exp(-r / lmax * t))."""

    def length_at(self, param, age: float) -> float:
        lmax = getattr(param, "lmax", 0.0)
        r = getattr(param, "r", 0.0)
        if lmax <= 0:
            return 0.0
        return lmax * (1.0 - exp(-(r / lmax) * max(age, 0.0)))


GROWTH_FUNCTIONS: dict[int, GrowthFunction] = {
    0: ConstantGrowth(),
    1: NegativeExponentialGrowth(),
}


def growth_function(gf: int) -> GrowthFunction:
    try:
        return GROWTH_FUNCTIONS[gf]
    except KeyError:
        raise LookupError(f"unknown growth function number {gf}") from None
