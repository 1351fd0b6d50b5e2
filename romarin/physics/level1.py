"""The level-1 (square-law) MOSFET model and a parameter fit by annealing."""

from __future__ import annotations

import enum
import math
import random
from dataclasses import dataclass
from typing import Any

import numpy as np

from romarin.loader import IVMeasurements


def _div(numerator: float, denominator: float) -> float:
    if denominator == 0.0:
        if numerator == 0.0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


def _exp(x: float) -> float:
    try:
        return math.exp(x)
    except OverflowError:
        return math.inf


def _pairs(vgs_vds: Any) -> np.ndarray:
    arr = np.asarray(vgs_vds, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"expected rows of (vgs, vds), got shape {arr.shape}")
    return arr


class Mostype(enum.Enum):
    """Channel polarity."""

    PMOS = "pmos"
    NMOS = "nmos"


@dataclass
class Level1:
    """Square-law model with gain ``kp``, modulation ``lambda_`` and threshold ``vth``."""

    kp: float
    lambda_: float
    vth: float

    def ids(self, vgs: float, vds: float) -> float:
        """Drain current at the given gate and drain voltages."""
        if vgs <= self.vth:
            return 0.0
        overdrive = vgs - self.vth
        modulation = 1.0 + self.lambda_ * vds
        if vds < overdrive:
            return self.kp * modulation * (overdrive * vds - 0.5 * vds * vds)
        return 0.5 * self.kp * modulation * overdrive * overdrive

    def tfun(self, vgs_vds: Any) -> np.ndarray:
        """Drain currents for an array of (vgs, vds) rows."""
        rows = _pairs(vgs_vds)
        return np.array([self.ids(g, d) for g, d in rows], dtype=np.float32)

    def make_grid(
        self, vgs_grid: list[float], vds_grid: list[float]
    ) -> tuple[list[float], list[float], list[float]]:
        """Evaluate every (vgs, vds) pair, vgs varying slowest."""
        vgs_col: list[float] = []
        vds_col: list[float] = []
        ids_col: list[float] = []
        for vgs in vgs_grid:
            for vds in vds_grid:
                vgs_col.append(vgs)
                vds_col.append(vds)
                ids_col.append(self.ids(vgs, vds))
        return vgs_col, vds_col, ids_col

    def params(self) -> tuple[float, float, float]:
        """The parameters as (kp, lambda, vth)."""
        return self.kp, self.lambda_, self.vth

    def _set_params(self, params: tuple[float, float, float]) -> None:
        self.kp, self.lambda_, self.vth = params

    def _mse(self, samples: list[tuple[float, float, float]]) -> float:
        total = 0.0
        for vgs, vds, ids in samples:
            error = self.ids(vgs, vds) - ids
            total += error * error
        return _div(total, float(len(samples)))

    def simulated_annealing(
        self,
        data: IVMeasurements,
        start_temp: float,
        epoch: int,
        rng: random.Random | None = None,
    ) -> float:
        """Fit the parameters to ``data``, keep the best found, return its error."""
        generator = rng if rng is not None else random.Random()
        samples = list(zip(data.vgs, data.vds, data.ids))

        best_params = self.params()
        best_score = self._mse(samples)
        for step in range(epoch):
            progress = step / epoch
            temp = start_temp * (1.0 - progress) * progress**4
            rate = _exp(_div(-1.0, temp))

            previous = self.params()
            previous_score = self._mse(samples)

            choice = generator.random()
            if choice < 1.0 / 3.0:
                selector = (1.0, 0.0, 0.0)
            elif choice < 2.0 / 3.0:
                selector = (0.0, 1.0, 0.0)
            else:
                selector = (0.0, 0.0, 1.0)
            candidate = tuple(
                value + pick * generator.uniform(-1.0, 1.0) * rate
                for value, pick in zip(previous, selector)
            )
            self._set_params(candidate)  # type: ignore[arg-type]

            score = self._mse(samples)
            if score < best_score:
                best_score = score
                best_params = candidate  # type: ignore[assignment]

            gain = _div(1.0, score) - _div(1.0, previous_score)
            probability = _exp(_div(gain, temp))
            if probability <= generator.random():
                self._set_params(previous)

        self._set_params(best_params)
        return self._mse(samples)