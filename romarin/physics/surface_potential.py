"""A surface-potential based SiC power MOSFET model and a parameter fit by annealing."""

from __future__ import annotations

import math
import operator
import random
from dataclasses import dataclass
from typing import Any

import numpy as np

from romarin.loader import IVMeasurements

_F = np.float64

Q = _F(1.60210e-19)
"""Elementary charge [C]."""
KB = _F(1.38054e-23)
"""Boltzmann constant [J/K]."""
T = _F(300.0)
"""Absolute temperature [K]."""
PHI_T = KB * T / Q
"""Thermal voltage [V]."""
EPS0_M2 = _F(8.854187817 * 1e-12)
"""Vacuum permittivity [F/m]."""
EPS0_CM2 = EPS0_M2 * 1e-2
"""Vacuum permittivity [F/cm]."""
EPS_OX_CM2 = 3.9 * EPS0_CM2
"""Oxide permittivity [F/cm]."""
EPS_SIC_CM2 = 9.7 * EPS0_CM2
"""SiC permittivity [F/cm]."""
NI_SIC_CM2 = _F(9.7e-9)
"""Intrinsic carrier density of SiC [1/cm^3]."""

_FIELDS = ("scale", "tox", "na", "lambda_", "vfbc", "theta", "delta", "alpha", "rd")


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


@dataclass
class SurfacePotentialModel:
    """Model parameters.

    ``scale`` scales the current, ``tox`` is the oxide thickness, ``na`` the
    acceptor density, ``lambda_`` the channel-length modulation, ``vfbc`` the
    flat-band voltage, ``theta`` the mobility degradation, ``delta`` the
    smoothing parameter, ``alpha`` the degradation onset voltage and ``rd``
    the drain resistance.
    """

    scale: float
    tox: float
    na: float
    lambda_: float
    vfbc: float
    theta: float
    delta: float
    alpha: float
    rd: float

    @staticmethod
    def _field(index: Any) -> str:
        position = operator.index(index)
        if not 0 <= position < len(_FIELDS):
            raise IndexError(f"parameter index {position} out of range 0..{len(_FIELDS) - 1}")
        return _FIELDS[position]

    def __getitem__(self, index: int) -> float:
        return getattr(self, self._field(index))

    def __setitem__(self, index: int, value: float) -> None:
        setattr(self, self._field(index), value)

    def psi_calc(self, vgs: float, vcb: float, two_phi_f: float, g: float) -> float:
        """Surface potential for gate voltage ``vgs`` and channel voltage ``vcb``."""
        with np.errstate(all="ignore"):
            vgs = _F(vgs)
            vcb = _F(vcb)
            two_phi_f = _F(two_phi_f)
            g = _F(g)
            xg = (vgs - _F(self.vfbc)) / PHI_T
            xi = 1.0 + g / np.sqrt(_F(2.0))

            if abs(xg / xi) < 1e-7:
                x = xg / xi
            else:
                x23 = (two_phi_f + vcb) / (2.0 * PHI_T)
                xg23 = g * np.sqrt(x23 - 1.0)
                del_n = np.exp(-(two_phi_f + vcb) / PHI_T)
                gsq = g * g
                if xg < 0.0:
                    yg = -xg
                    z = 1.25 * yg / xi
                    eta = 0.5 * (z + 10.0 - np.sqrt((z - 6.0) * (z - 6.0) + 64.0))
                    a = (yg - eta) * (yg - eta) + gsq * (eta + 1.0)
                    c = 2.0 * (yg - eta) - gsq
                    tau = -eta + np.log(a / gsq)
                    u = (a + c) * (a + c) / tau + 0.5 * c * c - a
                    y0 = eta + a * (a + c) / (u + c * (a + c) * (c * c / 3.0 - a) / u)
                    del_0 = np.exp(y0)
                    del_1 = 1.0 / del_0
                    p = 2.0 * (yg - y0) + gsq * (del_0 - 1.0 + del_n * (1.0 - del_1))
                    q = (yg - y0) * (yg - y0) + gsq * (
                        y0 - del_0 + 1.0 + del_n * (1.0 - del_1 - y0)
                    )
                    x = -y0 - 2.0 * q / (
                        p + np.sqrt(p * p - 2.0 * q * (2.0 - gsq * (del_0 + del_n * del_1)))
                    )
                else:
                    xbar = xg * (1.0 + xg * (xi * x23 - xg23) / (xg23 * xg23)) / xi
                    if xg < xg23:
                        ebar = np.exp(-xbar)
                        omega = 1.0 - ebar - del_n * ((1.0 / ebar) - ebar - 2.0 + xbar)
                        x0 = xg + 0.5 * gsq - g * np.sqrt(xg + 0.25 * gsq - omega)
                    else:
                        xsub = xg + 0.5 * gsq - g * np.sqrt(xg + 0.25 * gsq - 1.0)
                        xn = (two_phi_f + vcb) / PHI_T
                        b = xn + 3.0
                        eta = 0.5 * (xsub + b - np.sqrt((xsub - b) * (xsub - b) + 5.0))
                        a = (xg - eta) * (xg - eta) - gsq * (eta - 1.0)
                        c = 2.0 * (xg - eta) + gsq
                        tau = xn - eta + np.log(a / gsq)
                        u = (a + c) * (a + c) / tau + 0.5 * c * c - a
                        x0 = eta + (a * (a + c)) / (u + c * (a + c) * (c * c / 3.0 - a) / u)

                    del_0 = np.exp(x0)
                    del_1 = 1.0 / del_0
                    p = 2.0 * (xg - x0) + gsq * (1.0 - del_1 + del_n * (del_0 + del_1 - 2.0))
                    q = (xg - x0) * (xg - x0) - gsq * (
                        x0 + del_1 - 1.0 + del_n * (del_0 - del_1 - 2.0 * xbar)
                    )
                    x = x0 + 2.0 * q / (
                        p + np.sqrt(p * p - 2.0 * q * (2.0 - gsq * (del_1 + del_n * del_0)))
                    )

            return float(PHI_T * x)

    def idd_calc(self, vgs: float, phi_s0: float, phi_sl: float) -> float:
        """Drift-diffusion current between source and drain surface potentials."""
        with np.errstate(all="ignore"):
            vgs = _F(vgs)
            phi_s0 = _F(phi_s0)
            phi_sl = _F(phi_sl)
            tox_cm = _F(self.tox) * 1e2
            cox_cm = EPS_OX_CM2 / tox_cm
            gamma = np.sqrt(2.0 * EPS_SIC_CM2 * KB * T * _F(self.na))

            if not (phi_s0 >= 0.0 and phi_sl >= 0.0):
                return 1e-12

            idd = cox_cm * (vgs - _F(self.vfbc) + PHI_T) * (phi_sl - phi_s0)
            idd = idd - 0.5 * cox_cm * (phi_sl * phi_sl - phi_s0 * phi_s0)
            idd = idd - (2.0 / 3.0) * PHI_T * gamma * (
                np.power(phi_sl / PHI_T - 1.0, 1.5) - np.power(phi_s0 / PHI_T - 1.0, 1.5)
            )
            idd = idd + PHI_T * gamma * (
                np.power(phi_sl / PHI_T - 1.0, 0.5) - np.power(phi_s0 / PHI_T - 1.0, 0.5)
            )
            return float(idd / PHI_T)

    def ids(self, vgs: float, vds: float, vbs: float = 0.0) -> float:
        """Drain current; non-positive ``vds`` is treated as 1e-6 and ``vbs`` is unused."""
        with np.errstate(all="ignore"):
            vgs = _F(vgs)
            vds = _F(vds)
            na = _F(self.na)
            delta = _F(self.delta)
            tox_cm = _F(self.tox) * 1e2
            cox_cm = EPS_OX_CM2 / tox_cm

            if vds <= 0.0:
                vds = _F(1e-6)
            vds_eff = vds / np.power(1.0 + np.power(vds / vgs, delta), 1.0 / delta)

            xxx = np.sqrt(2.0 * Q * EPS_SIC_CM2 * na) / cox_cm
            ggg = xxx / np.sqrt(PHI_T)
            two_phi_f = 2.0 * PHI_T * np.log(na / NI_SIC_CM2)
            phi_s0 = self.psi_calc(vgs, 0.0, two_phi_f, ggg)
            phi_sl = self.psi_calc(vgs, vds_eff, two_phi_f, ggg)

            idd = _F(self.idd_calc(vgs, phi_s0, phi_sl))

            ids_tmp = idd * _F(self.scale) * (1.0 + _F(self.lambda_) * vds)
            if vgs > self.alpha:
                ids_tmp = ids_tmp / (1.0 + _F(self.theta) * (vgs - _F(self.alpha)))

            current = ids_tmp / (1.0 + (ids_tmp * _F(self.rd)) / vds)
            if current < 0.0:
                return 1e-12
            return float(current)

    def tfun(self, vgs_vds: Any) -> np.ndarray:
        """Drain currents for an array of (vgs, vds) rows."""
        rows = np.asarray(vgs_vds, dtype=np.float64)
        if rows.ndim != 2 or rows.shape[1] != 2:
            raise ValueError(f"expected rows of (vgs, vds), got shape {rows.shape}")
        return np.array([self.ids(g, d, 0.0) for g, d in rows], dtype=np.float64)

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
                ids_col.append(self.ids(vgs, vds, 0.0))
        return vgs_col, vds_col, ids_col

    def params(self) -> tuple[float, ...]:
        """The nine parameters in index order."""
        return tuple(getattr(self, name) for name in _FIELDS)

    def _set_params(self, params: tuple[float, ...]) -> None:
        for name, value in zip(_FIELDS, params):
            setattr(self, name, value)

    def _mean_abs_error(self, samples: list[tuple[float, float, float]]) -> float:
        total = 0.0
        for vgs, vds, ids in samples:
            total += abs(self.ids(vgs, vds, 0.0) - ids)
        return _div(total, float(len(samples)))

    def simulated_annealing(
        self,
        data: IVMeasurements,
        start_temp: float,
        epoch: int,
        rng: random.Random | None = None,
    ) -> float:
        """Fit the parameters to ``data``, keep the best found, return its error.

        Raises ValueError if a parameter is NaN, as no step size follows from it.
        """
        generator = rng if rng is not None else random.Random()
        samples = [
            (float(g), float(d), float(i)) for g, d, i in zip(data.vgs, data.vds, data.ids)
        ]

        best_params = self.params()
        best_score = self._mean_abs_error(samples)

        step_sizes = [abs(value) / 10.0 for value in self.params()]
        if any(math.isnan(size) for size in step_sizes):
            raise ValueError("parameters must not be NaN")
        bounds = [
            (self[0] / 2.0, self[0] * 3.0),
            (5e-8, 5e-8),
            (1e16, 2e17),
            (self[3] / 100.0, self[3] * 100.0),
            (-7.0, 2.0),
            (self[5] / 100.0, 1.0),
            (0.4, 10.0),
            (1.0, 20.0),
            (1e-3, 100e-3),
        ]

        for step in range(epoch):
            temp = (
                start_temp
                * (1.0 - step / epoch) ** 3
                * 2.0 ** (-((step + 0.5) / epoch) * 4.0)
            )
            rate = _exp(_div(-1.0, temp))
            previous_score = self._mean_abs_error(samples)

            order = list(range(len(_FIELDS)))
            generator.shuffle(order)
            for index in order:
                previous = self[index]
                self[index] = previous + generator.gauss(0.0, step_sizes[index]) * rate
                score = self._mean_abs_error(samples)

                low, high = bounds[index]
                if low <= self[index] <= high:
                    if score < best_score:
                        best_score = score
                        best_params = self.params()
                    gain = _div(1.0, score) - _div(1.0, previous_score)
                    probability = _exp(_div(gain, temp))
                    if probability <= generator.random():
                        self[index] = previous
                else:
                    self[index] = previous

        self._set_params(best_params)
        return self._mean_abs_error(samples)