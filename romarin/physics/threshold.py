"""A threshold-voltage MOSFET model with smoothing and mobility degradation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

_f32 = np.float32


@dataclass
class Threshold:
    """Model parameters: threshold, smoothing, gain, channel-length and mobility terms."""

    vth: float
    delta: float
    k: float
    clm: float
    md: float
    mdv: float

    def ids(self, vgs: float, vds: float) -> float:
        """Drain current at the given gate and drain voltages."""
        vgs32 = _f32(vgs)
        vds32 = _f32(vds)
        vth = _f32(self.vth)
        delta = _f32(self.delta)
        one = _f32(1.0)
        with np.errstate(all="ignore"):
            vp = vgs32 - vth
            vds_mod = vds32 / (one + (vds32 / vp) ** delta) ** (one / delta)
            if vgs32 < vth:
                current = _f32(0.0)
            else:
                current = _f32(self.k) * (vp * vds_mod - _f32(0.5) * vds_mod * vds_mod)
            current = current * (one + _f32(self.clm) * vds32)
            mdv = _f32(self.mdv)
            if vgs32 > mdv:
                current = current / (one + _f32(self.md) * (vgs32 - mdv))
        return float(current)

    def tfun(self, vgs_vds: Any) -> np.ndarray:
        """Drain currents for an array of (vgs, vds) rows."""
        rows = np.asarray(vgs_vds, dtype=np.float64)
        if rows.ndim != 2 or rows.shape[1] != 2:
            raise ValueError(f"expected rows of (vgs, vds), got shape {rows.shape}")
        return np.array([self.ids(g, d) for g, d in rows], dtype=np.float32)