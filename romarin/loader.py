"""Loading and scaling of I-V measurement data."""

from __future__ import annotations

import csv
import math
import os
from dataclasses import dataclass, field

import numpy as np

_F32_MAX = float(np.finfo(np.float32).max)
_F32_MIN = float(np.finfo(np.float32).min)


def _f32(value: float) -> float:
    """Round a value to single precision, as the measurements are stored."""
    return float(np.float32(value))


def _ieee_div(numerator: float, denominator: float) -> float:
    """Divide the way IEEE floats do, without raising on a zero divisor."""
    if denominator == 0.0:
        if numerator == 0.0 or math.isnan(numerator):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1.0, denominator)
    return numerator / denominator


@dataclass
class IVMeasurements:
    """Gate voltage, drain current and drain voltage columns."""

    vgs: list[float] = field(default_factory=list)
    ids: list[float] = field(default_factory=list)
    vds: list[float] = field(default_factory=list)


@dataclass
class ScaledMeasurements:
    """Scaled columns together with the bounds used to scale them."""

    minimums: dict[str, float]
    maximums: dict[str, float]
    measurements: dict[str, list[float]]

    def get(self, name: str) -> list[float] | None:
        """Return the scaled column called ``name``, or None."""
        return self.measurements.get(name)


def _scale_column(values: list[float], low: float, high: float) -> list[float]:
    span = _f32(high - low)
    return [_f32(_ieee_div(_f32(x - low), span)) for x in values]


def _scaled(
    measurements: IVMeasurements,
    minimums: dict[str, float],
    maximums: dict[str, float],
) -> ScaledMeasurements:
    columns = {
        "VGS": measurements.vgs,
        "VDS": measurements.vds,
        "IDS": measurements.ids,
    }
    scaled = {
        name: _scale_column(values, minimums[name], maximums[name])
        for name, values in columns.items()
    }
    return ScaledMeasurements(minimums=minimums, maximums=maximums, measurements=scaled)


def min_max_scaling(measurements: IVMeasurements) -> ScaledMeasurements:
    """Scale every column into [0, 1] using its own minimum and maximum."""
    columns = {
        "IDS": measurements.ids,
        "VDS": measurements.vds,
        "VGS": measurements.vgs,
    }
    minimums = {name: min(values, default=_F32_MAX) for name, values in columns.items()}
    maximums = {name: max(values, default=_F32_MIN) for name, values in columns.items()}
    return _scaled(measurements, minimums, maximums)


def scaling(
    measurements: IVMeasurements,
    maximum: tuple[float, float, float],
    minimum: tuple[float, float, float],
) -> ScaledMeasurements:
    """Scale columns with given bounds, each a (vgs, vds, ids) tuple."""
    max_vgs, max_vds, max_ids = maximum
    min_vgs, min_vds, min_ids = minimum
    minimums = {"IDS": min_ids, "VDS": min_vds, "VGS": min_vgs}
    maximums = {"IDS": max_ids, "VDS": max_vds, "VGS": max_vgs}
    return _scaled(measurements, minimums, maximums)


def read_csv(file_path: str | os.PathLike[str]) -> IVMeasurements:
    """Read a CSV file with a header and rows of VGS, IDS, VDS.

    Raises ValueError on a row without exactly three numeric fields.
    """
    result = IVMeasurements()
    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.reader(handle)
        if next(reader, None) is None:
            return result
        for row in reader:
            if not row:
                continue
            if len(row) != 3:
                raise ValueError(
                    f"line {reader.line_num}: expected 3 fields, found {len(row)}"
                )
            try:
                vgs, ids, vds = (_f32(float(cell)) for cell in row)
            except ValueError as exc:
                raise ValueError(f"line {reader.line_num}: {exc}") from exc
            result.vgs.append(vgs)
            result.ids.append(ids)
            result.vds.append(vds)
    return result