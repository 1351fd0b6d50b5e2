import math

import numpy as np
import pytest

from romarin.loader import (
    IVMeasurements,
    min_max_scaling,
    read_csv,
    scaling,
)


def _write(tmp_path, text):
    path = tmp_path / "data.csv"
    path.write_text(text, encoding="utf-8")
    return path


def test_read_csv_column_order(tmp_path):
    path = _write(tmp_path, "VGS,IDS,VDS\n1,2,3\n4,5,6\n")
    data = read_csv(path)
    assert data.vgs == [1.0, 4.0]
    assert data.ids == [2.0, 5.0]
    assert data.vds == [3.0, 6.0]


def test_read_csv_accepts_str_path_and_blank_lines(tmp_path):
    path = _write(tmp_path, "VGS,IDS,VDS\n1.5,2.5,3.5\n\n")
    data = read_csv(str(path))
    assert data == IVMeasurements(vgs=[1.5], ids=[2.5], vds=[3.5])


def test_read_csv_header_only(tmp_path):
    path = _write(tmp_path, "VGS,IDS,VDS\n")
    assert read_csv(path) == IVMeasurements()


def test_read_csv_values_are_single_precision(tmp_path):
    path = _write(tmp_path, "VGS,IDS,VDS\n0.1,0.2,0.3\n")
    data = read_csv(path)
    assert np.float32(data.vgs[0]) == np.float32(0.1)
    assert data.vgs[0] == float(np.float32(data.vgs[0]))


def test_read_csv_wrong_field_count(tmp_path):
    path = _write(tmp_path, "VGS,IDS,VDS\n1,2\n")
    with pytest.raises(ValueError):
        read_csv(path)


def test_read_csv_bad_number(tmp_path):
    path = _write(tmp_path, "VGS,IDS,VDS\n1,abc,3\n")
    with pytest.raises(ValueError):
        read_csv(path)


def test_read_csv_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_csv(tmp_path / "missing.csv")


def test_min_max_scaling_bounds_and_range():
    data = IVMeasurements(vgs=[2.0, 4.0, 6.0], ids=[1.0, 3.0, 5.0], vds=[10.0, 0.0, 5.0])
    scaled = min_max_scaling(data)
    assert scaled.minimums == {"IDS": 1.0, "VDS": 0.0, "VGS": 2.0}
    assert scaled.maximums == {"IDS": 5.0, "VDS": 10.0, "VGS": 6.0}
    for name in ("VGS", "VDS", "IDS"):
        column = scaled.get(name)
        assert min(column) == 0.0
        assert max(column) == 1.0
        assert len(column) == 3


def test_min_max_scaling_preserves_order():
    data = IVMeasurements(vgs=[3.0, 1.0, 2.0], ids=[0.0, 1.0, 2.0], vds=[0.0, 1.0, 2.0])
    scaled = min_max_scaling(data).get("VGS")
    assert scaled[1] < scaled[2] < scaled[0]


def test_min_max_scaling_constant_column_is_nan():
    data = IVMeasurements(vgs=[1.0, 1.0], ids=[0.0, 1.0], vds=[0.0, 1.0])
    scaled = min_max_scaling(data)
    column = scaled.get("VGS")
    assert len(column) == 2
    assert math.isnan(column[0])
    assert math.isnan(column[1])
    assert scaled.get("IDS") == [0.0, 1.0]


def test_scaling_uses_given_bounds():
    data = IVMeasurements(vgs=[0.0, 10.0], ids=[0.0, 2.0], vds=[0.0, 4.0])
    scaled = scaling(data, (10.0, 4.0, 2.0), (0.0, 0.0, 0.0))
    assert scaled.get("VGS") == [0.0, 1.0]
    assert scaled.get("VDS") == [0.0, 1.0]
    assert scaled.get("IDS") == [0.0, 1.0]
    assert scaled.maximums == {"IDS": 2.0, "VDS": 4.0, "VGS": 10.0}


def test_scaled_get_unknown_name():
    data = IVMeasurements(vgs=[0.0, 1.0], ids=[0.0, 1.0], vds=[0.0, 1.0])
    assert min_max_scaling(data).get("NOPE") is None