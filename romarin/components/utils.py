"""Activations, accumulation kinds and Verilog-A code fragments."""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass
from typing import Any

import numpy as np

F32_MIN = float(np.finfo(np.float32).min)
F32_MAX = float(np.finfo(np.float32).max)


def _format_number(value: float, single: bool) -> str:
    """Shortest round-trip decimal text, never in exponent form."""
    number = float(value)
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    scalar = np.float32(number) if single else np.float64(number)
    return np.format_float_positional(scalar, unique=True, trim="-")


def _format_f32(value: float) -> str:
    return _format_number(value, single=True)


def _format_f64(value: float) -> str:
    return _format_number(value, single=False)


class AccFn(enum.Enum):
    """How values arriving at a node from several edges are combined."""

    SUM = "SUM"
    PROD = "PROD"
    MAX = "MAX"
    MIN = "MIN"

    def __str__(self) -> str:
        return self.value


class ActivationKind(enum.Enum):
    """The activation functions a node may apply."""

    ID = "Id"
    SCALE = "Scale"
    SIGMOID = "Sigmoid"
    TANH = "Tanh"
    RELU = "ReLU"
    LEAKY_RELU = "LeakyReLU"


_LEAKY_SLOPE = 0.01
_LOOP_HEAD = "for(i = 0; i < {size}; i = i+1) begin\n"


@dataclass(frozen=True)
class Activation:
    """An activation function; SCALE divides by ``factor``."""

    kind: ActivationKind
    factor: float | None = None

    def __post_init__(self) -> None:
        if self.kind is ActivationKind.SCALE and self.factor is None:
            raise ValueError("a scale activation needs a factor")
        if self.kind is not ActivationKind.SCALE and self.factor is not None:
            raise ValueError(f"{self.kind.value} activation takes no factor")

    def apply(self, xs: Any) -> np.ndarray:
        """Apply the activation element-wise and return a new array."""
        arr = np.asarray(xs)
        if not np.issubdtype(arr.dtype, np.floating):
            arr = arr.astype(np.float64)
        with np.errstate(over="ignore"):
            if self.kind is ActivationKind.ID:
                return arr.copy()
            if self.kind is ActivationKind.SCALE:
                return arr / float(np.float32(self.factor))
            if self.kind is ActivationKind.SIGMOID:
                return 1.0 / (1.0 + np.exp(-arr))
            if self.kind is ActivationKind.TANH:
                return np.tanh(arr)
            if self.kind is ActivationKind.RELU:
                return np.where(arr > 0, arr, 0).astype(arr.dtype)
            return np.where(arr >= 0, arr, arr * _LEAKY_SLOPE).astype(arr.dtype)

    def export_apply(self, ident: str, size: int) -> str:
        """Verilog-A statements applying the activation to array ``ident``."""
        if self.kind is ActivationKind.ID:
            return f"/// applying Id to {ident} ///\n"
        head = _LOOP_HEAD.format(size=size)
        if self.kind is ActivationKind.SCALE:
            factor = _format_f32(self.factor)
            return f"{head}\t{ident}[i] = {ident}[i] / ({factor});\nend // end for\n"
        if self.kind is ActivationKind.SIGMOID:
            return f"{head}\t{ident}[i] = 1 / (1 + exp(-{ident}[i]));\nend // end for\n"
        if self.kind is ActivationKind.TANH:
            return f"{head}\t{ident}[i] = tanh({ident}[i]);\nend // end for\n"
        if self.kind is ActivationKind.RELU:
            return f"{head}\t{ident}[i] = ({ident}[i] + abs({ident}[i])) / 2;\nend// end for\n"
        return (
            f"{head}\tif({ident}[i] < 0) begin\n\t\t{ident}[i] = 0.1*{ident}[i];\n"
            "\tend // end if\nend// end for\n"
        )


def tensor_to_varray(ts: Any, tab: int = 0) -> str:
    """Render an array as a nested Verilog-A array literal."""
    arr = np.asarray(ts)
    if arr.ndim == 0:
        return _format_f64(arr.item())
    parts = ["\n" if tab > 0 else "", "\t" * tab, "{"]
    parts.extend(tensor_to_varray(sub, tab + 1) + ", " for sub in arr)
    if tab == 0:
        parts.append("\n")
    parts.append("}")
    return "".join(parts)


def declare_tensor(ts: Any, alias: str) -> str:
    """Declare a real array named ``alias`` initialised with ``ts``."""
    arr = np.asarray(ts)
    dims = "".join(f"[0:{dim}-1]" for dim in arr.shape)
    return f"real {alias}{dims} = {tensor_to_varray(arr)};\n"


def declare_linear(linear: Any, alias: str) -> str:
    """Declare the weights and, if present, the bias of a linear map."""
    ret = declare_tensor(linear.ws, f"{alias}_ws")
    if linear.bs is not None:
        ret += declare_tensor(linear.bs, f"{alias}_bs")
    return ret


_ACC_STATEMENT = {
    AccFn.SUM: "H[i] = H[i] + tmp;",
    AccFn.PROD: "H[i] = H[i] * tmp;",
    AccFn.MAX: "H[i] = max(H[i], tmp);",
    AccFn.MIN: "H[i] = min(H[i], tmp);",
}


def _matmul_prologue() -> str:
    return (
        "\tfor (i = 0; i < H_dim; i = i + 1) begin\\\n"
        "\t\ttmp = 0.0;\\\n"
        "\t\tfor (j = 0; j < x_dim; j = j + 1) begin\\\n"
        "\t\t\ttmp = tmp + W[i][j]*x[j];\\\n"
        "\t\tend\\\n"
    )


def declare_matrix_mul(acc: AccFn) -> str:
    """Macro accumulating ``W x`` into ``H`` with the given combination."""
    return (
        f"`ifndef MATMUL{acc.value}\\\n"
        f"`define MATMUL{acc.value}(W, x, H, x_dim, H_dim)\\\n"
        + _matmul_prologue()
        + f"\t\t{_ACC_STATEMENT[acc]}\\\n"
        + "\tend\\\n"
    )


def declare_matrix_mul_add(acc: AccFn) -> str:
    """Macro accumulating ``W x + B`` into ``H`` with the given combination."""
    return (
        f"`ifndef MATMULADD{acc.value}\\\n"
        f"`define MATMULADD{acc.value}(W, x, B, H, x_dim, H_dim)\\\n"
        + _matmul_prologue()
        + "\t\ttmp = tmp + B[i];\\\n"
        + f"\t\t\t{_ACC_STATEMENT[acc]}\\\n"
        + "\tend\\\n"
    )


def mosfet_template(header: str, analog_behavior: str) -> str:
    """Wrap declarations and an analog block in a three-terminal module."""
    return (
        "module mosfet(term_G, term_D, term_S);\n"
        "\tinout term_G, term_D, term_S;\n"
        "\telectrical term_G, term_D, term_S;\n"
        "\n"
        "\tbranch (term_G, term_S) b_gs;\n"
        "\tbranch (term_G, term_D) b_gd;\n"
        "\tbranch (term_D, term_S) b_ds;\n"
        + header
        + "// define analog behavior\n"
        + "\tanalog begin\n"
        + analog_behavior
        + "\tend // analog block\n"
        + "endmodule // mosfet\n"
    )


def array_init(size: int, value: float) -> str:
    """Array literal of ``size`` copies of ``value``."""
    return "{" + ", ".join([_format_f32(value)] * size) + "}"