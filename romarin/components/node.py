"""Graph nodes: named arrays with an activation and an accumulation rule."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from romarin.components.utils import F32_MAX, F32_MIN, AccFn, Activation, array_init

_IDENTITY = {
    AccFn.SUM: 0.0,
    AccFn.PROD: 1.0,
    AccFn.MAX: F32_MIN,
    AccFn.MIN: F32_MAX,
}


@dataclass(frozen=True)
class Node:
    """A node of ``size`` values, activated by ``act`` and combined by ``acc``."""

    size: int
    act: Activation
    acc: AccFn
    name: str

    def forward(self, xs: Any) -> np.ndarray:
        """Apply the node's activation."""
        return self.act.apply(xs)

    def export_init(self, ident: str) -> str:
        """Declare the node's array filled with the accumulation identity."""
        if self.size < 1:
            raise ValueError(f"node {self.name!r} has no values to declare")
        init = array_init(self.size, _IDENTITY[self.acc])
        return f"real {ident}[0:{self.size - 1}] = {init};\n"

    def export_forward(self) -> str:
        """Statements applying the activation to the node's array."""
        return self.act.export_apply(self.name, self.size)


@dataclass(frozen=True)
class InputNode(Node):
    """A node fed from Verilog-A expressions such as branch voltages."""

    verilog_inputs: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "verilog_inputs", tuple(self.verilog_inputs))

    def export_input(self, input_var: str) -> str:
        """Assign each input expression to an element of ``input_var``."""
        return "".join(
            f"{input_var}[{idx}] = ({expr});\n"
            for idx, expr in enumerate(self.verilog_inputs)
        )


@dataclass(frozen=True)
class HiddenNode(Node):
    """An intermediate node."""


@dataclass(frozen=True)
class OutputNode(Node):
    """A node whose values drive Verilog-A outputs such as branch currents."""

    verilog_outputs: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "verilog_outputs", tuple(self.verilog_outputs))

    def export_output(self) -> str:
        """Contribute each element of the node to its output expression."""
        return "".join(
            f"{out} <+ {self.name}[{idx}];\n"
            for idx, out in enumerate(self.verilog_outputs)
        )