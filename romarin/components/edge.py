"""Edges of a computation graph: linear maps between two nodes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any

import numpy as np

from romarin.components.node import Node
from romarin.components.utils import declare_linear


@dataclass(frozen=True, eq=False)
class LinearTransform:
    """An affine map ``xs @ ws.T + bs`` with weights of shape (out, in)."""

    ws: np.ndarray
    bs: np.ndarray | None = None
    requires_grad: bool = True

    def __post_init__(self) -> None:
        ws = np.asarray(self.ws, dtype=np.float32)
        if ws.ndim != 2:
            raise ValueError(f"weights must be a matrix, got shape {ws.shape}")
        object.__setattr__(self, "ws", ws)
        if self.bs is not None:
            bs = np.asarray(self.bs, dtype=np.float32)
            if bs.shape != (ws.shape[0],):
                raise ValueError(
                    f"bias of shape {bs.shape} does not match {ws.shape[0]} outputs"
                )
            object.__setattr__(self, "bs", bs)

    @property
    def in_dim(self) -> int:
        return int(self.ws.shape[1])

    @property
    def out_dim(self) -> int:
        return int(self.ws.shape[0])

    def forward(self, xs: Any) -> np.ndarray:
        """Apply the map to a vector or to a batch of row vectors."""
        out = np.asarray(xs) @ self.ws.T
        if self.bs is not None:
            out = out + self.bs
        return out

    def set_requires_grad(self, flag: bool) -> LinearTransform:
        """Return the same map marked as trainable or frozen."""
        return replace(self, requires_grad=bool(flag))


def linear(
    in_dim: int,
    out_dim: int,
    bias: bool = True,
    rng: np.random.Generator | None = None,
) -> LinearTransform:
    """Create a randomly initialised map from ``in_dim`` to ``out_dim`` values."""
    if in_dim < 1 or out_dim < 1:
        raise ValueError("dimensions must be positive")
    generator = rng if rng is not None else np.random.default_rng()
    ws_bound = math.sqrt(6.0 / in_dim)
    ws = generator.uniform(-ws_bound, ws_bound, size=(out_dim, in_dim))
    bs = None
    if bias:
        bs_bound = 1.0 / math.sqrt(in_dim)
        bs = generator.uniform(-bs_bound, bs_bound, size=out_dim)
    return LinearTransform(ws, bs)


@dataclass(eq=False)
class Linear:
    """A linear edge carrying values from ``from_node`` to ``to_node``."""

    from_node: Node
    to_node: Node
    trans: LinearTransform = field(repr=False)

    def grad(self, flag: bool) -> None:
        """Mark the edge's parameters as trainable or frozen."""
        self.trans = self.trans.set_requires_grad(flag)

    def reconnect(self, from_node: Node, to_node: Node) -> None:
        """Attach the edge to a new pair of nodes."""
        self.from_node = from_node
        self.to_node = to_node

    def forward(self, xs: Any) -> np.ndarray:
        """Apply the edge's linear map."""
        return self.trans.forward(xs)

    def export_params(self, ident: str) -> str:
        """Declare the edge's weights and bias under the prefix ``ident``."""
        return declare_linear(self.trans, ident)

    def export_forward(self, ident: str) -> str:
        """Macro call pushing the source node through this edge into the target."""
        acc = self.to_node.acc.value
        src = self.from_node
        dst = self.to_node
        if self.trans.bs is not None:
            return (
                f"`MATMULADD{acc}(l{ident}_ws, {src.name},  l{ident}_bs, "
                f"{dst.name}, {src.size}, {dst.size});\n"
            )
        return (
            f"`MATMUL{acc}(l{ident}_ws, {src.name}, {dst.name}, "
            f"{src.size}, {dst.size});\n"
        )