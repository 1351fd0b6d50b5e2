"""A graph of nodes joined by linear edges, evaluable and exportable to Verilog-A."""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Mapping
from typing import Any

import numpy as np

from romarin.components.edge import Linear
from romarin.components.node import HiddenNode, InputNode, Node, OutputNode
from romarin.components.utils import AccFn, declare_matrix_mul, declare_matrix_mul_add

_MODULE_HEADER = (
    "module mosfet(term_G, term_D, term_S);\n"
    "\tinout term_G, term_D, term_S;\n"
    "\telectrical term_G, term_D, term_S;\n"
    "\tbranch (term_G, term_S) b_gs;\n"
    "\tbranch (term_G, term_D) b_gd;\n"
    "\tbranch (term_D, term_S) b_ds;\n\n"
    "\tinteger i, j, k;\n"
    "\treal tmp = 0.0;\n\n"
)
_FOOTER = "\nend //end analog block\nendmodule\n"
_ACC_ORDER = (AccFn.SUM, AccFn.PROD, AccFn.MAX, AccFn.MIN)


def _accumulate(store: dict[Node, np.ndarray], node: Node, value: np.ndarray) -> None:
    current = store.get(node)
    if current is None:
        store[node] = value
        return
    if current.shape != value.shape:
        raise ValueError(
            f"node {node.name!r} receives shapes {current.shape} and {value.shape}"
        )
    if node.acc is AccFn.SUM:
        store[node] = current + value
    elif node.acc is AccFn.PROD:
        store[node] = current * value
    else:
        raise ValueError(f"{node.acc.value} accumulation is unsupported in forward")


class Graph:
    """Edges evaluated in insertion order; nodes combine what arrives at them."""

    def __init__(self) -> None:
        self._edges: list[Linear] = []

    @property
    def edges(self) -> tuple[Linear, ...]:
        return tuple(self._edges)

    def add_edge(self, edge: Linear) -> None:
        """Append an edge; edges are evaluated in the order they are added."""
        self._edges.append(edge)

    def grad(self, edge_indices: Iterable[int], flag: bool) -> None:
        """Mark the edges at the given positions as trainable or frozen."""
        for index in edge_indices:
            self._edges[index].grad(flag)

    def replace_node(self, original: Node, replacement: Node) -> None:
        """Attach every end of an edge at ``original`` to ``replacement``."""
        for edge in self._edges:
            if edge.from_node == original:
                edge.reconnect(replacement, edge.to_node)
            if edge.to_node == original:
                edge.reconnect(edge.from_node, replacement)

    def forward(self, inputs: Mapping[str, Any]) -> dict[str, np.ndarray]:
        """Evaluate the graph on named inputs and return outputs by node name."""
        hidden: dict[Node, np.ndarray] = {}
        outputs: dict[Node, np.ndarray] = {}

        for edge in self._edges:
            src, dst = edge.from_node, edge.to_node
            if isinstance(src, InputNode):
                if src.name not in inputs:
                    raise KeyError(f"no input named {src.name!r}")
                value = inputs[src.name]
            elif isinstance(src, OutputNode):
                raise ValueError(f"output node {src.name!r} cannot start an edge")
            else:
                if src not in hidden:
                    raise ValueError(f"node {src.name!r} is used before it is computed")
                value = hidden[src]

            value = np.asarray(src.forward(value), dtype=np.float32)
            value = np.asarray(edge.forward(value), dtype=np.float32)

            if isinstance(dst, InputNode):
                raise ValueError(f"input node {dst.name!r} cannot end an edge")
            if isinstance(dst, OutputNode):
                _accumulate(outputs, dst, value)
            else:
                _accumulate(hidden, dst, value)

        return {node.name: node.forward(value) for node, value in outputs.items()}

    def gen_verilog(self) -> str:
        """Render the graph as a Verilog-A MOSFET module."""
        counter = itertools.count()
        node_variables: dict[Node, int] = {}
        edge_variables: dict[tuple[Node, Node], int] = {}

        header = '`include "disciplines.vams"\n\n'
        for acc in _ACC_ORDER:
            header += declare_matrix_mul(acc) + "\n"
        for acc in _ACC_ORDER:
            header += declare_matrix_mul_add(acc) + "\n"
        header += _MODULE_HEADER

        content = ["\t"]

        for edge in self._edges:
            evar = next(counter)
            content.append(edge.export_params(f"l{evar}"))
            edge_variables[(edge.from_node, edge.to_node)] = evar

        for edge in self._edges:
            src = edge.from_node
            if src not in node_variables:
                if isinstance(src, OutputNode):
                    raise ValueError(f"output node {src.name!r} cannot start an edge")
                content.append(src.export_init(src.name))
                node_variables[src] = next(counter)

            dst = edge.to_node
            if dst not in node_variables:
                if isinstance(dst, InputNode):
                    raise ValueError(f"input node {dst.name!r} cannot end an edge")
                content.append(dst.export_init(dst.name))
                node_variables[dst] = next(counter)

        activated: set[Node] = set()
        content.append("analog begin\n")
        for edge in self._edges:
            src = edge.from_node
            evar = edge_variables[(src, edge.to_node)]
            if isinstance(src, InputNode):
                content.append(src.export_input(src.name))
            if src not in activated:
                content.append(src.export_forward())
                activated.add(src)
            else:
                content.append(f"// already activated this node: {src.name}\n")
            content.append(edge.export_forward(str(evar)))

        assigned: set[Node] = set()
        for edge in self._edges:
            dst = edge.to_node
            if not isinstance(dst, OutputNode):
                continue
            if dst not in assigned:
                content.append(dst.export_forward())
                content.append(dst.export_output())
                assigned.add(dst)
            else:
                content.append(f"// already assign output for this node: {dst.name}\n")

        body = "".join(content).replace("\n", "\n\t")
        return f"{header}{body}{_FOOTER}"


__all__ = ["Graph", "HiddenNode", "InputNode", "OutputNode"]