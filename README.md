# romarin

Building blocks for MOSFET device models: small graph-structured networks evaluated with NumPy,
compact physics models, and generators of Verilog-A text.

## What is in the package

- `romarin.loader`
  - `read_csv(path)` reads a CSV file. The file has a header row and then rows of `VGS, IDS, VDS`.
    It returns an `IVMeasurements` dataclass with `vgs`, `ids` and `vds` lists. Values are rounded
    to single precision. A row that does not have exactly three numeric fields raises `ValueError`.
  - `min_max_scaling(measurements)` scales each column into [0, 1] by its own minimum and maximum.
  - `scaling(measurements, maximum, minimum)` scales with given bounds. Each bound is a
    `(vgs, vds, ids)` tuple.
  - Both scaling functions return `ScaledMeasurements`. It holds `minimums`, `maximums` and
    `measurements` dictionaries keyed by `"VGS"`, `"VDS"` and `"IDS"`, and offers `get(name)`.
- `romarin.components.utils`
  - `AccFn` sets how a node combines incoming values: `SUM`, `PROD`, `MAX` or `MIN`.
  - `Activation(kind, factor=None)` takes an `ActivationKind`: `ID`, `SCALE`, `SIGMOID`, `TANH`,
    `RELU` or `LEAKY_RELU`. `SCALE` divides by `factor`.
    - `apply(xs)` evaluates the activation on an array.
    - `export_apply(ident, size)` writes the matching Verilog-A loop.
  - Text emitters: `tensor_to_varray`, `declare_tensor`, `declare_linear`, `declare_matrix_mul`,
    `declare_matrix_mul_add`, `mosfet_template` and `array_init`.
- `romarin.components.node`
  - `Node` has `size`, `act`, `acc` and `name`. Its subclasses are `InputNode` (with
    `verilog_inputs`), `HiddenNode` and `OutputNode` (with `verilog_outputs`).
  - The emitters are `export_init`, `export_forward`, `InputNode.export_input` and
    `OutputNode.export_output`.
- `romarin.components.edge`
  - `LinearTransform` is an affine map with weights `ws` of shape (out, in) and an optional bias
    `bs`.
  - `linear(in_dim, out_dim, bias=True, rng=None)` creates one with random initial values.
  - `Linear(from_node, to_node, trans)` is an edge of the graph. Its methods are `forward`,
    `grad(flag)`, `reconnect`, `export_params` and `export_forward`.
- `romarin.components.graph`
  - `Graph` runs its edges in the order they were added.
  - `add_edge`, `grad(indices, flag)` and `replace_node` change the graph.
  - `forward(inputs)` maps input node names to arrays and returns a dictionary of output arrays,
    keyed by output node name.
  - `gen_verilog()` renders the graph as a Verilog-A `mosfet` module.
- `romarin.physics`
  - `Level1(kp, lambda_, vth)` is a square-law model.
  - `Threshold(vth, delta, k, clm, md, mdv)` is a threshold model with smoothing and mobility
    degradation.
  - `SurfacePotentialModel(...)` is a surface-potential SiC power MOSFET model with nine
    parameters. They can also be read and set by index 0–8.
  - Each model has `ids(...)` for a single point and `tfun(rows)` for an array of
    `(vgs, vds)` rows.
  - `Level1` and `SurfacePotentialModel` also offer `make_grid`, `params()` and
    `simulated_annealing(data, start_temp, epoch, rng=None)`. The last one fits the parameters to
    measurements, keeps the best set found and returns its error.
- `romarin.transpiler`
  - `Lexer` reads identifiers, integers and decimal numbers (`Token` with a `TokenKind`). It
    raises `EndOfInput` when the input is used up and `UnmatchedInput` on a character it cannot
    read. Iterating over it yields tokens until the end.
  - `literal` and `program` turn tokens into `Ast` trees of `AstNode` values.
  - `to_verilog(program)` returns a Verilog-A function skeleton.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
import numpy as np

from romarin.components.edge import Linear, linear
from romarin.components.graph import Graph
from romarin.components.node import HiddenNode, InputNode, OutputNode
from romarin.components.utils import AccFn, Activation, ActivationKind

rng = np.random.default_rng(0)

vin = InputNode(2, Activation(ActivationKind.ID), AccFn.SUM, "input", ("V(b_gs)", "V(b_ds)"))
h1 = HiddenNode(8, Activation(ActivationKind.RELU), AccFn.SUM, "h1")
out = OutputNode(1, Activation(ActivationKind.ID), AccFn.SUM, "output", ("I(b_ds)",))

graph = Graph()
graph.add_edge(Linear(vin, h1, linear(2, 8, True, rng)))
graph.add_edge(Linear(h1, out, linear(8, 1, True, rng)))

prediction = graph.forward({"input": np.array([[1.0, 2.0], [3.0, 4.0]])})["output"]
verilog_a = graph.gen_verilog()
```

Fitting a physics model to measurements:

```python
import random

from romarin.loader import read_csv
from romarin.physics.level1 import Level1

data = read_csv("measurements.csv")
model = Level1(0.83, 0.022, 5.99)
error = model.simulated_annealing(data, 100.0, 10000, random.Random(0))
print(model.params(), error)
```

## What the package does not do

- It does not train networks. There is no automatic differentiation and no optimiser.
  `Graph.grad` and `Linear.grad` only set a `requires_grad` flag on an edge's weights. To change
  the weights, build new `LinearTransform` values.
- `Graph.forward` combines values only with `AccFn.SUM` and `AccFn.PROD`. A node that receives
  several values under `MAX` or `MIN` raises `ValueError`. `gen_verilog` still emits all four
  macros.
- `to_verilog` returns a fixed function skeleton. It does not yet turn a parsed program into a
  function body.
- There is no command-line program. Everything is used as a library.