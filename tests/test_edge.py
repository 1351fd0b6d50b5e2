import numpy as np
import pytest

from romarin.components.edge import Linear, LinearTransform, linear
from romarin.components.node import HiddenNode, InputNode, OutputNode
from romarin.components.utils import AccFn, Activation, ActivationKind

X = InputNode(2, Activation(ActivationKind.ID), AccFn.SUM, "x", ("V(b_gs)", "V(b_ds)"))
H = HiddenNode(3, Activation(ActivationKind.RELU), AccFn.SUM, "h")
Y = OutputNode(1, Activation(ActivationKind.ID), AccFn.PROD, "y", ("I(b_ds)",))


def test_linear_shapes_with_bias():
    trans = linear(2, 5, rng=np.random.default_rng(0))
    assert trans.ws.shape == (5, 2)
    assert trans.bs.shape == (5,)
    assert trans.ws.dtype == np.float32
    assert (trans.in_dim, trans.out_dim) == (2, 5)


def test_linear_without_bias():
    trans = linear(20, 1, bias=False, rng=np.random.default_rng(1))
    assert trans.bs is None
    assert trans.ws.shape == (1, 20)


def test_linear_is_reproducible_with_seed():
    a = linear(3, 4, rng=np.random.default_rng(42))
    b = linear(3, 4, rng=np.random.default_rng(42))
    np.testing.assert_array_equal(a.ws, b.ws)
    np.testing.assert_array_equal(a.bs, b.bs)


def test_linear_rejects_zero_dimension():
    with pytest.raises(ValueError):
        linear(0, 3)


def test_transform_identity_forward():
    trans = LinearTransform(np.eye(2))
    xs = np.array([[0.5, 1.5], [2.0, -1.0]], dtype=np.float32)
    np.testing.assert_allclose(trans.forward(xs), xs)


def test_transform_bias_is_added():
    bias = np.array([0.25, -0.75])
    trans = LinearTransform(np.eye(2), bias)
    xs = np.array([[1.0, 2.0], [3.0, 4.0]], dtype=np.float32)
    np.testing.assert_allclose(trans.forward(xs), xs + bias.astype(np.float32))


def test_transform_rejects_bad_shapes():
    with pytest.raises(ValueError):
        LinearTransform(np.zeros(3))
    with pytest.raises(ValueError):
        LinearTransform(np.zeros((2, 3)), np.zeros(3))


def test_transform_forward_width_mismatch():
    trans = LinearTransform(np.zeros((2, 3)))
    with pytest.raises(ValueError):
        trans.forward(np.zeros((4, 2)))


def test_set_requires_grad_returns_frozen_copy():
    trans = LinearTransform(np.eye(2))
    frozen = trans.set_requires_grad(False)
    assert frozen.requires_grad is False
    assert trans.requires_grad is True
    np.testing.assert_array_equal(frozen.ws, trans.ws)


def test_edge_grad_toggles_flag():
    edge = Linear(X, H, LinearTransform(np.zeros((3, 2)), np.zeros(3)))
    edge.grad(False)
    assert edge.trans.requires_grad is False
    edge.grad(True)
    assert edge.trans.requires_grad is True


def test_edge_reconnect():
    edge = Linear(X, H, LinearTransform(np.zeros((3, 2))))
    edge.reconnect(H, Y)
    assert edge.from_node == H
    assert edge.to_node == Y


def test_edge_forward_uses_transform():
    trans = LinearTransform(np.eye(2), np.array([1.0, 1.0]))
    edge = Linear(X, X, trans)
    xs = np.array([[3.0, 4.0]], dtype=np.float32)
    np.testing.assert_allclose(edge.forward(xs), trans.forward(xs))


def test_export_forward_with_bias():
    edge = Linear(X, H, LinearTransform(np.zeros((3, 2)), np.zeros(3)))
    assert edge.export_forward("0") == "`MATMULADDSUM(l0_ws, x,  l0_bs, h, 2, 3);\n"


def test_export_forward_without_bias():
    edge = Linear(H, Y, LinearTransform(np.zeros((1, 3))))
    assert edge.export_forward("1") == "`MATMULPROD(l1_ws, h, y, 3, 1);\n"


def test_export_params_declares_weights_and_bias():
    edge = Linear(
        X, X, LinearTransform(np.array([[1.0, 2.0], [3.0, 4.0]]), np.array([5.0, 6.0]))
    )
    text = edge.export_params("l0")
    assert text == (
        "real l0_ws[0:2-1][0:2-1] = {\n\t{1, 2, }, \n\t{3, 4, }, \n};\n"
        "real l0_bs[0:2-1] = {5, 6, \n};\n"
    )


def test_export_params_without_bias_has_no_bias_line():
    edge = Linear(H, Y, LinearTransform(np.zeros((1, 3))))
    text = edge.export_params("l4")
    assert text.startswith("real l4_ws[0:1-1][0:3-1] = ")
    assert "l4_bs" not in text