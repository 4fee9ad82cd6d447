import numpy as np
import pytest

from credit_gbdt.models.gbdt_components.gradient_computer import GradientComputer


def test_initial_prediction():
    assert GradientComputer("binary").compute_initial_prediction(np.array([1.0, 1.0])) == 0.5
    assert GradientComputer("regression").compute_initial_prediction(np.array([0.2, 0.4, 0.9])) == pytest.approx(0.5)
    assert GradientComputer("regression").compute_initial_prediction(None) == 0.0
    assert GradientComputer("regression").compute_initial_prediction(np.array([])) == 0.0


def test_binary_gradients_are_label_minus_probability():
    gradients = GradientComputer("binary").compute_gradients(np.array([1.0, 0.0]), np.array([0.0, 0.0]))
    np.testing.assert_allclose(gradients, [0.5, -0.5])


def test_regression_gradients_are_damped_residuals_of_clamped_prediction():
    computer = GradientComputer("regression")
    np.testing.assert_allclose(
        computer.compute_gradients(np.array([1.0, 0.0, 0.5]), np.array([2.0, -1.0, 0.3])),
        [0.0, 0.0, 0.02]
    )


def test_transform_stays_in_unit_interval():
    raw = np.array([-1000.0, -2.0, 0.0, 0.5, 3.0, 1000.0])
    for objective in ("binary", "regression"):
        out = GradientComputer(objective).transform(raw)
        assert np.all((out >= 0.0) & (out <= 1.0))
    assert GradientComputer("binary").transform(0.0) == pytest.approx(0.5)
    assert GradientComputer("regression").transform(1.7) == 1.0


def test_loss():
    y = np.array([1.0, 0.0])
    assert GradientComputer("regression").compute_loss(y, np.array([0.5, 0.5])) == pytest.approx(0.25)
    assert GradientComputer("binary").compute_loss(y, np.array([0.0, 0.0])) == pytest.approx(np.log(2))


def test_unknown_objective():
    with pytest.raises(ValueError):
        GradientComputer("poisson")
