import numpy as np
import pytest

from neuralkit.core.errors import InvalidArgumentError, NotFittedError
from neuralkit.data.synthetic import load_line, load_separable
from neuralkit.models import LinearRegression, Perceptron
from neuralkit.models.base import augment, check_training_args


def _signed_separable(n_samples=100, seed=0):
    spec = load_separable(n_samples=n_samples, n_features=2, seed=seed)
    X = spec.inputs.T
    y = np.where(spec.targets.T > 0, 1.0, -1.0)
    return X, y


def _line(**options):
    spec = load_line(**options)
    return spec.inputs.T, spec.targets.T


def test_augment_appends_ones_column():
    out = augment(np.array([[2.0, 3.0], [4.0, 5.0]]))
    np.testing.assert_array_equal(out, [[2.0, 3.0, 1.0], [4.0, 5.0, 1.0]])


def test_check_training_args_reshapes_flat_labels():
    x, y = check_training_args(np.zeros((4, 2)), np.zeros(4), epochs=1)
    assert y.shape == (4, 1)


@pytest.mark.parametrize(
    "X, y, epochs",
    [
        (np.zeros((4, 2)), np.zeros((4, 1)), 0),
        (np.zeros((4, 2)), np.zeros((3, 1)), 5),
        (np.zeros((4, 2)), np.zeros((4, 2)), 5),
        (np.zeros(4), np.zeros((4, 1)), 5),
    ],
)
def test_check_training_args_rejects(X, y, epochs):
    with pytest.raises(InvalidArgumentError):
        check_training_args(X, y, epochs)


def test_perceptron_separates_linear_data():
    X, y = _signed_separable()
    model = Perceptron(seed=0)
    weights = model.fit(X, y, epochs=200, learning_rate=0.01)
    assert weights.shape == (3, 1)
    preds = model.predict(X)
    assert preds.shape == (100, 1)
    assert preds.dtype == bool
    accuracy = float(np.mean(preds == (y > 0)))
    assert accuracy >= 0.95
    assert len(model.history) == 200
    assert model.history[-1] <= 0.05


def test_perceptron_predict_accepts_bias_column():
    X, y = _signed_separable(n_samples=20)
    model = Perceptron()
    model.fit(X, y, epochs=5)
    np.testing.assert_array_equal(model.predict(X), model.predict(augment(X)))


def test_perceptron_rejects_non_signed_labels():
    X, y = _signed_separable(n_samples=10)
    with pytest.raises(InvalidArgumentError):
        Perceptron().fit(X, (y > 0).astype(float))


def test_perceptron_rejects_feature_change_on_refit():
    X, y = _signed_separable(n_samples=10)
    model = Perceptron()
    model.fit(X, y, epochs=1)
    with pytest.raises(InvalidArgumentError):
        model.fit(np.hstack([X, X]), y, epochs=1)
    with pytest.raises(InvalidArgumentError):
        model.predict(np.zeros((2, 5)))


def test_perceptron_predict_before_fit():
    with pytest.raises(NotFittedError):
        Perceptron().predict(np.zeros((3, 2)))


def test_perceptron_reports_epochs():
    X, y = _signed_separable(n_samples=10)
    seen = []
    model = Perceptron(on_epoch=lambda epoch, metrics: seen.append((epoch, metrics)))
    model.fit(X, y, epochs=3)
    assert [epoch for epoch, _ in seen] == [0, 1, 2]
    assert all(m["accuracy"] == pytest.approx(1.0 - m["error"]) for _, m in seen)


def test_perceptron_verbose_prints(capsys):
    X, y = _signed_separable(n_samples=10)
    Perceptron(verbose=True).fit(X, y, epochs=2)
    out = capsys.readouterr().out
    assert "Epoch: 0 Error:" in out
    assert "Epoch: 1 Error:" in out


def test_linear_regression_recovers_line_with_mse():
    X, y = _line(slope=2.0, intercept=-1.0, noise=0.05, seed=3)
    model = LinearRegression(loss="mse", seed=0)
    weights = model.fit(X, y, epochs=500, learning_rate=0.1)
    assert weights.shape == (2, 1)
    assert weights[0, 0] == pytest.approx(2.0, abs=0.05)
    assert weights[1, 0] == pytest.approx(-1.0, abs=0.05)
    assert model.history[-1] < model.history[0]
    preds = model.predict(X)
    assert preds.shape == y.shape


def test_linear_regression_with_mae_reduces_loss():
    X, y = _line(seed=1)
    model = LinearRegression(loss="mae", seed=2)
    model.fit(X, y, epochs=500, learning_rate=0.1)
    assert model.history[-1] < model.history[0]
    assert model.history[-1] < 0.25


def test_linear_regression_rejects_unknown_loss():
    with pytest.raises(InvalidArgumentError):
        LinearRegression(loss="huber")
    model = LinearRegression()
    with pytest.raises(InvalidArgumentError):
        model.set_loss_function("hinge")
    model.set_loss_function("mae")
    assert model.loss == "mae"


def test_linear_regression_model_checks_shapes():
    with pytest.raises(InvalidArgumentError):
        LinearRegression.model(np.ones((3, 2)), np.ones((3, 1)))
    out = LinearRegression.model(np.ones((3, 2)), np.ones((2, 1)))
    np.testing.assert_array_equal(out, np.full((3, 1), 2.0))


def test_linear_regression_predict_before_fit():
    with pytest.raises(NotFittedError):
        LinearRegression().predict(np.zeros((3, 1)))


def test_linear_regression_reports_loss_each_epoch():
    X, y = _line(n_samples=16)
    losses = []
    model = LinearRegression(on_epoch=lambda epoch, metrics: losses.append(metrics["loss"]))
    model.fit(X, y, epochs=4, learning_rate=0.1)
    assert losses == model.history
