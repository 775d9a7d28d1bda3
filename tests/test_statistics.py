import math

import numpy as np
import pytest
from sklearn import metrics

from monoeval.statistics import accuracy
from monoeval.statistics import confusion_matrix
from monoeval.statistics import kappa
from monoeval.statistics import mean_absolute_error
from monoeval.statistics import reduction_ratios
from monoeval.statistics import SplitStatistics


@pytest.fixture
def predictions() -> tuple[np.ndarray, np.ndarray]:
    real = np.array([0, 0, 1, 1, 2, 2])
    predicted = np.array([0, 1, 1, -1, 2, 0])
    return real, predicted


def test_confusion_matrix(predictions: tuple[np.ndarray, np.ndarray]):
    real, predicted = predictions
    cm = confusion_matrix(real, predicted, n_classes=3)

    # indexed [predicted][actual]
    assert cm.matrix.tolist() == [[1, 0, 1], [1, 1, 0], [0, 0, 1]]
    assert cm.unclassified == 1
    assert cm.classified == 5
    assert cm.matrix.sum(axis=0).sum() == cm.matrix.sum(axis=1).sum() == cm.classified
    assert cm.unclassified + cm.classified == real.shape[0]


def test_statistics(predictions: tuple[np.ndarray, np.ndarray]):
    real, predicted = predictions
    cm = confusion_matrix(real, predicted, n_classes=3)

    # unclassified instances count against accuracy
    assert accuracy(cm, 6) == pytest.approx(0.5)
    assert kappa(cm, 6) == pytest.approx(5 / 14)
    assert mean_absolute_error(real, predicted) == pytest.approx(0.5)


def test_statistics_agree_with_sklearn_when_all_classified():
    rng = np.random.default_rng(0)
    real = rng.integers(0, 4, size=50)
    predicted = np.where(rng.random(50) < 0.6, real, rng.integers(0, 4, size=50))
    stats = SplitStatistics.from_predictions(real, predicted, n_classes=4)

    assert stats.accuracy == pytest.approx(metrics.accuracy_score(real, predicted))
    assert stats.kappa == pytest.approx(metrics.cohen_kappa_score(real, predicted))
    assert stats.mae == pytest.approx(metrics.mean_absolute_error(real, predicted))
    assert np.array_equal(
        stats.confusion_matrix.matrix,
        metrics.confusion_matrix(real, predicted, labels=list(range(4))).T,
    )
    assert stats.undefined == ()


def test_kappa_can_be_negative():
    real = np.array([0, 0, 1, 1])
    predicted = np.array([1, 1, 0, 0])
    stats = SplitStatistics.from_predictions(real, predicted, n_classes=2)
    assert stats.accuracy == 0.0
    assert stats.kappa < 0.0
    assert stats.mae == 1.0


def test_undefined_kappa_is_tagged():
    stats = SplitStatistics.from_predictions(
        np.array([1, 1]), np.array([1, 1]), n_classes=2
    )
    assert stats.accuracy == 1.0
    assert math.isnan(stats.kappa)
    assert stats.undefined == ("kappa",)


def test_empty_split_is_tagged():
    stats = SplitStatistics.from_predictions(
        np.array([], dtype=int), np.array([], dtype=int), n_classes=3
    )
    assert stats.n_instances == 0
    assert stats.unclassified == 0
    assert math.isnan(stats.accuracy)
    assert set(stats.undefined) == {"accuracy", "kappa", "mae"}


def test_all_unclassified():
    stats = SplitStatistics.from_predictions(
        np.array([0, 1, 2]), np.array([-1, -1, -1]), n_classes=3
    )
    assert stats.unclassified == 3
    assert stats.accuracy == 0.0
    assert stats.mae == 0.0
    assert stats.kappa == 0.0


def test_invalid_labels():
    with pytest.raises(ValueError):
        confusion_matrix(np.array([0, 1]), np.array([0, 3]), n_classes=3)
    with pytest.raises(ValueError):
        confusion_matrix(np.array([0, 1]), np.array([0, -2]), n_classes=3)
    with pytest.raises(ValueError):
        confusion_matrix(np.array([0, 5]), np.array([0, 1]), n_classes=3)
    with pytest.raises(ValueError):
        confusion_matrix(np.array([0, 1]), np.array([0]), n_classes=3)


def test_reduction_ratios():
    ratios = reduction_ratios(6, 3, 10, 4)
    assert ratios.instances == pytest.approx(0.4)
    assert ratios.features == pytest.approx(0.25)
    assert ratios.both == pytest.approx(0.55)

    ratios = reduction_ratios(10, 4, 10, 4)
    assert (ratios.instances, ratios.features, ratios.both) == (0.0, 0.0, 0.0)
