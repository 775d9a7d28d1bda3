"""Contains functions computing evaluation statistics from real and predicted
class indices.

Predicted class -1 marks an unclassified instance. Unclassified instances are
excluded from the confusion matrix but the split size is always used as
denominator, so they count against accuracy and are left out of MAE sum.
Statistics which cannot be computed (empty split, kappa with expected agreement
equal to 1) are returned as NaN and listed in `SplitStatistics.undefined`.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

UNCLASSIFIED: int = -1


@dataclass(frozen=True)
class ConfusionMatrix:
    """Confusion matrix indexed [predicted][actual] with a separate counter of
    unclassified instances.
    """

    matrix: np.ndarray
    unclassified: int

    @property
    def n_classes(self) -> int:
        return self.matrix.shape[0]

    @property
    def classified(self) -> int:
        return int(self.matrix.sum())

    @property
    def correct(self) -> int:
        return int(np.trace(self.matrix))


@dataclass(frozen=True)
class ReductionRatios:
    instances: float
    features: float
    both: float


@dataclass(frozen=True)
class SplitStatistics:
    n_instances: int
    confusion_matrix: ConfusionMatrix
    accuracy: float
    kappa: float
    mae: float
    monotonicity_index: float
    undefined: tuple[str, ...] = ()

    @property
    def unclassified(self) -> int:
        return self.confusion_matrix.unclassified

    @staticmethod
    def from_predictions(
        real: np.ndarray,
        predicted: np.ndarray,
        n_classes: int,
        monotonicity_index: float = 0.0,
    ) -> SplitStatistics:
        real = np.asarray(real, dtype=int)
        predicted = np.asarray(predicted, dtype=int)
        cm: ConfusionMatrix = confusion_matrix(real, predicted, n_classes)
        n: int = real.shape[0]
        acc: float = accuracy(cm, n)
        kappa_value: float = kappa(cm, n)
        mae: float = mean_absolute_error(real, predicted)
        undefined: list[str] = [
            name
            for name, value in (("accuracy", acc), ("kappa", kappa_value), ("mae", mae))
            if math.isnan(value)
        ]
        return SplitStatistics(
            n_instances=n,
            confusion_matrix=cm,
            accuracy=acc,
            kappa=kappa_value,
            mae=mae,
            monotonicity_index=monotonicity_index,
            undefined=tuple(undefined),
        )


def confusion_matrix(
    real: np.ndarray, predicted: np.ndarray, n_classes: int
) -> ConfusionMatrix:
    """Builds confusion matrix indexed [predicted][actual].

    Args:
        real (np.ndarray): real class indices
        predicted (np.ndarray): predicted class indices, -1 for unclassified
        n_classes (int): number of decision classes

    Raises:
        ValueError: when arrays lengths differ or any class index lies outside
            of the [0, n_classes) range

    Returns:
        ConfusionMatrix: confusion matrix
    """
    real = np.asarray(real, dtype=int)
    predicted = np.asarray(predicted, dtype=int)
    if real.shape != predicted.shape:
        raise ValueError(
            f"Got {real.shape[0]} real classes and {predicted.shape[0]} predictions"
        )
    if np.any((real < 0) | (real >= n_classes)):
        raise ValueError(f"Real class indices must lie in [0, {n_classes})")
    if np.any((predicted < UNCLASSIFIED) | (predicted >= n_classes)):
        raise ValueError(
            f"Predicted class indices must lie in [0, {n_classes}) or be equal to "
            f"{UNCLASSIFIED}"
        )
    classified_mask: np.ndarray = predicted != UNCLASSIFIED
    matrix: np.ndarray = np.zeros((n_classes, n_classes), dtype=int)
    np.add.at(matrix, (predicted[classified_mask], real[classified_mask]), 1)
    return ConfusionMatrix(
        matrix=matrix,
        unclassified=int(np.count_nonzero(~classified_mask)),
    )


def accuracy(cm: ConfusionMatrix, n_instances: int) -> float:
    if n_instances == 0:
        return math.nan
    return cm.correct / n_instances


def kappa(cm: ConfusionMatrix, n_instances: int) -> float:
    """Cohen's kappa with marginals normalized by the split size.

    Returns:
        float: kappa, NaN when split is empty or expected agreement equals 1
    """
    if n_instances == 0:
        return math.nan
    observed: float = cm.correct / n_instances
    predicted_marginals: np.ndarray = cm.matrix.sum(axis=1) / n_instances
    actual_marginals: np.ndarray = cm.matrix.sum(axis=0) / n_instances
    expected: float = float(np.sum(predicted_marginals * actual_marginals))
    if math.isclose(expected, 1.0):
        return math.nan
    return (observed - expected) / (1.0 - expected)


def mean_absolute_error(real: np.ndarray, predicted: np.ndarray) -> float:
    """Sum of absolute differences between predicted and real class indices of
    classified instances, divided by the split size.
    """
    real = np.asarray(real, dtype=int)
    predicted = np.asarray(predicted, dtype=int)
    if real.shape[0] == 0:
        return math.nan
    classified_mask: np.ndarray = predicted != UNCLASSIFIED
    errors: np.ndarray = np.abs(predicted[classified_mask] - real[classified_mask])
    return float(errors.sum()) / real.shape[0]


def reduction_ratios(
    n_instances: int,
    n_features: int,
    n_reference_instances: int,
    n_reference_features: int,
) -> ReductionRatios:
    """Computes how much instance and feature selection shrank reference dataset.

    Args:
        n_instances (int): number of retained training instances
        n_features (int): number of retained input attributes
        n_reference_instances (int): number of instances in the reference dataset
        n_reference_features (int): number of input attributes in the reference
            dataset

    Returns:
        ReductionRatios: instance, feature and combined reduction
    """
    instances_ratio: float = (
        n_instances / n_reference_instances if n_reference_instances else math.nan
    )
    features_ratio: float = (
        n_features / n_reference_features if n_reference_features else math.nan
    )
    return ReductionRatios(
        instances=1.0 - instances_ratio,
        features=1.0 - features_ratio,
        both=1.0 - instances_ratio * features_ratio,
    )
