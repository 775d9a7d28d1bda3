from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from logging import getLogger
from logging import Logger
from typing import Any
from typing import Callable
from typing import Optional

import numpy as np

from monoeval._params import adjust_params_on_dataset
from monoeval._params import EvaluationParams
from monoeval._params import resolve_params
from monoeval._timing import PerformanceTimer
from monoeval._timing import RunTimes
from monoeval.dataset import Dataset
from monoeval.dominance import monotonicity_index
from monoeval.normalization import check_classification_schema
from monoeval.normalization import NormalizedData
from monoeval.normalization import Normalizer
from monoeval.statistics import reduction_ratios
from monoeval.statistics import ReductionRatios
from monoeval.statistics import SplitStatistics


class Predictor(ABC):
    """Capability implemented by concrete classification algorithms."""

    @abstractmethod
    def predict(self, example: np.ndarray) -> int:
        """Predicts class of a single normalized example.

        Args:
            example (np.ndarray): normalized feature vector (read-only)

        Returns:
            int: class index or -1 if the example remains unclassified
        """

    @abstractmethod
    def describe_model(self) -> tuple[int, str]:
        """
        Returns:
            tuple[int, str]: number of rules and text describing the model
        """


PredictFunction = Callable[[np.ndarray], int]


@dataclass(frozen=True)
class SplitRun:
    real: np.ndarray
    predicted: np.ndarray
    monotonicity_index: float

    @property
    def n_instances(self) -> int:
        return self.real.shape[0]


@dataclass(frozen=True)
class RunResult:
    train: SplitRun
    test: SplitRun
    times: RunTimes

    def statistics(self, n_classes: int) -> tuple[SplitStatistics, SplitStatistics]:
        """Computes statistics of training and test splits."""
        return tuple(
            SplitStatistics.from_predictions(
                split.real,
                split.predicted,
                n_classes,
                monotonicity_index=split.monotonicity_index,
            )
            for split in (self.train, self.test)
        )


@dataclass(frozen=True)
class EvaluationReport:
    train: SplitStatistics
    test: SplitStatistics
    reduction: ReductionRatios
    times: RunTimes
    rules_count: int
    rules_text: str

    def to_dict(self) -> dict[str, Any]:
        """Flat record with all statistics, ready to be written by a report sink."""
        return {
            "accuracy": self.test.accuracy,
            "accuracy_training": self.train.accuracy,
            "kappa": self.test.kappa,
            "kappa_training": self.train.kappa,
            "unclassified": self.test.unclassified,
            "unclassified_training": self.train.unclassified,
            "reduction_instances": self.reduction.instances,
            "reduction_features": self.reduction.features,
            "reduction_both": self.reduction.both,
            "model_time": self.times.model_time.total_seconds(),
            "training_time": self.times.training_time.total_seconds(),
            "test_time": self.times.test_time.total_seconds(),
            "rules_count": self.rules_count,
            "mae": self.test.mae,
            "mae_training": self.train.mae,
            "monotonicity_index": self.test.monotonicity_index,
            "monotonicity_index_training": self.train.monotonicity_index,
            "confusion_matrix": self.test.confusion_matrix.matrix.tolist(),
            "confusion_matrix_training": self.train.confusion_matrix.matrix.tolist(),
            "undefined": sorted(
                list(self.test.undefined)
                + [f"{name}_training" for name in self.train.undefined]
            ),
            "rules": self.rules_text,
        }


class Evaluator:
    """Drives prediction of training and test data, measures time and computes
    statistics of a monotonic classification algorithm.

    Each call to :meth:`run` or :meth:`evaluate` is independent and returns fresh
    immutable results.
    """

    def __init__(self, **params):
        """
        Args:
            n_jobs (int, optional): number of joblib workers used for pairwise
                monotonicity scan. Defaults to DEFAULT_PARAMS_VALUES["n_jobs"].
            parallel_min_instances (int, optional): datasets with fewer instances
                are always scanned sequentially. Defaults to
                DEFAULT_PARAMS_VALUES["parallel_min_instances"].
            verbose (bool, optional): enables logging. Defaults to
                DEFAULT_PARAMS_VALUES["verbose"].
        """
        self.params: EvaluationParams = resolve_params(**params)
        self.logger: Logger = getLogger(self.__class__.__name__)
        self.logger.disabled = not self.params["verbose"]

    def run(
        self,
        train_X: np.ndarray,
        train_y: np.ndarray,
        test_X: np.ndarray,
        test_y: np.ndarray,
        predict: PredictFunction,
        model_time: timedelta = timedelta(),
    ) -> RunResult:
        """Classifies all training and test instances and computes monotonicity
        indices of both splits.

        Args:
            train_X (np.ndarray): normalized training data
            train_y (np.ndarray): training class indices
            test_X (np.ndarray): normalized test data
            test_y (np.ndarray): test class indices
            predict (PredictFunction): function mapping normalized example to
                class index or -1
            model_time (timedelta, optional): time spent on building the model,
                measured by the caller. Defaults to timedelta().

        Returns:
            RunResult: predictions, monotonicity indices and times
        """
        train = NormalizedData(train_X, train_y)
        test = NormalizedData(test_X, test_y)

        self.logger.info("Classifying %d training instances", train.n_instances)
        with PerformanceTimer() as train_timer:
            train_run: SplitRun = self._run_split(train, predict)
        self.logger.info("Classifying %d test instances", test.n_instances)
        with PerformanceTimer() as test_timer:
            test_run: SplitRun = self._run_split(test, predict)

        return RunResult(
            train=train_run,
            test=test_run,
            times=RunTimes(
                model_time=model_time,
                training_time=train_timer.timedelta,
                test_time=test_timer.timedelta,
            ),
        )

    def evaluate(
        self,
        train: Dataset,
        test: Dataset,
        predictor: Predictor,
        reference: Optional[Dataset] = None,
        model_time: timedelta = timedelta(),
    ) -> EvaluationReport:
        """Normalizes data, runs the predictor and computes all statistics.

        Args:
            train (Dataset): training data (after instance or feature selection)
            test (Dataset): test data sharing the training schema
            predictor (Predictor): trained classification algorithm
            reference (Optional[Dataset], optional): data before selection, used
                for reduction ratios. Defaults to training data.
            model_time (timedelta, optional): time spent on building the model.
                Defaults to timedelta().

        Raises:
            DataFormatError: when any dataset does not describe a classification
                problem

        Returns:
            EvaluationReport: report
        """
        if reference is None:
            reference = train
        normalizer = Normalizer().fit(train)
        train_data: NormalizedData = normalizer.transform(train)
        test_data: NormalizedData = normalizer.transform(test)
        check_classification_schema(reference)

        result: RunResult = self.run(
            train_data.X,
            train_data.y,
            test_data.X,
            test_data.y,
            predictor.predict,
            model_time=model_time,
        )
        train_stats, test_stats = result.statistics(normalizer.params.n_classes)
        for split_name, stats in (("training", train_stats), ("test", test_stats)):
            for statistic in stats.undefined:
                self.logger.warning(
                    "%s is undefined for %s data", statistic, split_name
                )
        rules_count, rules_text = predictor.describe_model()
        return EvaluationReport(
            train=train_stats,
            test=test_stats,
            reduction=reduction_ratios(
                train.n_instances,
                train.n_input_attributes,
                reference.n_instances,
                reference.n_input_attributes,
            ),
            times=result.times,
            rules_count=rules_count,
            rules_text=rules_text,
        )

    def _run_split(self, data: NormalizedData, predict: PredictFunction) -> SplitRun:
        predicted = np.array([predict(example) for example in data.X], dtype=int)
        params: EvaluationParams = adjust_params_on_dataset(
            self.params, data.n_instances
        )
        index: float = monotonicity_index(
            data.X, predicted, n_jobs=params["n_jobs"]
        )
        self.logger.debug("Monotonicity index: %f", index)
        return SplitRun(real=data.y, predicted=predicted, monotonicity_index=index)
