"""
Package implementing evaluation framework for monotonic classification algorithms
learning from ordinal and nominal data.

It normalizes training, test and reference data, runs any predictor on them and
computes accuracy, Cohen's kappa, mean absolute error, confusion matrices,
reduction ratios and the monotonicity-violation index of predictions.
"""
from monoeval.dataset import Attribute
from monoeval.dataset import AttributeType
from monoeval.dataset import Dataset
from monoeval.dataset import TabularDataset
from monoeval.dominance import compare
from monoeval.dominance import Dominance
from monoeval.dominance import monotonicity_index
from monoeval.evaluation import EvaluationReport
from monoeval.evaluation import Evaluator
from monoeval.evaluation import Predictor
from monoeval.evaluation import RunResult
from monoeval.exceptions import DataFormatError
from monoeval.normalization import NormalizedData
from monoeval.normalization import Normalizer

__all__ = [
    "Attribute",
    "AttributeType",
    "Dataset",
    "TabularDataset",
    "compare",
    "Dominance",
    "monotonicity_index",
    "EvaluationReport",
    "Evaluator",
    "Predictor",
    "RunResult",
    "DataFormatError",
    "NormalizedData",
    "Normalizer",
]
