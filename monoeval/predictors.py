"""Adapters exposing already trained third-party models as predictors.

Models are expected to be trained on data normalized with the same
:class:`~monoeval.normalization.Normalizer` the evaluator uses.
"""
from typing import Any
from typing import Optional
from typing import Sequence

import numpy as np
import pandas as pd
from decision_rules.classification import ClassificationRuleSet
from sklearn.base import ClassifierMixin
from sklearn.tree import DecisionTreeClassifier
from sklearn.tree import export_text

from monoeval.evaluation import Predictor
from monoeval.statistics import UNCLASSIFIED


def _class_index(label: Any, classes: Optional[Sequence]) -> int:
    if classes is None:
        return int(label)
    try:
        return list(classes).index(label)
    except ValueError as error:
        raise ValueError(f"Predicted label {label!r} is not a known class") from error


class EstimatorPredictor(Predictor):
    """Predictor backed by a fitted scikit-learn classifier.

    Args:
        estimator (ClassifierMixin): fitted classifier
        classes (Optional[Sequence], optional): class labels ordered by class
            index. When omitted the estimator has to predict class indices.
            Defaults to None.
        feature_names (Optional[list[str]], optional): names of the features the
            estimator was fitted on, used for describing decision trees.
            Defaults to None.
    """

    def __init__(
        self,
        estimator: ClassifierMixin,
        classes: Optional[Sequence] = None,
        feature_names: Optional[list[str]] = None,
    ):
        self.estimator: ClassifierMixin = estimator
        self.classes: Optional[Sequence] = classes
        self.feature_names: Optional[list[str]] = feature_names

    def predict(self, example: np.ndarray) -> int:
        label = self.estimator.predict(np.asarray(example).reshape(1, -1))[0]
        return _class_index(label, self.classes)

    def describe_model(self) -> tuple[int, str]:
        if isinstance(self.estimator, DecisionTreeClassifier):
            # each leaf of the tree corresponds to one rule
            text: str = export_text(self.estimator, feature_names=self.feature_names)
            return int(self.estimator.get_n_leaves()), text
        return 0, repr(self.estimator)


class RuleSetPredictor(Predictor):
    """Predictor backed by a trained `decision-rules
    <https://github.com/ruleminer/decision-rules>`_ classification ruleset.

    Args:
        ruleset (ClassificationRuleSet): trained ruleset
        column_names (list[str]): names of the attributes ruleset was trained on
        classes (Optional[Sequence], optional): class labels ordered by class
            index. Defaults to None.
        uncovered_as_unclassified (bool, optional): examples not covered by any
            rule are reported as unclassified instead of receiving the ruleset's
            default decision. Defaults to False.
    """

    def __init__(
        self,
        ruleset: ClassificationRuleSet,
        column_names: list[str],
        classes: Optional[Sequence] = None,
        uncovered_as_unclassified: bool = False,
    ):
        self.ruleset: ClassificationRuleSet = ruleset
        self.column_names: list[str] = column_names
        self.classes: Optional[Sequence] = classes
        self.uncovered_as_unclassified: bool = uncovered_as_unclassified

    def predict(self, example: np.ndarray) -> int:
        X_np: np.ndarray = np.asarray(example, dtype=float).reshape(1, -1)
        if self.uncovered_as_unclassified and not self._is_covered(X_np):
            return UNCLASSIFIED
        X = pd.DataFrame(X_np, columns=self.column_names)
        label = self.ruleset.predict(X)[0]
        return _class_index(label, self.classes)

    def describe_model(self) -> tuple[int, str]:
        rules_text: str = "\n".join(str(rule) for rule in self.ruleset.rules)
        return len(self.ruleset.rules), rules_text

    def _is_covered(self, X_np: np.ndarray) -> bool:
        return any(
            bool(rule.premise.covered_mask(X_np)[0]) for rule in self.ruleset.rules
        )
