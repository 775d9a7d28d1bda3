"""Conversion of datasets into dense numeric matrices with input attributes
scaled to the [0, 1] interval.

Scaling parameters are always taken from the training dataset's declared schema,
so training, test and reference data share one feature scale.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from monoeval.dataset import Attribute
from monoeval.dataset import AttributeType
from monoeval.dataset import Dataset
from monoeval.exceptions import DataFormatError


@dataclass(frozen=True)
class NormalizedData:
    X: np.ndarray
    y: np.ndarray

    def __post_init__(self):
        object.__setattr__(self, "X", np.array(self.X, dtype=float))
        object.__setattr__(self, "y", np.array(self.y, dtype=int))
        if self.X.shape[0] != self.y.shape[0]:
            raise ValueError(
                f"X has {self.X.shape[0]} rows but y has {self.y.shape[0]} labels"
            )
        self.X.flags.writeable = False
        self.y.flags.writeable = False

    @property
    def n_instances(self) -> int:
        return self.X.shape[0]

    @property
    def n_attributes(self) -> int:
        return self.X.shape[1]


@dataclass(frozen=True)
class NormalizationParams:
    nominal_mask: np.ndarray
    minimum: np.ndarray
    range: np.ndarray
    domain_size: np.ndarray
    n_classes: int
    nominal_values: tuple[Optional[tuple], ...] = ()
    classes: tuple = ()

    @staticmethod
    def from_attributes(
        attributes: list[Attribute], output_attribute: Attribute
    ) -> NormalizationParams:
        nominal_mask = np.array(
            [a.type == AttributeType.NOMINAL for a in attributes], dtype=bool
        )
        minimum = np.zeros(len(attributes), dtype=float)
        range_ = np.zeros(len(attributes), dtype=float)
        domain_size = np.zeros(len(attributes), dtype=int)
        for i, attribute in enumerate(attributes):
            if nominal_mask[i]:
                domain_size[i] = attribute.domain_size
            else:
                minimum[i] = attribute.minimum
                range_[i] = attribute.maximum - attribute.minimum
        return NormalizationParams(
            nominal_mask=nominal_mask,
            minimum=minimum,
            range=range_,
            domain_size=domain_size,
            n_classes=output_attribute.domain_size,
            nominal_values=tuple(
                a.values if a.type == AttributeType.NOMINAL else None
                for a in attributes
            ),
            classes=tuple(output_attribute.values or ()),
        )


def check_classification_schema(dataset: Dataset):
    """Checks whether dataset describes a classification problem.

    Raises:
        DataFormatError: if dataset has no output attribute, more than one output
            attribute or real valued output attribute
    """
    if dataset.n_output_attributes < 1:
        raise DataFormatError(
            f"Dataset '{dataset.name}' has no output attribute, so it does not "
            "correspond to a classification problem."
        )
    if dataset.n_output_attributes > 1:
        raise DataFormatError(
            f"Dataset '{dataset.name}' has more than one output attribute."
        )
    if dataset.output_attributes[0].is_real:
        raise DataFormatError(
            f"Dataset '{dataset.name}' has a real valued output attribute, so it "
            "does not correspond to a classification problem."
        )


class Normalizer:
    """Builds normalized data matrices.

    Nominal values (already encoded as their ordinal index) are divided by
    ``domain_size - 1``. Numeric and integer values are shifted by the training
    minimum and divided by the training range. Missing values become 0.0 and are
    not scaled. Attributes with zero range are normalized to 0.0. Values outside
    of the training bounds are not clipped.
    """

    def __init__(self) -> None:
        self.params: Optional[NormalizationParams] = None

    def fit(self, train: Dataset) -> Normalizer:
        check_classification_schema(train)
        self.params = NormalizationParams.from_attributes(
            train.input_attributes, train.output_attributes[0]
        )
        return self

    def transform(self, dataset: Dataset) -> NormalizedData:
        if self.params is None:
            raise DataFormatError(
                "Normalizer has to be fitted on training data before transforming "
                "other datasets."
            )
        check_classification_schema(dataset)
        if dataset.n_input_attributes != self.params.minimum.shape[0]:
            raise DataFormatError(
                f"Dataset '{dataset.name}' has {dataset.n_input_attributes} input "
                f"attributes while training data has {self.params.minimum.shape[0]}"
            )
        self._check_domains(dataset)
        return NormalizedData(
            X=self._scale(dataset.values, dataset.missing_mask),
            y=np.array(dataset.labels, dtype=int),
        )

    def fit_transform(self, train: Dataset) -> NormalizedData:
        return self.fit(train).transform(train)

    def _check_domains(self, dataset: Dataset):
        # encoded values are only comparable when both datasets share domains
        for attribute, train_values in zip(
            dataset.input_attributes, self.params.nominal_values
        ):
            values = (
                attribute.values if attribute.type == AttributeType.NOMINAL else None
            )
            if values != train_values:
                raise DataFormatError(
                    f"Attribute '{attribute.name}' of dataset '{dataset.name}' "
                    f"has domain {values} while training data has {train_values}"
                )
        classes = tuple(dataset.output_attributes[0].values or ())
        if classes != self.params.classes:
            raise DataFormatError(
                f"Decision classes {classes} of dataset '{dataset.name}' differ "
                f"from training classes {self.params.classes}"
            )

    def _scale(self, values: np.ndarray, missing_mask: np.ndarray) -> np.ndarray:
        params: NormalizationParams = self.params
        X: np.ndarray = np.array(values, dtype=float)
        X[missing_mask] = 0.0

        nominal_divisor = np.where(
            params.domain_size > 1, params.domain_size - 1, 1
        ).astype(float)
        numeric_mask: np.ndarray = ~params.nominal_mask
        zero_range: np.ndarray = numeric_mask & (params.range == 0)
        # nominal columns have zero range as well
        numeric_divisor = np.where(params.range == 0, 1.0, params.range)

        scaled = np.where(
            params.nominal_mask,
            X / nominal_divisor,
            (X - params.minimum) / numeric_divisor,
        )
        scaled[:, zero_range] = 0.0
        # missing cells stay 0.0 regardless of the attribute scale
        scaled[missing_mask] = 0.0
        return scaled
