"""Datasets consumed by the evaluation framework.

A dataset is an ordered collection of instances sharing one schema: a list of
input attributes and a list of output (decision) attributes. Nominal values are
stored as their ordinal index in the attribute's domain, missing cells as NaN.
"""
from __future__ import annotations

from abc import ABC
from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any
from typing import Optional
from typing import Sequence

import numpy as np
import pandas as pd

from monoeval import _helpers
from monoeval.exceptions import DataFormatError


class AttributeType(Enum):
    NUMERIC = "numeric"
    INTEGER = "integer"
    NOMINAL = "nominal"


@dataclass(frozen=True)
class Attribute:
    name: str
    type: AttributeType
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    values: Optional[tuple] = None

    @property
    def domain_size(self) -> int:
        return 0 if self.values is None else len(self.values)

    @property
    def is_real(self) -> bool:
        return self.type == AttributeType.NUMERIC

    def encode(self, value: Any) -> float:
        """Encodes raw value as a number. Nominal values are replaced by their
        index in the attribute domain.
        """
        if pd.isnull(value):
            return np.nan
        if self.type != AttributeType.NOMINAL:
            return float(value)
        try:
            return float(self.values.index(value))
        except ValueError as error:
            raise DataFormatError(
                f"Value {value!r} does not belong to the domain of attribute "
                f"'{self.name}'"
            ) from error

    @staticmethod
    def infer(column: pd.Series) -> Attribute:
        """Infers attribute definition from the column dtype and its values."""
        name = str(column.name)
        if _helpers.is_nominal_dtype(column.dtype):
            return Attribute(
                name, AttributeType.NOMINAL, values=_helpers.nominal_domain(column)
            )
        attr_type = (
            AttributeType.INTEGER
            if pd.api.types.is_integer_dtype(column.dtype)
            else AttributeType.NUMERIC
        )
        not_null: pd.Series = column.dropna()
        if not_null.shape[0] == 0:
            return Attribute(name, attr_type, minimum=0.0, maximum=0.0)
        return Attribute(
            name,
            attr_type,
            minimum=float(not_null.min()),
            maximum=float(not_null.max()),
        )


class Dataset(ABC):
    """Read-only view of a labeled dataset required by the evaluation framework."""

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @property
    @abstractmethod
    def input_attributes(self) -> list[Attribute]:
        pass

    @property
    @abstractmethod
    def output_attributes(self) -> list[Attribute]:
        pass

    @property
    @abstractmethod
    def values(self) -> np.ndarray:
        """Float matrix of encoded input values, NaN marks missing cells."""

    @property
    @abstractmethod
    def labels(self) -> np.ndarray:
        """Class indices of the first output attribute."""

    @abstractmethod
    def select(self, indices: Sequence[int]) -> Dataset:
        """Returns dataset consisting of rows with given indices (indices may repeat)."""

    @property
    def n_instances(self) -> int:
        return self.values.shape[0]

    @property
    def n_input_attributes(self) -> int:
        return len(self.input_attributes)

    @property
    def n_output_attributes(self) -> int:
        return len(self.output_attributes)

    @property
    def missing_mask(self) -> np.ndarray:
        return np.isnan(self.values)

    def row(self, index: int) -> tuple[np.ndarray, np.ndarray]:
        values: np.ndarray = self.values[index]
        return values.copy(), np.isnan(values)

    def label(self, index: int) -> int:
        return int(self.labels[index])


class TabularDataset(Dataset):

    def __init__(
        self,
        values: np.ndarray,
        labels: np.ndarray,
        input_attributes: list[Attribute],
        output_attributes: list[Attribute],
        name: str = "",
    ):
        values = np.array(values, dtype=float)
        if values.ndim != 2:
            values = values.reshape(len(labels), len(input_attributes))
        if values.shape[1] != len(input_attributes):
            raise DataFormatError(
                f"Dataset has {values.shape[1]} columns but "
                f"{len(input_attributes)} input attributes were declared"
            )
        labels = np.array(labels, dtype=int)
        if labels.shape[0] != values.shape[0]:
            raise DataFormatError(
                f"Dataset has {values.shape[0]} rows but {labels.shape[0]} labels"
            )
        self._values: np.ndarray = values
        self._labels: np.ndarray = labels
        self._values.flags.writeable = False
        self._labels.flags.writeable = False
        self._input_attributes: list[Attribute] = list(input_attributes)
        self._output_attributes: list[Attribute] = list(output_attributes)
        self._name: str = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def input_attributes(self) -> list[Attribute]:
        return list(self._input_attributes)

    @property
    def output_attributes(self) -> list[Attribute]:
        return list(self._output_attributes)

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def labels(self) -> np.ndarray:
        return self._labels

    def select(self, indices: Sequence[int]) -> TabularDataset:
        indices = np.asarray(indices, dtype=int)
        return TabularDataset(
            self._values[indices],
            self._labels[indices],
            self._input_attributes,
            self._output_attributes,
            name=self._name,
        )

    def __repr__(self) -> str:
        return (
            f"TabularDataset(name={self._name!r}, n_instances={self.n_instances}, "
            f"n_input_attributes={self.n_input_attributes})"
        )

    @staticmethod
    def from_dataframe(
        df: pd.DataFrame,
        decision_attribute: Optional[str | list[str]],
        attributes: Optional[list[Attribute]] = None,
        name: Optional[str] = None,
        output_attributes: Optional[list[Attribute]] = None,
        schema: Optional[Dataset] = None,
    ) -> TabularDataset:
        """Builds dataset from given dataframe.

        Test and reference data should be built with the training dataset as
        ``schema``, so that nominal values and decision classes are encoded with
        the training domains even when some values do not occur in them.

        Args:
            df (pd.DataFrame): data including decision column(s)
            decision_attribute (Optional[str | list[str]]): name of the decision
                column. A list of names declares several output attributes, which
                the normalizer rejects; None declares no output attribute.
            attributes (Optional[list[Attribute]], optional): declared definitions
                of input attributes (in column order). When omitted they are
                inferred from column dtypes and values. Defaults to None.
            name (Optional[str], optional): dataset name. Defaults to None.
            output_attributes (Optional[list[Attribute]], optional): declared
                definitions of output attributes (in decision column order). When
                omitted they are inferred from decision columns. Defaults to None.
            schema (Optional[Dataset], optional): dataset whose input and output
                attributes are reused. Overrides ``attributes`` and
                ``output_attributes``. Defaults to None.

        Raises:
            DataFormatError: when decision columns are absent or contain missing
                values, declarations do not match the columns or a value does
                not belong to its declared domain

        Returns:
            TabularDataset: dataset
        """
        if schema is not None:
            attributes = schema.input_attributes
            output_attributes = schema.output_attributes
        if decision_attribute is None:
            decision_columns: list[str] = []
        elif isinstance(decision_attribute, str):
            decision_columns = [decision_attribute]
        else:
            decision_columns = list(decision_attribute)
        missing_columns = [c for c in decision_columns if c not in df.columns]
        if missing_columns:
            raise DataFormatError(
                f"Decision attribute(s) {missing_columns} not present in data"
            )

        X: pd.DataFrame = df.drop(columns=decision_columns)
        if attributes is None:
            attributes = [Attribute.infer(X[column]) for column in X.columns]
        elif len(attributes) != X.shape[1]:
            raise DataFormatError(
                f"Expected {X.shape[1]} input attribute definitions, "
                f"got {len(attributes)}"
            )
        values: np.ndarray = np.empty(X.shape, dtype=float)
        for j, attribute in enumerate(attributes):
            values[:, j] = [attribute.encode(v) for v in X.iloc[:, j]]

        for column in decision_columns:
            if df[column].isnull().any():
                raise DataFormatError(
                    f"Decision attribute '{column}' contains missing values"
                )
        if output_attributes is None:
            output_attributes = [
                TabularDataset._infer_output_attribute(df[column])
                for column in decision_columns
            ]
        elif len(output_attributes) != len(decision_columns):
            raise DataFormatError(
                f"Expected {len(decision_columns)} output attribute definitions, "
                f"got {len(output_attributes)}"
            )

        if output_attributes:
            decision: pd.Series = df[decision_columns[0]]
            decision_values: tuple = output_attributes[0].values
            if decision_values is None:
                decision_values = _helpers.nominal_domain(decision)
            mapping: dict[Any, int] = {v: i for i, v in enumerate(decision_values)}
            unknown = [v for v in decision.unique().tolist() if v not in mapping]
            if unknown:
                raise DataFormatError(
                    f"Decision values {unknown} do not belong to the domain of "
                    f"attribute '{output_attributes[0].name}'"
                )
            labels = np.array([mapping[v] for v in decision], dtype=int)
        else:
            labels = np.full(df.shape[0], -1, dtype=int)

        return TabularDataset(
            values,
            labels,
            attributes,
            output_attributes,
            name=name if name is not None else "",
        )

    @staticmethod
    def _infer_output_attribute(decision: pd.Series) -> Attribute:
        inferred: Attribute = Attribute.infer(decision)
        return Attribute(
            inferred.name,
            inferred.type,
            minimum=inferred.minimum,
            maximum=inferred.maximum,
            values=_helpers.nominal_domain(decision),
        )
