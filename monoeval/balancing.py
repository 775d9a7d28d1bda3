"""Balancing of decision class distribution by under-sampling, over-sampling or
both.

It operates upstream of the evaluation: the balanced dataset is what a learning
algorithm is trained on and what reduction ratios are later computed for.
"""
from __future__ import annotations

import hashlib
from enum import Enum
from typing import Optional

import numpy as np

from monoeval.dataset import Dataset

_GROUP_NAME_MULTIPLIER: int = 15_485_863
_CROSS_VALIDATION_MULTIPLIER: int = 472_882_027
_FOLD_MULTIPLIER: int = 982_451_653
_SEED_MODULUS: int = 2**64
_MAX_DERIVED_SEED: int = 2**63 - 1


class BalancingStrategy(Enum):
    # larger classes are under-sampled to the size of the smallest one
    UNDERSAMPLING = "undersampling"
    # smaller classes are over-sampled to the size of the largest one
    OVERSAMPLING = "oversampling"
    # every class gets total // n_classes objects, so the remainder is dropped
    UNDER_AND_OVERSAMPLING = "under_and_oversampling"


class BalancingDataProcessor:
    """Selects rows of a dataset so that every decision class contributes the
    same number of rows.

    Classes larger than the target size are sampled without replacement. Smaller
    classes take all their rows as many times as they fit in the target size and
    the remainder is drawn without replacement, so only over-sampling repeats
    rows.
    """

    def __init__(self, balancing_strategy: BalancingStrategy, seed: int):
        if not isinstance(balancing_strategy, BalancingStrategy):
            raise ValueError(
                "Not supported value of decision class distribution balancing "
                f"strategy: {balancing_strategy}"
            )
        self.balancing_strategy: BalancingStrategy = balancing_strategy
        self.seed: int = seed
        self.random: np.random.Generator = np.random.default_rng(seed)

    def target_class_size(self, class_sizes: dict[int, int]) -> int:
        sizes: list[int] = list(class_sizes.values())
        if self.balancing_strategy == BalancingStrategy.UNDERSAMPLING:
            return min(sizes)
        if self.balancing_strategy == BalancingStrategy.OVERSAMPLING:
            return max(sizes)
        return sum(sizes) // len(sizes)

    def select_indices(self, labels: np.ndarray) -> np.ndarray:
        """Selects indices of balanced rows.

        Args:
            labels (np.ndarray): class of each row

        Returns:
            np.ndarray: sorted indices of selected rows (may repeat when
                over-sampling)
        """
        labels = np.asarray(labels)
        if labels.shape[0] == 0:
            return np.array([], dtype=int)
        classes, counts = np.unique(labels, return_counts=True)
        new_class_size: int = self.target_class_size(
            dict(zip(classes.tolist(), counts.tolist()))
        )

        selected: list[np.ndarray] = []
        for class_value, class_size in zip(classes, counts):
            class_indices: np.ndarray = np.where(labels == class_value)[0]
            if class_size < new_class_size:
                full_rounds: int = new_class_size // class_size
                drawn: np.ndarray = self._draw(
                    class_indices, new_class_size - full_rounds * class_size
                )
                selected.append(np.tile(class_indices, full_rounds))
                selected.append(drawn)
            elif class_size > new_class_size:
                selected.append(self._draw(class_indices, new_class_size))
            else:
                selected.append(class_indices)
        return np.sort(np.concatenate(selected)).astype(int)

    def process(self, dataset: Dataset) -> Dataset:
        return dataset.select(self.select_indices(dataset.labels))

    def _draw(self, indices: np.ndarray, n: int) -> np.ndarray:
        if n == 0:
            return np.array([], dtype=int)
        return self.random.choice(indices, size=n, replace=False)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.balancing_strategy.name})"


class BalancingDataProcessorProvider:
    """Provides fresh balancing processors, optionally with seeds derived from
    data group name and cross-validation selectors, so that every data group and
    fold is balanced reproducibly but differently.
    """

    def __init__(self, balancing_strategy: BalancingStrategy, basic_seed: int):
        self.balancing_strategy: BalancingStrategy = balancing_strategy
        self.basic_seed: int = basic_seed

    def provide(
        self,
        data_group_name: Optional[str] = None,
        cross_validation_selector: Optional[int] = None,
        fold_selector: Optional[int] = None,
    ) -> BalancingDataProcessor:
        if data_group_name is None:
            return BalancingDataProcessor(self.balancing_strategy, self.basic_seed)
        seed: int = self.basic_seed + convert(data_group_name) * _GROUP_NAME_MULTIPLIER
        if cross_validation_selector is not None:
            seed += cross_validation_selector * _CROSS_VALIDATION_MULTIPLIER
        if fold_selector is not None:
            seed += fold_selector * _FOLD_MULTIPLIER
        seed %= _SEED_MODULUS
        seed = int(np.random.default_rng(seed).integers(0, _MAX_DERIVED_SEED))
        return BalancingDataProcessor(self.balancing_strategy, seed)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.balancing_strategy.name})"


def convert(text: str) -> int:
    """Converts text to an unsigned 64-bit integer built from the first 8 bytes
    of its MD5 digest. Different texts are very unlikely (but not guaranteed) to
    give different results.
    """
    digest: bytes = hashlib.md5(text.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], byteorder="big", signed=False)
