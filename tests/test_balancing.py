import numpy as np
import pandas as pd
import pytest

from monoeval import TabularDataset
from monoeval.balancing import BalancingDataProcessor
from monoeval.balancing import BalancingDataProcessorProvider
from monoeval.balancing import BalancingStrategy
from monoeval.balancing import convert

TWO_CLASSES: np.ndarray = np.array([0, 0, 0, 1, 1, 1, 1, 1, 1, 1])
THREE_CLASSES: np.ndarray = np.array([0] * 3 + [1] * 5 + [2] * 8)


@pytest.mark.parametrize(
    "strategy, seed, labels, expected_class_size",
    [
        (BalancingStrategy.UNDERSAMPLING, 7, TWO_CLASSES, 3),
        (BalancingStrategy.OVERSAMPLING, 3, TWO_CLASSES, 7),
        (BalancingStrategy.UNDER_AND_OVERSAMPLING, 5, TWO_CLASSES, 5),
        (BalancingStrategy.UNDERSAMPLING, 17, THREE_CLASSES, 3),
        (BalancingStrategy.OVERSAMPLING, 11, THREE_CLASSES, 8),
        (BalancingStrategy.UNDER_AND_OVERSAMPLING, 13, THREE_CLASSES, 5),
    ],
)
def test_select_indices(
    strategy: BalancingStrategy,
    seed: int,
    labels: np.ndarray,
    expected_class_size: int,
):
    processor = BalancingDataProcessor(strategy, seed)
    selected = processor.select_indices(labels)
    n_classes = len(np.unique(labels))

    assert selected.shape[0] == expected_class_size * n_classes
    assert np.all(np.diff(selected) >= 0)
    assert np.bincount(labels[selected]).tolist() == [expected_class_size] * n_classes


def test_undersampling_does_not_repeat_rows():
    processor = BalancingDataProcessor(BalancingStrategy.UNDERSAMPLING, 7)
    selected = processor.select_indices(TWO_CLASSES)
    assert len(set(selected.tolist())) == selected.shape[0]
    # minority class is copied as a whole
    assert set(selected.tolist()).issuperset({0, 1, 2})


def test_oversampling_takes_full_rounds_of_small_classes():
    processor = BalancingDataProcessor(BalancingStrategy.OVERSAMPLING, 3)
    selected = processor.select_indices(TWO_CLASSES).tolist()
    for index in (0, 1, 2):
        assert selected.count(index) in (2, 3)
    assert sorted(set(selected) - {0, 1, 2}) == list(range(3, 10))


def test_selection_is_reproducible():
    first = BalancingDataProcessor(BalancingStrategy.UNDERSAMPLING, 17)
    second = BalancingDataProcessor(BalancingStrategy.UNDERSAMPLING, 17)
    assert np.array_equal(
        first.select_indices(THREE_CLASSES), second.select_indices(THREE_CLASSES)
    )


def test_process_dataset():
    df = pd.DataFrame(
        {"a": np.linspace(0.0, 1.0, 10), "class": ["x"] * 3 + ["y"] * 7}
    )
    dataset = TabularDataset.from_dataframe(df, "class", name="two_classes")
    processor = BalancingDataProcessor(BalancingStrategy.OVERSAMPLING, 1)
    balanced = processor.process(dataset)

    assert balanced.n_instances == 14
    assert balanced.input_attributes == dataset.input_attributes
    assert np.bincount(balanced.labels).tolist() == [7, 7]


def test_unsupported_strategy():
    with pytest.raises(ValueError):
        BalancingDataProcessor("undersampling", 0)


def test_convert():
    assert convert("abcdef") == int("E80B5017098950FC", 16)


def test_provider():
    provider = BalancingDataProcessorProvider(BalancingStrategy.UNDERSAMPLING, 0)

    assert provider.provide().seed == 0
    assert provider.provide("data").seed == provider.provide("data").seed
    assert provider.provide("data").seed != provider.provide("other").seed
    assert provider.provide("data", 0, 1).seed != provider.provide("data", 0, 2).seed
    assert provider.provide("data").balancing_strategy == BalancingStrategy.UNDERSAMPLING
