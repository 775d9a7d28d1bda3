import os
import pathlib

import numpy as np
import pandas as pd

from monoeval import Predictor

dir_path: pathlib.Path = pathlib.Path(os.path.dirname(os.path.realpath(__file__)))

ORDINAL_COLUMNS: dict[str, list[str]] = {
    "quality": ["low", "medium", "high"],
    "class": ["bad", "acceptable", "good"],
}


def read_dataset(
    problem_type: str, dataset_name: str
) -> tuple[pd.DataFrame, pd.DataFrame]:
    base_path: pathlib.Path = dir_path / "datasets" / problem_type / dataset_name
    df_train: pd.DataFrame = pd.read_csv(base_path / "train.csv")
    df_test: pd.DataFrame = pd.read_csv(base_path / "test.csv")

    # ordinal columns keep the order of their values, not the alphabetical one
    for df in (df_train, df_test):
        for column, categories in ORDINAL_COLUMNS.items():
            if column in df.columns:
                df[column] = pd.Categorical(
                    df[column], categories=categories, ordered=True
                )
    return df_train, df_test


class SumPredictor(Predictor):
    """Monotonic predictor assigning classes by the sum of normalized values."""

    def __init__(self, n_classes: int, n_features: int):
        self.n_classes: int = n_classes
        self.n_features: int = n_features

    def predict(self, example: np.ndarray) -> int:
        score: float = float(np.clip(np.sum(example) / self.n_features, 0.0, 1.0))
        return min(self.n_classes - 1, int(score * self.n_classes))

    def describe_model(self) -> tuple[int, str]:
        return 1, "IF sum(x) THEN class"
