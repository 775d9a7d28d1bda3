"""Dominance relation between instances and the monotonicity-violation index.

Instance x dominates instance y when every component of x is greater or equal to
the corresponding component of y and at least one is strictly greater. A pair of
instances violates monotonicity when one dominates the other but gets a lower
predicted class.

Counting violations compares every pair of instances, which costs O(m^2 * n) for
m instances with n attributes. It is the most expensive step of an evaluation
run. The scan can be split between joblib workers without changing the result.
"""
from enum import Enum

import numpy as np
from joblib import delayed
from joblib import effective_n_jobs
from joblib import Parallel


class Dominance(Enum):
    EQUAL = "equal"
    DOMINATED = "dominated"
    DOMINATES = "dominates"
    INCOMPARABLE = "incomparable"

    def reversed(self) -> "Dominance":
        if self == Dominance.DOMINATED:
            return Dominance.DOMINATES
        if self == Dominance.DOMINATES:
            return Dominance.DOMINATED
        return self


def compare(x: np.ndarray, y: np.ndarray) -> Dominance:
    """Determines relation between two feature vectors under component-wise order.

    Args:
        x (np.ndarray): first vector
        y (np.ndarray): second vector of the same length

    Returns:
        Dominance: EQUAL when vectors are identical, DOMINATED when x <= y with
            at least one strict inequality, DOMINATES when x >= y with at least
            one strict inequality, INCOMPARABLE otherwise.
    """
    if len(x) != len(y):
        raise ValueError(
            f"Cannot compare vectors of different lengths: {len(x)} and {len(y)}"
        )
    less_count: int = 0
    equal_count: int = 0
    greater_count: int = 0
    for x_value, y_value in zip(x, y):
        if x_value < y_value:
            less_count += 1
        elif x_value == y_value:
            equal_count += 1
        else:
            greater_count += 1
        if less_count > 0 and greater_count > 0:
            return Dominance.INCOMPARABLE

    n: int = len(x)
    if equal_count == n:
        return Dominance.EQUAL
    if less_count + equal_count == n:
        return Dominance.DOMINATED
    if greater_count + equal_count == n:
        return Dominance.DOMINATES
    return Dominance.INCOMPARABLE


def is_violation(dominance: Dominance, prediction_x: int, prediction_y: int) -> bool:
    if dominance == Dominance.DOMINATED:
        return prediction_x > prediction_y
    if dominance == Dominance.DOMINATES:
        return prediction_x < prediction_y
    return False


def count_violations(
    X: np.ndarray, predictions: np.ndarray, start: int = 0, stop: int = None
) -> int:
    """Counts pairs (i, j), i < j, violating monotonicity for rows i in
    [start, stop).
    """
    X = np.asarray(X, dtype=float)
    predictions = np.asarray(predictions)
    if stop is None:
        stop = X.shape[0]
    violations: int = 0
    for i in range(start, stop):
        others: np.ndarray = X[i + 1:]
        if others.shape[0] == 0:
            break
        any_less: np.ndarray = np.any(X[i] < others, axis=1)
        any_greater: np.ndarray = np.any(X[i] > others, axis=1)
        dominated: np.ndarray = any_less & ~any_greater
        dominates: np.ndarray = any_greater & ~any_less
        diff: np.ndarray = predictions[i] - predictions[i + 1:]
        violations += int(np.count_nonzero(dominated & (diff > 0)))
        violations += int(np.count_nonzero(dominates & (diff < 0)))
    return violations


def _chunk_bounds(n_rows: int, n_chunks: int) -> list[tuple[int, int]]:
    # row i is compared with n_rows - i - 1 others, split so chunks get similar work
    work: np.ndarray = np.cumsum(np.arange(n_rows - 1, -1, -1))
    total: int = int(work[-1])
    targets = [total * k / n_chunks for k in range(1, n_chunks)]
    cuts: list[int] = [0]
    cuts += [int(np.searchsorted(work, t)) + 1 for t in targets]
    cuts.append(n_rows)
    cuts = sorted(set(min(c, n_rows) for c in cuts))
    return [(a, b) for a, b in zip(cuts, cuts[1:]) if b > a]


def monotonicity_index(
    X: np.ndarray, predictions: np.ndarray, n_jobs: int = 1
) -> float:
    """Fraction of ordered pairs of instances violating monotonicity.

    Equal and incomparable pairs never count as violations. The number of
    violating unordered pairs is doubled and divided by m^2 - m, so the result
    lies in [0, 1] where 0 means predictions are perfectly monotonic.

    Args:
        X (np.ndarray): normalized data matrix
        predictions (np.ndarray): predicted class indices, one per row
        n_jobs (int, optional): number of joblib workers used for the pairwise
            scan. Defaults to 1.

    Returns:
        float: monotonicity-violation index, 0.0 for less than two instances
    """
    X = np.asarray(X, dtype=float)
    predictions = np.asarray(predictions)
    if X.shape[0] != predictions.shape[0]:
        raise ValueError(
            f"X has {X.shape[0]} rows but {predictions.shape[0]} predictions given"
        )
    if n_jobs == 0:
        raise ValueError("n_jobs == 0 has no meaning, use a positive number or -1")
    m: int = X.shape[0]
    if m < 2:
        return 0.0
    if n_jobs == 1:
        violations: int = count_violations(X, predictions)
    else:
        workers: int = effective_n_jobs(n_jobs)
        bounds = _chunk_bounds(m, workers * 4)
        counts: list[int] = Parallel(n_jobs=n_jobs, prefer="processes")(
            delayed(count_violations)(X, predictions, start, stop)
            for start, stop in bounds
        )
        violations = sum(counts)
    return 2.0 * violations / (m * m - m)


def euclidean_distance(x: np.ndarray, y: np.ndarray) -> float:
    return float(np.sqrt(np.sum(np.square(np.asarray(x) - np.asarray(y)))))


def manhattan_distance(x: np.ndarray, y: np.ndarray) -> float:
    return float(np.sum(np.abs(np.asarray(x) - np.asarray(y))))


def same(x: np.ndarray, y: np.ndarray) -> bool:
    return bool(np.array_equal(np.asarray(x), np.asarray(y)))
