import pytest

from monoeval._params import adjust_params_on_dataset
from monoeval._params import DEFAULT_PARAMS_VALUES
from monoeval._params import resolve_params


def test_resolve_params():
    assert resolve_params() == DEFAULT_PARAMS_VALUES
    params = resolve_params(n_jobs=4, verbose=True)
    assert params["n_jobs"] == 4
    assert params["verbose"] is True
    assert params["parallel_min_instances"] == 2000
    # defaults are not modified
    assert DEFAULT_PARAMS_VALUES["n_jobs"] == 1

    with pytest.raises(ValueError, match="jobs"):
        resolve_params(jobs=4)


def test_small_datasets_are_scanned_sequentially():
    params = resolve_params(n_jobs=4, parallel_min_instances=100)
    assert adjust_params_on_dataset(params, 99)["n_jobs"] == 1
    assert adjust_params_on_dataset(params, 100)["n_jobs"] == 4
    assert params["n_jobs"] == 4


def test_zero_jobs_are_rejected():
    with pytest.raises(ValueError, match="n_jobs"):
        resolve_params(n_jobs=0)
    assert resolve_params(n_jobs=-1)["n_jobs"] == -1
