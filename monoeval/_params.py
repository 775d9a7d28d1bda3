from typing import TypedDict


class EvaluationParams(TypedDict):
    n_jobs: int
    parallel_min_instances: int
    verbose: bool


DEFAULT_PARAMS_VALUES: EvaluationParams = EvaluationParams(
    n_jobs=1,
    parallel_min_instances=2000,
    verbose=False,
)


def resolve_params(**params) -> EvaluationParams:
    unknown: set[str] = set(params).difference(DEFAULT_PARAMS_VALUES)
    if unknown:
        raise ValueError(f"Unknown evaluation parameters: {sorted(unknown)}")
    if params.get("n_jobs") == 0:
        raise ValueError("n_jobs == 0 has no meaning, use a positive number or -1")
    resolved: EvaluationParams = DEFAULT_PARAMS_VALUES.copy()
    resolved.update(params)
    return resolved


def adjust_params_on_dataset(
    params: EvaluationParams,
    n_instances: int,
) -> EvaluationParams:
    new_params: EvaluationParams = params.copy()
    # spawning workers costs more than scanning small datasets
    if n_instances < params["parallel_min_instances"]:
        new_params["n_jobs"] = 1
    return new_params
