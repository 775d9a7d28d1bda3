import pandas as pd


def is_nominal_dtype(dtype) -> bool:
    """Checks if column of given dtype holds nominal values

    Args:
        dtype: pandas column dtype

    Returns:
        bool: True for object, categorical, boolean and string columns
    """
    return (
        dtype == "object"
        or isinstance(dtype, pd.CategoricalDtype)
        or pd.api.types.is_bool_dtype(dtype)
        or pd.api.types.is_string_dtype(dtype)
    )


def nominal_domain(column: pd.Series) -> tuple:
    """Ordered domain of a nominal column. Categorical columns keep the order of
    their categories, other columns use sorted unique non-missing values.
    """
    if isinstance(column.dtype, pd.CategoricalDtype):
        return tuple(column.cat.categories.tolist())
    return tuple(sorted(column.dropna().unique().tolist()))
