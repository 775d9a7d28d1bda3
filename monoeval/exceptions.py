class DataFormatError(ValueError):
    """Raised when a dataset does not describe a classification problem the
    evaluation framework can handle (missing or multiple decision attributes,
    real valued decision attribute, mismatched input schema).
    """
