"""Fatal error kinds raised while scoring a prediction set.

None of these are recovered locally: a run that hits any of them produces
no report at all.
"""


class EvaluationError(RuntimeError):
    """Base class for every data-integrity failure of an evaluation run."""


class SchemaError(EvaluationError):
    """A required attribute or column is absent, or a label is unknown."""


class RangeError(EvaluationError, IndexError):
    """A prediction references a row outside the dataset."""


class TaskError(EvaluationError):
    """The target attribute is neither nominal nor numeric."""


class CompletenessError(EvaluationError):
    """Predictions do not cover the split plan exactly once.

    Parameters
    ----------
    message : str
        Human readable diagnostic.
    missing, duplicated, unexpected : list of tuple
        ``(repeat, fold, row_id)`` keys in each failure category.
    """

    def __init__(self, message, missing=(), duplicated=(), unexpected=()):
        super().__init__(message)
        self.missing = list(missing)
        self.duplicated = list(duplicated)
        self.unexpected = list(unexpected)
