"""Score cross-validation predictions against a dataset and its split plan.

    from cveval import evaluate_files
    report = evaluate_files("data.arff", "splits.arff", "predictions.arff", "class")
    print(report.to_json())
"""

from ._errors import (
    CompletenessError,
    EvaluationError,
    RangeError,
    SchemaError,
    TaskError,
)
from .evaluation import EvaluationReport, evaluate_files, evaluate_predictions

__all__ = [
    "CompletenessError",
    "EvaluationError",
    "EvaluationReport",
    "RangeError",
    "SchemaError",
    "TaskError",
    "evaluate_files",
    "evaluate_predictions",
]
