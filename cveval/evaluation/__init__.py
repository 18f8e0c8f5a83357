"""Evaluation subpackage exports.

Provides a clean import surface:

	from cveval.evaluation import evaluate_predictions

The driver wires the completeness counter, confusion matrix, accumulators
and population statistics together; the pieces are exported for reuse.
"""

from ._accumulator import (
    CLASSIFICATION_METRICS,
    PER_CLASS_METRICS,
    REGRESSION_METRICS,
    MetricAccumulator,
    PredictionAccumulator,
    Task,
    classification_metrics,
    regression_metrics,
)
from ._confusion_matrix import ConfusionMatrix
from ._counter import PredictionCounter
from ._evaluate_predictions import (
    PredictionColumns,
    Stage,
    evaluate_files,
    evaluate_predictions,
    resolve_task,
)
from ._population import MetricCollector, PopulationStatistics, combine
from ._report import EvaluationReport

__all__ = [
    "CLASSIFICATION_METRICS",
    "PER_CLASS_METRICS",
    "REGRESSION_METRICS",
    "ConfusionMatrix",
    "EvaluationReport",
    "MetricAccumulator",
    "MetricCollector",
    "PopulationStatistics",
    "PredictionAccumulator",
    "PredictionColumns",
    "PredictionCounter",
    "Stage",
    "Task",
    "classification_metrics",
    "combine",
    "evaluate_files",
    "evaluate_predictions",
    "regression_metrics",
    "resolve_task",
]
