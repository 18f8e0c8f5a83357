"""
Scoring of externally generated cross-validation predictions.

The evaluation makes a single pass over the prediction table. Every record
is checked against the dataset bounds, counted for completeness and fed to
two accumulators: the global one and the one of its (repeat, fold) cell.
Only when the predictions cover the split plan exactly once are metrics
reported; any integrity problem aborts the run.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from functools import partial

import numpy as np
import pandas as pd

from .._errors import EvaluationError, RangeError, SchemaError, TaskError
from ..data import NOMINAL, NUMERIC, SplitPlan, load_table
from ._accumulator import PredictionAccumulator, Task
from ._confusion_matrix import ConfusionMatrix
from ._counter import PredictionCounter
from ._population import MetricCollector, combine
from ._report import EvaluationReport

logger = logging.getLogger(__name__)

# Accepted names per prediction column, preferred name first. The *_nr
# spellings are kept for prediction files written by older tools.
ROW_ID_COLUMNS = ("row_id",)
REPEAT_COLUMNS = ("repeat", "repeat_nr")
FOLD_COLUMNS = ("fold", "fold_nr")
PREDICTION_COLUMNS = ("prediction",)
CONFIDENCE_PREFIX = "confidence."


class Stage(str, Enum):
    INITIALIZING = "initializing"
    VALIDATING_SCHEMA = "validating schema"
    SINGLE_PASS = "single pass"
    COMPLETENESS_CHECK = "completeness check"
    AGGREGATING = "aggregating"
    REPORTING = "reporting"
    DONE = "done"
    FAILED = "failed"


def _enter(stage):
    logger.debug("Evaluation stage: %s", stage.value)
    return stage


@dataclass(frozen=True)
class PredictionColumns:
    """Prediction table column names, resolved once before the pass."""

    row_id: str
    repeat: str
    fold: str
    prediction: str
    confidences: tuple = ()

    @property
    def identifiers(self):
        return [self.repeat, self.fold, self.row_id]

    @classmethod
    def resolve(cls, predictions, classes=()):
        """Find the required columns, raising SchemaError on the first one absent.

        ``classes`` are the dataset's class labels; each needs a
        ``confidence.<label>`` column. Pass no classes for regression.
        """
        found = []
        for candidates in (ROW_ID_COLUMNS, REPEAT_COLUMNS, FOLD_COLUMNS, PREDICTION_COLUMNS):
            name = predictions.first_column(*candidates)
            if name is None:
                raise SchemaError(f"Predictions file lacks attribute {candidates[0]}")
            found.append(name)

        confidences = []
        for label in classes:
            name = CONFIDENCE_PREFIX + label
            if name not in predictions:
                raise SchemaError(f"Attribute {name} not found among predictions")
            confidences.append(name)
        return cls(*found, confidences=tuple(confidences))


def resolve_task(dataset, target):
    """Return the task and class labels of the ``target`` attribute."""
    if target not in dataset:
        raise SchemaError(f"Class attribute ({target}) not found")
    kind = dataset.types[target]
    if kind == NOMINAL:
        classes = dataset.labels(target)
        if not classes:
            raise TaskError(f"Class attribute ({target}) is nominal but declares no labels")
        return Task.CLASSIFICATION, classes
    if kind == NUMERIC:
        return Task.REGRESSION, ()
    raise TaskError(f"Class attribute ({target}) has type {kind}; expected nominal or numeric")


def _predicted_index(label, class_index):
    """Map a predicted value to a class index, or None if it names no class.

    Labels are matched by name first. Numeric predictions, as CSV files give
    for labels like ``{0,1}``, are matched by their integer spelling and
    otherwise taken as a class index.
    """
    if isinstance(label, str) or pd.isna(label):
        return class_index.get(label)
    if str(label) in class_index:
        return class_index[str(label)]
    value = float(label)
    if not value.is_integer():
        return None
    if str(int(value)) in class_index:
        return class_index[str(int(value))]
    if 0 <= value < len(class_index):
        return int(value)
    return None


def _target_values(dataset, target, classes):
    # class labels become float class indices so missing values stay NaN
    column = dataset.frame[target]
    if classes:
        column = column.map({label: index for index, label in enumerate(classes)})
    return column.to_numpy(dtype=float)


def evaluate_predictions(dataset, splits, predictions, target, accumulator_factory=None):
    """
    Score cross-validation predictions against a dataset and split plan.

    Parameters
    ----------
    dataset : cveval.data.Table
        The labeled dataset; rows are addressed by position.
    splits : cveval.data.SplitPlan or cveval.data.Table
        The split plan, or the split table to read it from.
    predictions : cveval.data.Table
        One record per held-out row and (repeat, fold).
    target : str
        Name of the target attribute in ``dataset``.
    accumulator_factory : callable, optional
        Zero-argument callable returning a fresh
        :class:`~cveval.evaluation.MetricAccumulator`. By default a
        :class:`~cveval.evaluation.PredictionAccumulator` with the dataset's
        prior is used.

    Returns
    -------
    EvaluationReport

    Raises
    ------
    SchemaError, TaskError, RangeError, CompletenessError
        On any integrity problem; no partial report is produced.
    """
    stage = _enter(Stage.INITIALIZING)
    try:
        plan = splits if isinstance(splits, SplitPlan) else SplitPlan.from_table(splits)
        task, classes = resolve_task(dataset, target)
        n_classes = len(classes)
        targets = _target_values(dataset, target, classes)
        logger.info("Evaluating %s on %s with %d classes", task.value, target, n_classes)
        if accumulator_factory is None:
            prior = PredictionAccumulator.from_targets(targets, task, n_classes).prior
            accumulator_factory = partial(PredictionAccumulator, prior, classes)

        stage = _enter(Stage.VALIDATING_SCHEMA)
        columns = PredictionColumns.resolve(predictions, classes)
        frame = predictions.frame
        identifiers = frame[columns.identifiers].to_numpy(dtype=float)
        if np.isnan(identifiers).any():
            raise SchemaError("Predictions file has missing values in row_id, repeat or fold")
        if (identifiers != np.floor(identifiers)).any():
            raise SchemaError("Predictions file has non-integer values in row_id, repeat or fold")
        identifiers = identifiers.astype(np.int64)
        predicted = frame[columns.prediction].to_numpy()
        confidences = frame[list(columns.confidences)].to_numpy(dtype=float) if classes else None
        class_index = {label: index for index, label in enumerate(classes)}

        stage = _enter(Stage.SINGLE_PASS)
        counter = PredictionCounter(plan.expected)
        matrix = ConfusionMatrix(n_classes if task is Task.CLASSIFICATION else 0)
        overall = accumulator_factory()
        cells = {cell: accumulator_factory() for cell in plan.cells()}

        for i, (repeat, fold, row_id) in enumerate(identifiers):
            repeat, fold, row_id = int(repeat), int(fold), int(row_id)
            if not 0 <= row_id < dataset.n_rows:
                raise RangeError(
                    f"Making a prediction for row_id {row_id} (0-based) while dataset "
                    f"has only {dataset.n_rows} instances"
                )
            counter.record(repeat, fold, row_id)
            cell = cells.get((repeat, fold))
            if cell is None:
                # cells outside the plan get an accumulator too; completeness fails on them later
                cell = cells[(repeat, fold)] = accumulator_factory()
            actual = targets[row_id]

            if task is Task.CLASSIFICATION:
                if np.isnan(confidences[i]).any():
                    raise SchemaError(
                        f"Prediction for (repeat={repeat}, fold={fold}, row_id={row_id}) has missing confidences"
                    )
                overall.observe_classification(confidences[i], actual)
                cell.observe_classification(confidences[i], actual)
                if np.isnan(actual):
                    logger.debug("Row %d has no class value; counted but not scored", row_id)
                    continue
                predicted_index = _predicted_index(predicted[i], class_index)
                if predicted_index is None:
                    raise SchemaError(
                        f"Predicted label {predicted[i]!r} for row_id {row_id} is not a class of {target}"
                    )
                matrix.add(int(actual), predicted_index)
            else:
                overall.observe_regression(predicted[i], actual)
                cell.observe_regression(predicted[i], actual)

        stage = _enter(Stage.COMPLETENESS_CHECK)
        counter.check()

        stage = _enter(Stage.AGGREGATING)
        collector = MetricCollector()
        fold_metrics = []
        for repeat in range(plan.n_repeats):
            per_fold = []
            for fold in range(plan.n_folds):
                snapshot = cells[(repeat, fold)].snapshot(n_classes, task)
                collector.add(snapshot)
                per_fold.append(dict(snapshot))
            fold_metrics.append(per_fold)
        global_metrics = combine(overall.snapshot(n_classes, task), collector.statistics())

        stage = _enter(Stage.REPORTING)
        report = EvaluationReport(
            task=task.value,
            classes=list(classes),
            confusion_matrix=matrix.to_list(),
            global_metrics=global_metrics,
            fold_metrics=fold_metrics,
        )
    except EvaluationError as exc:
        logger.error("Evaluation failed during %s: %s", stage.value, exc)
        _enter(Stage.FAILED)
        raise

    _enter(Stage.DONE)
    logger.info(
        "Evaluated %d predictions over %d repeats x %d folds",
        len(identifiers),
        plan.n_repeats,
        plan.n_folds,
    )
    return report


def evaluate_files(dataset_path, splits_path, predictions_path, target):
    """Load the three input tables and score the predictions.

    Each location may be a local path or URL, ARFF or CSV; see
    :func:`cveval.data.load_table`.
    """
    dataset = load_table(dataset_path)
    splits = load_table(splits_path)
    predictions = load_table(predictions_path)
    return evaluate_predictions(dataset, splits, predictions, target)
