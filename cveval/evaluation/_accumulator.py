"""
Metric accumulators for cross-validated predictions.

An accumulator ingests one prediction at a time and can report the metrics
of everything it has seen so far. The evaluation keeps one accumulator for
the whole prediction set and one per (repeat, fold) cell, so metrics like
log-loss or precision are always derived from raw observations instead of
being averaged from other metric values.
"""

from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score,
    confusion_matrix,
    mean_absolute_error,
    mean_squared_error,
    precision_recall_fscore_support,
    roc_auc_score,
)

from .._errors import TaskError

# probabilities are clipped to [EPS, 1 - EPS] before taking logarithms
EPS = 1e-15

CLASSIFICATION_METRICS = (
    "number_of_instances",
    "predictive_accuracy",
    "kappa",
    "mean_absolute_error",
    "root_mean_squared_error",
    "mean_prior_absolute_error",
    "root_mean_prior_squared_error",
    "relative_absolute_error",
    "root_relative_squared_error",
    "prior_entropy",
    "kb_relative_information_score",
    "log_loss",
    "precision",
    "recall",
    "f_measure",
    "area_under_roc_curve",
)

# also reported per class as "<metric>.<label>"
PER_CLASS_METRICS = ("precision", "recall", "f_measure", "area_under_roc_curve")

REGRESSION_METRICS = (
    "number_of_instances",
    "mean_absolute_error",
    "root_mean_squared_error",
    "mean_prior_absolute_error",
    "root_mean_prior_squared_error",
    "relative_absolute_error",
    "root_relative_squared_error",
    "correlation_coefficient",
)


class Task(str, Enum):
    CLASSIFICATION = "classification"
    REGRESSION = "regression"


def _ratio(numerator, denominator):
    return float(numerator / denominator) if denominator > 0 else float("nan")


def _empty(names):
    metrics = dict.fromkeys(names, float("nan"))
    metrics["number_of_instances"] = 0.0
    return metrics


def classification_metrics(confidences, actual, prior, classes=None):
    """
    Compute classification metrics from soft predictions.

    The predicted class of an instance is the arg-max of its confidence
    vector (the first class wins ties).

    Parameters
    ----------
    confidences : np.ndarray
        Shape (n_instances, n_classes); confidence per class in dataset order.
    actual : np.ndarray
        Shape (n_instances,); true class indices.
    prior : np.ndarray
        Shape (n_classes,); class distribution used as the baseline predictor
        for the relative and information metrics.
    classes : sequence of str, optional
        Class labels used in the per-class metric names; class indices when
        omitted.

    Returns
    -------
    dict
        Metric name -> float: every name in CLASSIFICATION_METRICS plus
        "<metric>.<label>" for each name in PER_CLASS_METRICS.
    """
    n_instances, n_classes = confidences.shape
    class_names = [str(label) for label in (classes if classes is not None else range(n_classes))]
    if n_instances == 0:
        metrics = _empty(CLASSIFICATION_METRICS)
        for name in PER_CLASS_METRICS:
            metrics.update((f"{name}.{label}", float("nan")) for label in class_names)
        return metrics

    metrics = {"number_of_instances": float(n_instances)}
    predicted = np.argmax(confidences, axis=1)
    labels = np.arange(n_classes)

    # ===== 1. Accuracy and Cohen's kappa =====
    # Kappa compares observed agreement with the agreement expected from the
    # marginals alone. If chance agreement is already perfect kappa is 1.
    metrics["predictive_accuracy"] = float(accuracy_score(actual, predicted))
    counts = confusion_matrix(actual, predicted, labels=labels)
    observed = np.trace(counts) / n_instances
    chance = np.sum(counts.sum(axis=0) * counts.sum(axis=1)) / n_instances**2
    metrics["kappa"] = float((observed - chance) / (1 - chance)) if chance < 1 else 1.0

    # ===== 2. Errors of the confidence vectors =====
    # Each confidence vector is compared with the one-hot encoding of the
    # true class; errors are averaged over instances and classes. The prior
    # errors are what always predicting the prior distribution would score.
    onehot = np.eye(n_classes)[actual]
    mae = np.mean(np.abs(confidences - onehot))
    rmse = np.sqrt(np.mean((confidences - onehot) ** 2))
    prior_mae = np.mean(np.abs(prior[np.newaxis, :] - onehot))
    prior_rmse = np.sqrt(np.mean((prior[np.newaxis, :] - onehot) ** 2))
    metrics["mean_absolute_error"] = float(mae)
    metrics["root_mean_squared_error"] = float(rmse)
    metrics["mean_prior_absolute_error"] = float(prior_mae)
    metrics["root_mean_prior_squared_error"] = float(prior_rmse)
    metrics["relative_absolute_error"] = _ratio(mae, prior_mae)
    metrics["root_relative_squared_error"] = _ratio(rmse, prior_rmse)

    # ===== 3. Information scores =====
    # Kononenko-Bratko information: a prediction earns bits when it gives
    # the true class more probability than the prior did, and loses bits
    # otherwise. It is reported relative to the prior entropy.
    p_true = np.clip(confidences[np.arange(n_instances), actual], EPS, 1 - EPS)
    p_prior = np.clip(prior[actual], EPS, 1 - EPS)
    prior_entropy = -np.log2(p_prior)
    kb_info = np.where(
        p_true >= p_prior,
        np.log2(p_true) - np.log2(p_prior),
        np.log2(1 - p_prior) - np.log2(1 - p_true),
    )
    metrics["prior_entropy"] = float(np.mean(prior_entropy))
    metrics["kb_relative_information_score"] = _ratio(np.sum(kb_info), np.sum(prior_entropy))
    metrics["log_loss"] = float(-np.mean(np.log(p_true)))

    # ===== 4. Precision, recall, F-measure and AUC =====
    # Each is reported per class, keyed "<metric>.<label>", and as an average
    # weighted by how often each class actually occurs. AUC is undefined for
    # a class that is always (or never) the true class in this set of
    # instances; such classes get NaN and are left out of the average.
    precision, recall, f_measure, _ = precision_recall_fscore_support(
        actual, predicted, labels=labels, average=None, zero_division=0
    )
    support = np.bincount(actual, minlength=n_classes)
    aucs = np.full(n_classes, np.nan)
    for label in labels:
        if 0 < support[label] < n_instances:
            aucs[label] = roc_auc_score(actual == label, confidences[:, label])

    per_class = {
        "precision": precision,
        "recall": recall,
        "f_measure": f_measure,
        "area_under_roc_curve": aucs,
    }
    for name, values in per_class.items():
        defined = ~np.isnan(values)
        if defined.any():
            metrics[name] = float(np.average(values[defined], weights=support[defined]))
        else:
            metrics[name] = float("nan")
        for label, value in zip(class_names, values):
            metrics[f"{name}.{label}"] = float(value)

    return metrics


def regression_metrics(predicted, actual, prior):
    """
    Compute regression metrics.

    Parameters
    ----------
    predicted : np.ndarray
        Predicted values.
    actual : np.ndarray
        True target values (same shape as predicted).
    prior : float
        Baseline prediction, the mean target of the dataset.

    Returns
    -------
    dict
        Metric name -> float, one entry per name in REGRESSION_METRICS.
    """
    n_instances = len(actual)
    if n_instances == 0:
        return _empty(REGRESSION_METRICS)

    baseline = np.full_like(actual, prior, dtype=float)
    mae = mean_absolute_error(actual, predicted)
    rmse = np.sqrt(mean_squared_error(actual, predicted))
    prior_mae = mean_absolute_error(actual, baseline)
    prior_rmse = np.sqrt(mean_squared_error(actual, baseline))

    # Pearson correlation is undefined when either side is constant
    if n_instances > 1 and np.std(predicted) > 0 and np.std(actual) > 0:
        correlation = float(np.corrcoef(predicted, actual)[0, 1])
    else:
        correlation = float("nan")

    return {
        "number_of_instances": float(n_instances),
        "mean_absolute_error": float(mae),
        "root_mean_squared_error": float(rmse),
        "mean_prior_absolute_error": float(prior_mae),
        "root_mean_prior_squared_error": float(prior_rmse),
        "relative_absolute_error": _ratio(mae, prior_mae),
        "root_relative_squared_error": _ratio(rmse, prior_rmse),
        "correlation_coefficient": correlation,
    }


class MetricAccumulator(ABC):
    """Capability interface the evaluation driver scores predictions through."""

    @abstractmethod
    def observe_classification(self, confidences, actual):
        """Record one soft classification against the true class index."""

    @abstractmethod
    def observe_regression(self, predicted, actual):
        """Record one predicted value against the true target value."""

    @abstractmethod
    def snapshot(self, n_classes, task):
        """Return an immutable mapping of metric name -> value."""

    @property
    @abstractmethod
    def n_observations(self):
        """Number of predictions recorded so far."""


class PredictionAccumulator(MetricAccumulator):
    """Keeps raw observations and computes metrics with numpy and sklearn.

    Observations whose true value is missing are not recorded.
    """

    def __init__(self, prior, classes=None):
        self.prior = np.asarray(prior, dtype=float)
        self.classes = None if classes is None else tuple(classes)
        self._confidences = []
        self._actual_classes = []
        self._predicted = []
        self._values = []

    @classmethod
    def from_targets(cls, targets, task, n_classes=0, classes=None):
        """Build an accumulator whose prior comes from the dataset's targets.

        ``targets`` holds the class index (classification) or value
        (regression) of every dataset row, NaN where missing.

        Classification priors are class frequencies with one extra count per
        class, so no class has zero prior probability. The regression prior
        is the mean target value.
        """
        targets = pd.Series(targets, dtype=float).dropna().to_numpy()
        if task is Task.CLASSIFICATION:
            counts = np.bincount(targets.astype(int), minlength=n_classes) + 1.0
            return cls(counts / counts.sum(), classes)
        if task is Task.REGRESSION:
            return cls(targets.mean() if len(targets) else 0.0)
        raise TaskError(f"Task not defined: {task!r}")

    @property
    def n_observations(self):
        return len(self._actual_classes) + len(self._values)

    def observe_classification(self, confidences, actual):
        if pd.isna(actual):
            return
        self._confidences.append(np.asarray(confidences, dtype=float))
        self._actual_classes.append(int(actual))

    def observe_regression(self, predicted, actual):
        if pd.isna(actual):
            return
        self._predicted.append(float(predicted))
        self._values.append(float(actual))

    def snapshot(self, n_classes, task):
        if task is Task.CLASSIFICATION:
            confidences = np.array(self._confidences, dtype=float).reshape(-1, n_classes)
            metrics = classification_metrics(
                confidences, np.array(self._actual_classes, dtype=int), self.prior, self.classes
            )
        elif task is Task.REGRESSION:
            metrics = regression_metrics(
                np.array(self._predicted, dtype=float), np.array(self._values, dtype=float), float(self.prior)
            )
        else:
            raise TaskError(f"Task not defined: {task!r}")
        return MappingProxyType(metrics)
