import json
import math
from dataclasses import dataclass, field


def _jsonable(value):
    # JSON has no NaN or infinity; undefined metrics are written as null
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


@dataclass
class EvaluationReport:
    """Result of scoring one prediction set.

    ``fold_metrics[repeat][fold]`` holds the metrics of that cell;
    ``global_metrics`` maps each metric to its pooled value and the mean and
    stdev across cells. The confusion matrix is empty for regression.
    """

    task: str
    classes: list = field(default_factory=list)
    confusion_matrix: list = field(default_factory=list)
    global_metrics: dict = field(default_factory=dict)
    fold_metrics: list = field(default_factory=list)

    def to_dict(self):
        return _jsonable(
            {
                "task": self.task,
                "classes": list(self.classes),
                "confusion_matrix": self.confusion_matrix,
                "global_metrics": self.global_metrics,
                "fold_metrics": self.fold_metrics,
            }
        )

    def to_json(self, indent=None):
        return json.dumps(self.to_dict(), indent=indent)
