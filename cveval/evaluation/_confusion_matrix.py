import numpy as np


class ConfusionMatrix:
    """Raw counts of actual (rows) vs predicted (columns) class indices.

    A matrix of size 0 is used for regression tasks and accepts no counts.
    """

    def __init__(self, n_classes):
        self.n_classes = n_classes
        self.counts = np.zeros((n_classes, n_classes), dtype=np.int64)

    def add(self, actual, predicted):
        for index in (actual, predicted):
            if not 0 <= index < self.n_classes:
                raise IndexError(f"Class index {index} outside [0, {self.n_classes})")
        self.counts[actual, predicted] += 1

    @property
    def total(self):
        return int(self.counts.sum())

    def to_list(self):
        return self.counts.tolist()
