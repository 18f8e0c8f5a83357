from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class PopulationStatistics:
    """Mean and spread of one metric across the folds of a run."""

    mean: float
    stdev: float
    count: int


class MetricCollector:
    """Collects per-fold metric snapshots and summarises them.

    The spread is the population standard deviation (ddof=0), so a run with
    a single fold reports a spread of 0 rather than NaN. NaN fold values
    make the statistics of that metric NaN.
    """

    def __init__(self):
        self.snapshots = []

    def add(self, snapshot):
        self.snapshots.append(dict(snapshot))

    def statistics(self):
        if not self.snapshots:
            return {}
        # only metrics every fold reported, in the order of the first fold
        names = [name for name in self.snapshots[0] if all(name in snap for snap in self.snapshots[1:])]
        statistics = {}
        for name in names:
            values = np.array([snap[name] for snap in self.snapshots], dtype=float)
            statistics[name] = PopulationStatistics(
                mean=float(np.mean(values)), stdev=float(np.std(values)), count=len(values)
            )
        return statistics


def combine(global_snapshot, statistics):
    """Pair each global metric value with its mean and stdev across folds.

    Returns
    -------
    dict
        Metric name -> ``{"value": ..., "mean": ..., "stdev": ...}``; mean and
        stdev are None for metrics that not every fold reported.
    """
    combined = {}
    for name, value in global_snapshot.items():
        population = statistics.get(name)
        combined[name] = {
            "value": value,
            "mean": population.mean if population else None,
            "stdev": population.stdev if population else None,
        }
    return combined
