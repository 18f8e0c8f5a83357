from collections import Counter

from .._errors import CompletenessError

# offending keys listed per category in an error message
MAX_LISTED = 10


def _format_keys(keys):
    shown = ", ".join(f"(repeat={r}, fold={f}, row_id={i})" for r, f, i in keys[:MAX_LISTED])
    if len(keys) > MAX_LISTED:
        shown += f", ... ({len(keys) - MAX_LISTED} more)"
    return shown


class PredictionCounter:
    """Tracks how often each (repeat, fold, row_id) key has been predicted.

    Recording never fails; gaps, duplicates and keys outside the split plan
    are only reported by :meth:`check`.
    """

    def __init__(self, expected):
        self.expected = frozenset(expected)
        self.counts = Counter()

    def record(self, repeat, fold, row_id):
        self.counts[(repeat, fold, row_id)] += 1

    def missing(self):
        return sorted(key for key in self.expected if self.counts[key] == 0)

    def duplicated(self):
        return sorted(key for key, count in self.counts.items() if count > 1 and key in self.expected)

    def unexpected(self):
        return sorted(key for key, count in self.counts.items() if count > 0 and key not in self.expected)

    def is_complete(self):
        return not (self.missing() or self.duplicated() or self.unexpected())

    def check(self):
        """Raise :class:`CompletenessError` unless every expected key was seen once."""
        missing, duplicated, unexpected = self.missing(), self.duplicated(), self.unexpected()
        if not (missing or duplicated or unexpected):
            return

        parts = []
        for label, keys in (("missing", missing), ("duplicated", duplicated), ("unexpected", unexpected)):
            if keys:
                parts.append(f"{len(keys)} {label}: {_format_keys(keys)}")
        raise CompletenessError(
            "Prediction count does not match split plan; " + "; ".join(parts),
            missing=missing,
            duplicated=duplicated,
            unexpected=unexpected,
        )
