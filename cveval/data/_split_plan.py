from dataclasses import dataclass

import numpy as np
from sklearn.model_selection import KFold, StratifiedKFold

from .._errors import SchemaError

TEST = "TEST"


@dataclass(frozen=True)
class SplitPlan:
    """The (repeat, fold, row_id) triples held out during cross-validation.

    ``n_repeats`` and ``n_folds`` span the grid of cells, i.e. the largest
    repeat and fold index found in the plan plus one.
    """

    expected: frozenset
    n_repeats: int
    n_folds: int

    def __len__(self):
        return len(self.expected)

    def cells(self):
        return [(repeat, fold) for repeat in range(self.n_repeats) for fold in range(self.n_folds)]

    @classmethod
    def from_keys(cls, keys):
        expected = frozenset((int(repeat), int(fold), int(row)) for repeat, fold, row in keys)
        n_repeats = max((key[0] for key in expected), default=-1) + 1
        n_folds = max((key[1] for key in expected), default=-1) + 1
        return cls(expected=expected, n_repeats=n_repeats, n_folds=n_folds)

    @classmethod
    def from_table(cls, table):
        """Read a split table.

        Needs ``repeat``, ``fold`` and ``rowid`` columns (``repeat_nr``,
        ``fold_nr`` and ``row_id`` are accepted too). When a ``type`` column
        is present only its TEST rows are held out.
        """
        columns = []
        for candidates in (("repeat", "repeat_nr"), ("fold", "fold_nr"), ("rowid", "row_id")):
            name = table.first_column(*candidates)
            if name is None:
                raise SchemaError(f"Split plan {table.source} lacks attribute {candidates[0]}")
            columns.append(name)

        frame = table.frame
        if "type" in table:
            frame = frame[frame["type"] == TEST]
        keys = frame[columns].to_numpy(dtype=np.int64)
        return cls.from_keys(map(tuple, keys))


def create_split_plan(n_rows, n_repeats=1, n_folds=10, y=None, random_state=0):
    """Create a repeated k-fold split plan over ``n_rows`` rows.

    Parameters
    ----------
    n_rows : int
        Number of rows in the dataset.
    n_repeats : int, optional
        Number of independent re-partitionings, by default 1.
    n_folds : int, optional
        Folds per repeat, by default 10.
    y : array-like, optional
        Class labels; when given folds are stratified.
    random_state : int, optional
        Seed of the first repeat; repeat ``r`` uses ``random_state + r``.

    Returns
    -------
    SplitPlan
    """
    rows = np.zeros(n_rows)
    keys = []
    for repeat in range(n_repeats):
        # every repeat shuffles differently but reproducibly
        seed = random_state + repeat
        if y is not None:
            splits = StratifiedKFold(n_splits=n_folds, shuffle=True, random_state=seed).split(rows, y)
        else:
            splits = KFold(n_splits=n_folds, shuffle=True, random_state=seed).split(rows)
        for fold, (_, test_index) in enumerate(splits):
            keys.extend((repeat, fold, int(row)) for row in test_index)
    return SplitPlan.from_keys(keys)
