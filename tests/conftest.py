"""
Pytest configuration and shared fixtures.

The classification fixtures describe a 4-row dataset with classes {A, B},
true labels [A, A, B, B], one repeat of two folds (rows 0, 1 in fold 0;
rows 2, 3 in fold 1) and one prediction per held-out row.
"""

import pandas as pd
import pytest

from cveval.data import SplitPlan, Table

DATASET_ARFF = """\
@relation toy
@attribute x numeric
@attribute class {A,B}
@data
0.1,A
0.4,A
0.6,B
0.9,B
"""

SPLITS_ARFF = """\
@relation splits
@attribute type {TRAIN,TEST}
@attribute rowid numeric
@attribute repeat numeric
@attribute fold numeric
@data
TRAIN,2,0,0
TRAIN,3,0,0
TEST,0,0,0
TEST,1,0,0
TRAIN,0,0,1
TRAIN,1,0,1
TEST,2,0,1
TEST,3,0,1
"""

PREDICTIONS_ARFF = """\
@relation predictions
@attribute repeat numeric
@attribute fold numeric
@attribute row_id numeric
@attribute confidence.A numeric
@attribute confidence.B numeric
@attribute prediction {A,B}
@attribute correct {A,B}
@data
0,0,0,0.9,0.1,A,A
0,0,1,0.2,0.8,B,A
0,1,2,0.6,0.4,A,B
0,1,3,0.3,0.7,B,B
"""


@pytest.fixture
def dataset():
    frame = pd.DataFrame({"x": [0.1, 0.4, 0.6, 0.9], "class": ["A", "A", "B", "B"]})
    return Table.from_frame(frame, nominal_values={"class": ("A", "B")})


@pytest.fixture
def regression_dataset():
    return Table.from_frame(pd.DataFrame({"x": [0.1, 0.4, 0.6, 0.9], "y": [1.0, 2.0, 3.0, 4.0]}))


@pytest.fixture
def plan():
    return SplitPlan.from_keys([(0, 0, 0), (0, 0, 1), (0, 1, 2), (0, 1, 3)])


@pytest.fixture
def prediction_frame():
    return pd.DataFrame(
        {
            "repeat": [0, 0, 0, 0],
            "fold": [0, 0, 1, 1],
            "row_id": [0, 1, 2, 3],
            "prediction": ["A", "B", "A", "B"],
            "confidence.A": [0.9, 0.2, 0.6, 0.3],
            "confidence.B": [0.1, 0.8, 0.4, 0.7],
        }
    )


@pytest.fixture
def predictions(prediction_frame):
    return Table.from_frame(prediction_frame)


@pytest.fixture
def regression_predictions():
    frame = pd.DataFrame(
        {
            "repeat": [0, 0, 0, 0],
            "fold": [0, 0, 1, 1],
            "row_id": [0, 1, 2, 3],
            "prediction": [1.5, 2.0, 2.5, 4.0],
        }
    )
    return Table.from_frame(frame)


@pytest.fixture
def arff_files(tmp_path):
    """Write the classification scenario as ARFF files and return their paths."""
    paths = {}
    for name, text in (("dataset", DATASET_ARFF), ("splits", SPLITS_ARFF), ("predictions", PREDICTIONS_ARFF)):
        path = tmp_path / f"{name}.arff"
        path.write_text(text)
        paths[name] = path
    return paths
