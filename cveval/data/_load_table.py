"""Loader for the tabular inputs of an evaluation run.

Design notes:
- Datasets, split plans and prediction files all arrive as tables. ARFF is
    the native exchange format; it is read with liac-arff, which handles
    string attributes and sparse rows and keeps the declared order of
    nominal labels. The dataset's label order defines class indices, so it
    is never re-derived from the data.
- Anything that is not an .arff file is read as CSV with pandas. CSV has no
    schema, so non-numeric columns become nominal with their labels sorted.
- Locations may be local paths or http(s) URLs so datasets can be scored
    straight from the server that hosts them.
"""

import logging
from dataclasses import dataclass, field
from urllib.request import urlopen

import arff
import pandas as pd

logger = logging.getLogger(__name__)

NOMINAL = "nominal"
NUMERIC = "numeric"
STRING = "string"
DATE = "date"

_ARFF_TYPES = {"NUMERIC": NUMERIC, "REAL": NUMERIC, "INTEGER": NUMERIC, "STRING": STRING}


@dataclass(frozen=True)
class Table:
    """A loaded table plus the attribute schema the evaluation needs.

    Parameters
    ----------
    frame : pd.DataFrame
        Row data; missing values are NaN.
    types : dict
        Column name -> one of ``nominal``, ``numeric``, ``string``, ``date``.
    nominal_values : dict
        Column name -> tuple of labels in declared order (nominal only).
    source : str
        Where the table came from, for log and error messages.
    """

    frame: pd.DataFrame
    types: dict
    nominal_values: dict = field(default_factory=dict)
    source: str = "<memory>"

    @property
    def n_rows(self):
        return len(self.frame)

    def __contains__(self, column):
        return column in self.types

    def labels(self, column):
        return tuple(self.nominal_values.get(column, ()))

    def first_column(self, *candidates):
        """Return the first of ``candidates`` present in the table, else None."""
        for name in candidates:
            if name in self:
                return name
        return None

    @classmethod
    def from_frame(cls, frame, nominal_values=None, source="<memory>"):
        """Wrap a DataFrame, inferring the schema from its dtypes.

        Columns listed in ``nominal_values`` keep the given label order; other
        non-numeric columns become nominal with sorted labels.
        """
        frame = frame.copy()
        nominal_values = dict(nominal_values or {})
        types = {}
        for column in frame.columns:
            series = frame[column]
            if column in nominal_values:
                types[column] = NOMINAL
            elif pd.api.types.is_bool_dtype(series) or pd.api.types.is_numeric_dtype(series):
                types[column] = NUMERIC
            elif pd.api.types.is_datetime64_any_dtype(series):
                types[column] = DATE
            else:
                types[column] = NOMINAL
                nominal_values[column] = tuple(sorted(series.dropna().astype(str).unique()))
        for column in nominal_values:
            frame[column] = frame[column].map(lambda value: value if pd.isna(value) else str(value))
        return cls(frame=frame, types=types, nominal_values=nominal_values, source=source)


def _is_remote(location):
    return str(location).startswith(("http://", "https://"))


def _read_text(location):
    if _is_remote(location):
        with urlopen(location) as response:
            return response.read().decode("utf-8")
    with open(location, encoding="utf-8") as handle:
        return handle.read()


def read_arff(text, source="<memory>"):
    """Parse ARFF text into a :class:`Table`.

    Sparse rows are expanded to dense ones. liac-arff gives missing values
    as None; numeric columns are cast to float so they read as NaN.
    """
    document = arff.loads(text)
    attributes = document["attributes"]
    frame = pd.DataFrame(document["data"], columns=[name for name, _ in attributes])
    types = {}
    nominal_values = {}
    for name, kind in attributes:
        # nominal attributes come back as their list of labels
        if isinstance(kind, list):
            types[name] = NOMINAL
            nominal_values[name] = tuple(kind)
        else:
            types[name] = _ARFF_TYPES[kind]
        if types[name] == NUMERIC:
            frame[name] = pd.to_numeric(frame[name]).astype(float)
    return Table(frame=frame, types=types, nominal_values=nominal_values, source=source)


def load_table(location):
    """Load a table from a local path or URL.

    Parameters
    ----------
    location : str or os.PathLike
        ``.arff`` files are parsed as ARFF, everything else as CSV.

    Returns
    -------
    Table
    """
    location = str(location)
    if location.lower().endswith(".arff"):
        table = read_arff(_read_text(location), source=location)
        kind = "arff"
    else:
        table = Table.from_frame(pd.read_csv(location), source=location)
        kind = "csv"
    logger.info("Loaded %s table %s: %d rows, %d columns", kind, location, table.n_rows, len(table.types))
    return table
