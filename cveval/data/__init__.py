"""Data subpackage exports.

Loading tables and building the split plan an evaluation run checks
predictions against:

	from cveval.data import load_table, SplitPlan
"""

from ._load_table import DATE, NOMINAL, NUMERIC, STRING, Table, load_table, read_arff
from ._split_plan import SplitPlan, create_split_plan

__all__ = [
    "DATE",
    "NOMINAL",
    "NUMERIC",
    "STRING",
    "SplitPlan",
    "Table",
    "create_split_plan",
    "load_table",
    "read_arff",
]
