"""Column listing and lookup helpers."""

import pandas as pd

from .errors import ColumnNotFoundError


def _missing_col_error(name, context="DataFrame"):
	return ColumnNotFoundError(f"Column '{name}' not found in {context}")


def show_columns(df: pd.DataFrame) -> list:
	"""Return the column names of a DataFrame, in column order."""
	return list(df.columns)


def _is_text(series: pd.Series) -> bool:
	if isinstance(series.dtype, pd.StringDtype):
		return True
	if series.dtype == object:
		# Object columns count as text only if every present value is a str
		return pd.api.types.infer_dtype(series, skipna=True) == "string"
	return False


def get_text_columns(df: pd.DataFrame) -> list:
	"""Return the names of the columns that hold text, in column order."""
	return [label for label, series in df.items() if _is_text(series)]


def require_columns(df: pd.DataFrame, names) -> list:
	"""
	Check that every name is a column of df.

	Returns the names as a list; raises ColumnNotFoundError for the first
	name that is absent.
	"""
	names = list(names)
	present = set(df.columns)
	for name in names:
		if name not in present:
			raise _missing_col_error(name)
	return names
