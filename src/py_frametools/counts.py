"""Value counts across several columns, aligned into one DataFrame."""

import numpy as np
import pandas as pd

from .columns import require_columns, show_columns
from .errors import DuplicateColumnError, FrameToolsTypeError, FrameToolsValueError


DEFAULT_MAX_LENGTH = 10
COUNT_SUFFIX = "Count"


def _nullable(series: pd.Series) -> pd.Series:
	"""Move numpy int/bool columns to the pandas dtypes that can hold NA."""
	dtype = series.dtype
	if isinstance(dtype, np.dtype):
		if dtype.kind == 'b':
			return series.astype("boolean")
		if dtype.kind in 'iu':
			# Keep signedness and width: int8 -> Int8, uint64 -> UInt64
			prefix = "UInt" if dtype.kind == 'u' else "Int"
			return series.astype(f"{prefix}{dtype.itemsize * 8}")
	return series


def _frequency_table(series: pd.Series):
	"""
	Distinct present values of series and their counts, most frequent first.

	Ties keep the order in which values first appear in series. Missing
	entries are not counted.
	"""
	# factorize numbers uniques in order of first appearance and gives NA code -1
	codes, uniques = pd.factorize(series)
	counts = np.bincount(codes[codes >= 0], minlength=len(uniques))
	order = np.argsort(-counts, kind="stable")

	values = pd.Series(uniques.take(order)).astype(series.dtype)
	return values, pd.Series(counts[order], dtype="Int64")


def _check_max_length(max_length):
	if isinstance(max_length, bool) or not isinstance(max_length, (int, np.integer)):
		raise FrameToolsTypeError(
			f"max_length must be an int, not {type(max_length).__name__}"
		)
	if max_length < 0:
		raise FrameToolsValueError(f"max_length must be non-negative, got {max_length}")


def value_counts(df: pd.DataFrame, max_length=DEFAULT_MAX_LENGTH, column_names=None) -> pd.DataFrame:
	"""
	Count values per column and lay the counts side by side.

	Args:
		df: Input DataFrame
		max_length: Maximum number of rows in the result. Clamped to len(df)
		column_names: Column name or names to count. Defaults to all columns

	Returns:
		New DataFrame with two columns per counted column C: ``C`` (distinct
		values) and ``C + "Count"`` (occurrences), most frequent first. Every
		pair has exactly ``min(max_length, len(df))`` rows; shorter frequency
		tables are padded with missing rows, longer ones keep their most
		frequent values.

	Raises:
		ColumnNotFoundError: If a requested column does not exist
		DuplicateColumnError: If two output columns would share a name

	Examples:
		# Top 5 values of two columns
		value_counts(df, max_length=5, column_names=["city", "age"])
	"""
	_check_max_length(max_length)

	if column_names is None:
		columns = show_columns(df)
	elif isinstance(column_names, str):
		columns = require_columns(df, [column_names])
	else:
		columns = require_columns(df, column_names)

	labels = []
	for column in columns:
		labels.extend((column, f"{column}{COUNT_SUFFIX}"))
	seen = set()
	for label in labels:
		if label in seen:
			raise DuplicateColumnError(f"Column '{label}' would appear twice in the value counts")
		seen.add(label)

	effective_length = min(len(df), int(max_length))
	positions = pd.RangeIndex(effective_length)

	result = {}
	for column in columns:
		values, counts = _frequency_table(df[column])
		# reindex pads with missing rows or truncates to the most frequent values
		result[column] = _nullable(values).reindex(positions)
		result[f"{column}{COUNT_SUFFIX}"] = counts.reindex(positions)

	return pd.DataFrame(result, index=positions)
