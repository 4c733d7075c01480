"""Row views, row predicates and row-wise derived columns."""

import typing

import numpy as np
import pandas as pd

from .columns import _missing_col_error
from .errors import DuplicateColumnError, FrameToolsTypeError
from .naming import _build_attribute_map
from .typing import DataType, classify_annotation, dtype_from_annotation, infer_dtype, validate_scalar


FILTER_COLUMN_NAME = "Filter"


def _is_missing(value) -> bool:
	return value is None or (pd.api.types.is_scalar(value) and bool(pd.isna(value)))


def _python_values(series: pd.Series) -> list:
	"""Column values as Python scalars, with None for every missing entry."""
	return [None if _is_missing(v) else v for v in series.tolist()]


class _FrameCache:
	"""Column data of one DataFrame, converted once and shared by its row views."""
	__slots__ = ('labels', 'positions', 'attribute_map', 'cols', 'index')

	def __init__(self, df):
		self.labels = list(df.columns)
		self.positions = {label: idx for idx, label in enumerate(self.labels)}
		self.attribute_map = _build_attribute_map(self.labels)
		self.cols = [_python_values(series) for _, series in df.items()]
		self.index = df.index


class Row:
	"""
	Read-only view of one DataFrame row.

	Values are plain Python scalars, or None for a missing entry. Access by
	column name (``row["Name"]``), by position (``row[0]``), or by sanitized
	attribute name (``row.name``, case-insensitive). Integer keys are always
	positions.
	"""
	__slots__ = ('_cache', '_position')

	def __init__(self, cache, position):
		self._cache = cache
		self._position = position

	@property
	def index(self):
		"""Index label of this row in the source DataFrame."""
		return self._cache.index[self._position]

	def __getattr__(self, attr):
		"""Access column values by sanitized attribute name."""
		# Slots may be unset while copy or pickle rebuilds the instance
		if attr.startswith("_"):
			raise AttributeError(attr)
		col_idx = self._cache.attribute_map.get(attr.lower())
		if col_idx is None:
			raise AttributeError(f"Row has no attribute '{attr}'")
		return self._cache.cols[col_idx][self._position]

	def __getitem__(self, key):
		if isinstance(key, (int, np.integer)) and not isinstance(key, bool):
			return self._cache.cols[key][self._position]
		col_idx = self._cache.positions.get(key)
		if col_idx is None:
			raise _missing_col_error(key, context="row")
		return self._cache.cols[col_idx][self._position]

	def get(self, key, default=None):
		try:
			return self[key]
		except (KeyError, IndexError):
			return default

	def keys(self):
		return list(self._cache.labels)

	def to_dict(self):
		return dict(zip(self._cache.labels, self))

	def __iter__(self):
		"""Iterate over column values in this row."""
		pos = self._position
		for col in self._cache.cols:
			yield col[pos]

	def __len__(self):
		"""Return number of columns."""
		return len(self._cache.cols)

	def __repr__(self):
		values = [repr(v) for v in self]
		return f"Row({self.index!r}: {', '.join(values)})"


def iter_rows(df: pd.DataFrame):
	"""Yield a Row for each row of df, in order."""
	cache = _FrameCache(df)
	for position in range(len(df)):
		yield Row(cache, position)


def create_filter_column(df: pd.DataFrame, column_name, predicate) -> pd.Series:
	"""
	Evaluate predicate once per row and collect the results as a bool column.

	Args:
		df: Input DataFrame (not modified)
		column_name: Name of the returned Series (may be None)
		predicate: Function from Row to bool

	Returns:
		bool Series aligned with df.index

	Raises:
		FrameToolsTypeError: If predicate returns something other than a bool.
			Errors raised by predicate itself propagate unchanged
	"""
	mask = []
	for row in iter_rows(df):
		result = predicate(row)
		if not isinstance(result, (bool, np.bool_)):
			raise FrameToolsTypeError(
				f"Filter function must return bool, got {type(result).__name__} "
				f"for row {row.index!r}"
			)
		mask.append(bool(result))
	return pd.Series(mask, index=df.index, name=column_name, dtype=bool)


def filter_rows(df: pd.DataFrame, predicate) -> pd.DataFrame:
	"""
	Return a new DataFrame with the rows for which predicate(row) is True.

	Row order, index labels and all columns are kept.
	"""
	mask = create_filter_column(df, FILTER_COLUMN_NAME, predicate)
	return df.loc[mask.to_numpy()].copy()


def _declared_return_dtype(func):
	try:
		hints = typing.get_type_hints(func)
	except (NameError, TypeError):
		# Lambdas, builtins and callable objects without resolvable hints
		return None
	annotation = hints.get("return")
	if annotation is None or annotation is type(None):
		return None
	dtype, _ = classify_annotation(annotation)
	return dtype


def _resolve_dtype(func, dtype, values):
	if isinstance(dtype, DataType):
		return dtype
	if dtype is not None:
		return dtype_from_annotation(dtype)
	declared = _declared_return_dtype(func)
	if declared is not None:
		return declared
	return infer_dtype(values)


def add_column(df: pd.DataFrame, column_name, func, dtype=None) -> None:
	"""
	Append a column computed row by row. Modifies df in place.

	Args:
		df: DataFrame to extend
		column_name: Name of the new column; must not exist yet
		func: Function from Row to a scalar value
		dtype: Optional column type (a scalar type such as int or
			Optional[str], or a DataType). Defaults to func's return
			annotation, then to the type inferred from the values

	Raises:
		DuplicateColumnError: If column_name is already a column of df
		FrameToolsTypeError: If a value does not fit the column type.
			Errors raised by func itself propagate unchanged

	Examples:
		add_column(df, "is_adult", lambda row: row["Age"] >= 18)
	"""
	if column_name in df.columns:
		raise DuplicateColumnError(f"Column '{column_name}' already exists in DataFrame")

	values = [func(row) for row in iter_rows(df)]

	target = _resolve_dtype(func, dtype, values)
	checked = []
	for position, value in enumerate(values):
		try:
			checked.append(validate_scalar(value, target))
		except FrameToolsTypeError as e:
			raise FrameToolsTypeError(
				f"Column '{column_name}' at row {df.index[position]!r}: {e}"
			) from e

	df[column_name] = pd.Series(checked, index=df.index, dtype=target.pandas_dtype)
