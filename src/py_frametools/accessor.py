"""Method-style access: ``df.frametools.value_counts()`` and friends."""

import pandas as pd

from .columns import get_text_columns, show_columns
from .counts import DEFAULT_MAX_LENGTH, value_counts
from .rows import add_column, create_filter_column, filter_rows, iter_rows


@pd.api.extensions.register_dataframe_accessor("frametools")
class FrameToolsAccessor:
	"""Delegates to the module-level functions with the wrapped DataFrame."""

	def __init__(self, pandas_obj):
		self._df = pandas_obj

	def show_columns(self):
		return show_columns(self._df)

	def get_text_columns(self):
		return get_text_columns(self._df)

	def value_counts(self, max_length=DEFAULT_MAX_LENGTH, column_names=None):
		return value_counts(self._df, max_length=max_length, column_names=column_names)

	def create_filter_column(self, column_name, predicate):
		return create_filter_column(self._df, column_name, predicate)

	def filter(self, predicate):
		return filter_rows(self._df, predicate)

	def add_column(self, column_name, func, dtype=None):
		"""Append a derived column to the wrapped DataFrame in place."""
		add_column(self._df, column_name, func, dtype=dtype)

	def rows(self):
		return iter_rows(self._df)
