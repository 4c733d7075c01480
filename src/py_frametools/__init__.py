"""
py-frametools: convenience operations for pandas DataFrames

Adds the small, everyday operations that pandas leaves to the caller:
    - records_to_frame: DataFrame from a sequence of flat records
      (dataclasses, NamedTuples, annotated classes)
    - show_columns / get_text_columns: column listing
    - value_counts: per-column frequency tables, side by side
    - create_filter_column / filter_rows: row predicates
    - add_column: row-wise derived column, appended in place

Importing the package also registers the ``DataFrame.frametools`` accessor,
so every operation is available as a method: ``df.frametools.filter(...)``.
"""

from .errors import (
	FrameToolsError,
	FrameToolsKeyError,
	FrameToolsTypeError,
	FrameToolsValueError,
	ColumnNotFoundError,
	SchemaError,
	DuplicateColumnError,
)
from .typing import DataType
from .records import Field, RecordSchema, records_to_frame
from .columns import show_columns, get_text_columns
from .counts import value_counts
from .rows import Row, iter_rows, create_filter_column, filter_rows, add_column
from .accessor import FrameToolsAccessor

__version__ = "0.1.0"
__all__ = [
	"records_to_frame",
	"RecordSchema",
	"Field",
	"DataType",
	"show_columns",
	"get_text_columns",
	"value_counts",
	"Row",
	"iter_rows",
	"create_filter_column",
	"filter_rows",
	"add_column",
	"FrameToolsAccessor",
	"FrameToolsError",
	"FrameToolsKeyError",
	"FrameToolsTypeError",
	"FrameToolsValueError",
	"ColumnNotFoundError",
	"SchemaError",
	"DuplicateColumnError",
]
