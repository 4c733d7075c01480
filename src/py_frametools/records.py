"""
Build a DataFrame from a sequence of flat records.

The shape of a record type is read and validated once, into a RecordSchema,
before any record is read. The schema is then applied to every record.
"""

from __future__ import annotations
import dataclasses
import itertools
import typing
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Optional

import pandas as pd

from .errors import FrameToolsKeyError, FrameToolsTypeError, SchemaError
from .typing import DataType, dtype_from_annotation, validate_scalar


_EMPTY = object()


@dataclass(frozen=True)
class Field:
    """A named scalar field of a record type."""

    name: str
    dtype: DataType

    @property
    def pandas_dtype(self) -> str:
        return self.dtype.pandas_dtype


def _declared_fields(record_type: type) -> list[tuple[str, Any]]:
    """Return ``(name, annotation)`` pairs in declaration order."""
    try:
        hints = typing.get_type_hints(record_type)
    except (NameError, TypeError) as e:
        raise SchemaError(
            f"Cannot resolve field annotations of {record_type.__name__}: {e}"
        ) from e

    if dataclasses.is_dataclass(record_type):
        names = [f.name for f in dataclasses.fields(record_type)]
    elif issubclass(record_type, tuple) and hasattr(record_type, "_fields"):
        names = list(record_type._fields)
    else:
        names = [
            name for name, hint in hints.items()
            if not name.startswith("_") and typing.get_origin(hint) is not typing.ClassVar
        ]

    fields = []
    for name in names:
        if name not in hints:
            raise SchemaError(
                f"Field '{name}' of {record_type.__name__} has no type annotation"
            )
        fields.append((name, hints[name]))
    return fields


@dataclass(frozen=True)
class RecordSchema:
    """
    Ordered, validated description of a record type.

    Attributes
    ----------
    fields : tuple of Field
        One entry per column, in declaration order
    record_type : type or None
        The class records must be instances of; None for schemas built
        from a plain mapping, which also accept dict records

    Examples
    --------
    >>> RecordSchema.from_mapping({"name": str, "age": int}).names
    ['name', 'age']
    """

    fields: tuple
    record_type: Optional[type] = None

    @classmethod
    def from_type(cls, record_type: type) -> "RecordSchema":
        """
        Derive a schema from a dataclass, NamedTuple or annotated class.

        Raises
        ------
        SchemaError
            For the first field (in declaration order) whose type is not a
            supported scalar, or if the type declares no fields
        """
        if not isinstance(record_type, type):
            raise FrameToolsTypeError(
                f"record_type must be a class, not {type(record_type).__name__}"
            )
        declared = _declared_fields(record_type)
        if not declared:
            raise SchemaError(f"Record type {record_type.__name__} declares no fields")

        fields = tuple(
            Field(name, dtype_from_annotation(annotation, field=name))
            for name, annotation in declared
        )
        return cls(fields, record_type)

    @classmethod
    def from_mapping(cls, mapping: Mapping) -> "RecordSchema":
        """Build a schema from ``{field name: annotation}``."""
        if not mapping:
            raise SchemaError("A record schema needs at least one field")
        fields = tuple(
            Field(name, dtype_from_annotation(annotation, field=name))
            for name, annotation in mapping.items()
        )
        return cls(fields)

    @property
    def names(self) -> list[str]:
        return [f.name for f in self.fields]

    def __len__(self):
        return len(self.fields)

    def empty_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            f.name: pd.Series([], dtype=f.pandas_dtype) for f in self.fields
        })


def _read_field(record, name, row_idx):
    if isinstance(record, Mapping):
        try:
            return record[name]
        except KeyError:
            raise FrameToolsKeyError(f"Record at row {row_idx} has no field '{name}'") from None
    try:
        return getattr(record, name)
    except AttributeError:
        raise FrameToolsKeyError(f"Record at row {row_idx} has no field '{name}'") from None


def records_to_frame(
    records: Iterable[Any],
    record_type: Optional[type] = None,
    *,
    schema: Optional[RecordSchema] = None,
) -> pd.DataFrame:
    """
    Convert a sequence of flat records into a new DataFrame.

    Args:
        records: Iterable of records, all of one record type
        record_type: Class of the records. Inferred from the first record
            when neither record_type nor schema is given
        schema: Explicit RecordSchema (takes precedence over record_type)

    Returns:
        DataFrame with one column per field, in declaration order, and one
        row per record, in input order

    Raises:
        SchemaError: If the record type declares a non-scalar field. Raised
            before any record value is read
        FrameToolsTypeError: If a record is of the wrong type or holds a value
            that does not fit its field

    Examples:
        @dataclass
        class Person:
            name: str
            age: int
            city: Optional[str]

        df = records_to_frame([Person("John", 25, "New York")])
    """
    if schema is None and record_type is not None:
        schema = RecordSchema.from_type(record_type)

    iterator = iter(records)
    if schema is None:
        first = next(iterator, _EMPTY)
        if first is _EMPTY:
            raise SchemaError(
                "Cannot derive a schema from an empty sequence; pass record_type or schema"
            )
        schema = RecordSchema.from_type(type(first))
        iterator = itertools.chain([first], iterator)

    # Collect every value before building the frame
    columns = {f.name: [] for f in schema.fields}
    expected = schema.record_type
    for row_idx, record in enumerate(iterator):
        if expected is not None and not isinstance(record, expected):
            raise FrameToolsTypeError(
                f"Record at row {row_idx} is {type(record).__name__}, "
                f"expected {expected.__name__}"
            )
        for f in schema.fields:
            raw = _read_field(record, f.name, row_idx)
            try:
                columns[f.name].append(validate_scalar(raw, f.dtype))
            except FrameToolsTypeError as e:
                raise FrameToolsTypeError(f"Field '{f.name}' at row {row_idx}: {e}") from e

    if not columns[schema.fields[0].name]:
        return schema.empty_frame()

    return pd.DataFrame({
        f.name: pd.Series(columns[f.name], dtype=f.pandas_dtype) for f in schema.fields
    })
