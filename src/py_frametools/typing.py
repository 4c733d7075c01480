"""
Scalar type tags for py-frametools.

Pure metadata design:
  - DataType describes column semantics (scalar kind + nullable flag)
  - Record fields and derived columns are classified once, up front
  - Promotion is functional (immutable DataType instances)
  - Missing entries are represented by None on the Python side and by the
    pandas missing marker once stored in a column
"""

from __future__ import annotations
import dataclasses
import enum
import inspect
import types
import typing
import warnings
from collections.abc import Iterable as IterableABC
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Type

import numpy as np

from .errors import FrameToolsTypeError, SchemaError


# Kinds a record field or derived column may declare.
SCALAR_KINDS = (bool, int, float, str)

_PANDAS_DTYPES = {
    (bool, False): "bool",
    (bool, True): "boolean",
    (int, False): "int64",
    (int, True): "Int64",
    (float, False): "float64",
    (float, True): "Float64",
    (str, False): "string",
    (str, True): "string",
}


@dataclass(frozen=True)
class DataType:
    """
    Describes the semantic type of a column.

    Attributes
    ----------
    kind : Type
        Python type (bool, int, float, str, or object for degraded columns)
    nullable : bool
        Whether the column may contain missing entries

    Examples
    --------
    >>> DataType(int)
    <int>
    >>> DataType(str, nullable=True)
    <str nullable>
    >>> DataType(int).promote_with(None)
    <int nullable>
    """

    kind: Type[Any]
    nullable: bool = False

    def __repr__(self):
        if self.nullable:
            return f"<{self.kind.__name__} nullable>"
        return f"<{self.kind.__name__}>"

    @property
    def is_numeric(self) -> bool:
        """True if kind is bool, int or float."""
        try:
            return issubclass(self.kind, (int, float, bool))
        except TypeError:
            return False

    @property
    def pandas_dtype(self) -> str:
        """Name of the pandas dtype a column of this type is stored as."""
        return _PANDAS_DTYPES.get((self.kind, self.nullable), "object")

    def promote_with(self, value: Any) -> "DataType":
        """
        Promote this DataType to accommodate a new Python value.

        Never mutates; always returns new DataType.
        """
        # None just lifts nullability
        if value is None:
            if self.nullable:
                return self
            return DataType(self.kind, nullable=True)

        vkind = infer_kind(value)

        if vkind is self.kind:
            return self

        # Numeric ladder (bool → int → float)
        if self.is_numeric and vkind in (bool, int, float):
            if self.kind is float or vkind is float:
                new_kind = float
            elif self.kind is int or vkind is int:
                new_kind = int
            else:
                new_kind = bool
            if new_kind is not self.kind:
                return DataType(new_kind, self.nullable)
            return self

        # Degrade to object
        if self.kind is not object:
            warnings.warn(
                f"Degrading column<{self.kind.__name__}> to column<object> "
                f"due to incompatible value of type {type(value).__name__}",
                stacklevel=5,
            )
            return DataType(object, self.nullable)

        return self


def infer_kind(value: Any) -> Optional[Type]:
    """
    Infer the scalar kind of a single value.

    Returns None for None values. numpy scalars map onto the matching
    Python kind. Anything that is not a plain scalar maps to object.
    """
    if value is None:
        return None

    # Check bool BEFORE int (bool is subclass of int)
    if isinstance(value, (bool, np.bool_)):
        return bool
    if isinstance(value, enum.Enum):
        return object
    if isinstance(value, (int, np.integer)):
        return int
    if isinstance(value, (float, np.floating)):
        return float
    if isinstance(value, str):
        return str

    return object


def infer_dtype(values: Iterable[Any]) -> DataType:
    """
    Infer a DataType from an iterable of Python scalars.

    Applies promotion across all values.

    Examples
    --------
    >>> infer_dtype([1, 2, 3])
    <int>
    >>> infer_dtype([1, 2.5, 3])
    <float>
    >>> infer_dtype([1, None, 3])
    <int nullable>
    """
    dtype: Optional[DataType] = None
    saw_none = False

    for v in values:
        if dtype is None:
            k = infer_kind(v)
            if k is None:
                saw_none = True
                continue
            dtype = DataType(k, nullable=saw_none)
        else:
            dtype = dtype.promote_with(v)

    # All values were None, or empty iterable
    if dtype is None:
        return DataType(object, nullable=True)

    return dtype


def validate_scalar(value: Any, dtype: DataType) -> Any:
    """
    Validate (and possibly coerce) a scalar before writing it into a column.

    Raises
    ------
    FrameToolsTypeError
        If value is incompatible with dtype
    """
    if value is None:
        if not dtype.nullable:
            raise FrameToolsTypeError(
                f"Cannot store None in non-nullable {dtype.kind.__name__} column"
            )
        return None

    if dtype.kind is object:
        return value

    vkind = infer_kind(value)

    if vkind is dtype.kind:
        # Unwrap numpy scalars
        if type(value) is not dtype.kind:
            return dtype.kind(value)
        return value

    # Numeric widening
    if dtype.kind is float and vkind in (int, bool):
        return float(value)
    if dtype.kind is int and vkind is bool:
        return int(value)

    raise FrameToolsTypeError(
        f"Incompatible value {value!r} for column<{dtype.kind.__name__}>"
    )


def _type_name(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__name__
    return repr(annotation).replace("typing.", "")


def _is_struct(annotation: type) -> bool:
    if dataclasses.is_dataclass(annotation):
        return True
    # NamedTuple / namedtuple
    return issubclass(annotation, tuple) and hasattr(annotation, "_fields")


def _is_interface(annotation: type) -> bool:
    return getattr(annotation, "_is_protocol", False) or inspect.isabstract(annotation)


def classify_annotation(annotation: Any) -> tuple[Optional[DataType], Optional[str]]:
    """
    Classify a type annotation.

    Returns ``(DataType, None)`` for a scalar annotation (optionally wrapped in
    ``Optional``), otherwise ``(None, reason)`` where reason names the kind of
    type that was rejected.
    """
    origin = typing.get_origin(annotation)

    if origin is typing.Union or origin is types.UnionType:
        args = typing.get_args(annotation)
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) != 1:
            return None, "union"
        inner, reason = classify_annotation(non_none[0])
        if inner is None:
            return None, reason
        return DataType(inner.kind, nullable=True), None

    if origin is not None:
        if isinstance(origin, type) and issubclass(origin, IterableABC):
            return None, "array-like"
        return None, "generic"

    if annotation is Any:
        return None, "any"

    if not isinstance(annotation, type):
        return None, "not a type"

    # Exact matches only: str/int subclasses are user classes
    if annotation in SCALAR_KINDS:
        return DataType(annotation), None

    # Enum before the others: IntEnum is also an int
    if issubclass(annotation, enum.Enum):
        return None, "enumeration"
    if _is_struct(annotation):
        return None, "struct"
    if issubclass(annotation, IterableABC):
        return None, "array-like"
    if _is_interface(annotation):
        return None, "interface"

    return None, "reference type"


def dtype_from_annotation(annotation: Any, field: Optional[str] = None) -> DataType:
    """
    Resolve a scalar annotation to a DataType.

    Raises
    ------
    SchemaError
        If the annotation is not a supported scalar type
    """
    dtype, reason = classify_annotation(annotation)
    if dtype is None:
        subject = f"Field '{field}'" if field is not None else "Annotation"
        raise SchemaError(
            f"Only scalar types are supported. {subject} is of type "
            f"{_type_name(annotation)} ({reason})"
        )
    return dtype
