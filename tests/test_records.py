"""
Test records_to_frame() and RecordSchema.
"""

import enum
from dataclasses import dataclass
from datetime import date
from typing import NamedTuple, Optional, Protocol

import pandas as pd
import pytest

from py_frametools import RecordSchema, records_to_frame, show_columns, iter_rows
from py_frametools.errors import FrameToolsTypeError, SchemaError


@dataclass
class Address:
	Street: str


@dataclass
class PersonWithAddress:
	Name: str
	Address: Address


class Owner:
	def __init__(self, name):
		self.name = name


@dataclass
class PersonWithOwner:
	Name: str
	Owner: Owner


class DummyEnum(enum.Enum):
	One = 1


@dataclass
class PersonWithEnum:
	Name: str
	Enum: DummyEnum


@dataclass
class PersonWithTags:
	Name: str
	Tags: list[str]


class Named(Protocol):
	def name(self) -> str:
		...


@dataclass
class PersonWithInterface:
	Name: str
	Other: Named


@dataclass
class PersonWithDate:
	Name: str
	Born: date


@dataclass
class TwoBadFields:
	Name: str
	Tags: list[int]
	Enum: DummyEnum


class Point(NamedTuple):
	x: int
	y: int


class Reading:
	sensor: str
	value: float
	ok: bool

	def __init__(self, sensor, value, ok):
		self.sensor = sensor
		self.value = value
		self.ok = ok


@dataclass
class Score:
	player: str
	points: Optional[int]


class TestBuild:
	"""Frames built from valid records."""

	def test_people_frame(self, people):
		df = records_to_frame(people)
		assert len(df) == 10
		assert show_columns(df) == ["Name", "Age", "City"]
		assert df.loc[0, "Name"] == "John"
		assert df.loc[0, "Age"] == 25
		assert df.loc[0, "City"] == "New York"

	def test_first_row_values(self, people):
		df = records_to_frame(people)
		assert tuple(next(iter_rows(df))) == ("John", 25, "New York")

	def test_null_is_kept_as_missing(self, people):
		df = records_to_frame(people)
		assert pd.isna(df.loc[9, "City"])
		assert df["City"].isna().sum() == 1

	def test_dtypes_follow_field_types(self, people):
		df = records_to_frame(people)
		assert df["Age"].dtype == "int64"
		assert isinstance(df["Name"].dtype, pd.StringDtype)
		assert isinstance(df["City"].dtype, pd.StringDtype)

	def test_rows_keep_input_order(self, people):
		df = records_to_frame(people)
		assert df["Name"].tolist() == [p.Name for p in people]
		assert df["Age"].tolist() == [p.Age for p in people]

	def test_explicit_record_type(self, people):
		df = records_to_frame(people, type(people[0]))
		assert len(df) == 10

	def test_generator_input(self, people):
		df = records_to_frame(p for p in people)
		assert len(df) == 10

	def test_namedtuple_records(self):
		df = records_to_frame([Point(1, 2), Point(3, 4)])
		assert show_columns(df) == ["x", "y"]
		assert df["x"].tolist() == [1, 3]
		assert df["y"].dtype == "int64"

	def test_annotated_class_records(self):
		df = records_to_frame([Reading("a", 1.5, True), Reading("b", 2, False)])
		assert show_columns(df) == ["sensor", "value", "ok"]
		assert df["value"].tolist() == [1.5, 2.0]
		assert df["value"].dtype == "float64"
		assert df["ok"].dtype == bool

	def test_optional_int_becomes_nullable(self):
		df = records_to_frame([Score("a", 3), Score("b", None)])
		assert df["points"].dtype == "Int64"
		assert df["points"].isna().tolist() == [False, True]
		assert df.loc[0, "points"] == 3

	def test_input_not_mutated(self, people):
		before = list(people)
		records_to_frame(people)
		assert people == before


class TestEmptyInput:
	"""Empty sequences still carry the schema when a type is known."""

	def test_empty_with_type(self, people):
		df = records_to_frame([], type(people[0]))
		assert len(df) == 0
		assert show_columns(df) == ["Name", "Age", "City"]
		assert df["Age"].dtype == "int64"
		assert isinstance(df["Name"].dtype, pd.StringDtype)

	def test_empty_with_schema(self):
		schema = RecordSchema.from_mapping({"a": int, "b": Optional[bool]})
		df = records_to_frame([], schema=schema)
		assert show_columns(df) == ["a", "b"]
		assert df["b"].dtype == "boolean"

	def test_empty_without_type_raises(self):
		with pytest.raises(SchemaError):
			records_to_frame([])


class TestSchemaErrors:
	"""Non-scalar fields are rejected before any record is read."""

	def test_struct_field(self):
		with pytest.raises(SchemaError, match="Address"):
			records_to_frame([PersonWithAddress("John", Address("123 Main St"))])

	def test_class_field(self):
		with pytest.raises(SchemaError, match="reference type"):
			records_to_frame([PersonWithOwner("John", Owner("x"))])

	def test_enum_field(self):
		with pytest.raises(SchemaError, match="enumeration"):
			records_to_frame([PersonWithEnum("John", DummyEnum.One)])

	def test_list_field(self):
		with pytest.raises(SchemaError, match="array-like"):
			records_to_frame([PersonWithTags("John", ["a"])])

	def test_interface_field(self):
		with pytest.raises(SchemaError, match="interface"):
			records_to_frame([], PersonWithInterface)

	def test_date_field(self):
		with pytest.raises(SchemaError, match="Born"):
			records_to_frame([], PersonWithDate)

	def test_first_bad_field_is_reported(self):
		with pytest.raises(SchemaError, match="Field 'Tags'"):
			RecordSchema.from_type(TwoBadFields)

	def test_records_not_consumed(self):
		consumed = []

		def generate():
			consumed.append(True)
			yield PersonWithAddress("John", Address("123 Main St"))

		with pytest.raises(SchemaError):
			records_to_frame(generate(), PersonWithAddress)
		assert consumed == []

	def test_schema_error_is_type_error(self):
		with pytest.raises(TypeError):
			RecordSchema.from_type(PersonWithEnum)

	def test_mapping_schema_rejects_date(self):
		with pytest.raises(SchemaError, match="when"):
			RecordSchema.from_mapping({"when": date})


class TestValueErrors:
	"""Problems found while reading record values."""

	def test_none_in_non_nullable_field(self, people):
		Person = type(people[0])
		with pytest.raises(FrameToolsTypeError, match="Field 'Age' at row 1"):
			records_to_frame([Person("a", 1, None), Person("b", None, None)])

	def test_wrong_value_type(self, people):
		Person = type(people[0])
		with pytest.raises(FrameToolsTypeError, match="Field 'Age'"):
			records_to_frame([Person("a", "old", None)])

	def test_mixed_record_types(self, people):
		with pytest.raises(FrameToolsTypeError, match="row 1"):
			records_to_frame([people[0], Point(1, 2)])


class TestMappingSchema:
	"""Caller-supplied schemas accept dict records."""

	def test_dict_records(self):
		schema = RecordSchema.from_mapping({"name": str, "score": Optional[float]})
		df = records_to_frame(
			[{"name": "a", "score": 1.5}, {"name": "b", "score": None}],
			schema=schema,
		)
		assert show_columns(df) == ["name", "score"]
		assert df["score"].dtype == "Float64"
		assert pd.isna(df.loc[1, "score"])

	def test_missing_key(self):
		schema = RecordSchema.from_mapping({"name": str, "score": float})
		with pytest.raises(KeyError):
			records_to_frame([{"name": "a"}], schema=schema)

	def test_schema_names(self):
		schema = RecordSchema.from_mapping({"name": str, "age": int})
		assert schema.names == ["name", "age"]
		assert len(schema) == 2
