from dataclasses import dataclass
from typing import Optional

import pytest

from py_frametools import records_to_frame


@dataclass
class Person:
    Name: str
    Age: int
    City: Optional[str]


PEOPLE = [
    Person("John", 25, "New York"),
    Person("Jane", 30, "Los Angeles"),
    Person("Doe", 35, "Chicago"),
    Person("Smith", 40, "Houston"),
    Person("Alex", 45, "Phoenix"),
    Person("Alice", 50, "Philadelphia"),
    Person("Bob", 55, "San Antonio"),
    Person("Charlie", 60, "San Diego"),
    Person("David", 65, "Dallas"),
    Person("Eve", 70, None),
]


@pytest.fixture
def people():
    return list(PEOPLE)


@pytest.fixture
def people_frame():
    return records_to_frame(PEOPLE)
