"""Sample record types: a school class and its students.

These exist to exercise every field kind the codec supports: ranged ints
with a zero sentinel, required and optional strings, an enum, a boolean,
a float, and a nested array.
"""

from __future__ import annotations

import enum

from ._constants import (
    MAX_ALLOWED_AGE,
    MAX_ALLOWED_YEAR,
    MAX_NAME_LEN_1,
    MAX_NAME_LEN_2,
    MIN_ALLOWED_AGE,
    MIN_ALLOWED_YEAR,
)
from ._fields import ArrayField, BoolField, EnumField, Float64Field, Int32Field, TextField
from ._record import Record


class Attendance(enum.IntEnum):
    UNKNOWN = 0
    ENROLLED = 1      # currently enrolled
    ENROLLING = 2     # trying to enroll
    GRADUATED = 3
    EXPELLED = 4
    DROPPED_OUT = 5   # left voluntarily
    EXTERNAL = 6      # not currently associated with the college


class Student(Record):
    FIELDS = (
        Int32Field("age", minimum=MIN_ALLOWED_AGE, maximum=MAX_ALLOWED_AGE),
        TextField("given_name", required=True, max_chars=MAX_NAME_LEN_1),
        TextField("second_name", max_chars=MAX_NAME_LEN_1),
        TextField("third_name", max_chars=MAX_NAME_LEN_1),
        EnumField("status", Attendance),
        BoolField("suspended"),
        Float64Field("performance_score"),
        TextField("notes"),
    )


class SchoolClass(Record):
    FIELDS = (
        Int32Field("year", minimum=MIN_ALLOWED_YEAR, maximum=MAX_ALLOWED_YEAR),
        TextField("name", required=True, max_chars=MAX_NAME_LEN_2),
        ArrayField("students", Student),
        TextField("notes"),
    )


def sample_class() -> SchoolClass:
    """The five-student class the demo round-trips."""
    return SchoolClass(
        year=2023,
        name="Class of 2023",
        notes="My super fictional class.",
        students=[
            Student(age=21, status=Attendance.ENROLLED, given_name="John", second_name="Doe",
                    performance_score=12.5, notes="Best student"),
            Student(age=19, status=Attendance.ENROLLING, given_name="Mary", second_name="Smith",
                    performance_score=13.75, notes="Will be attending in September"),
            Student(age=76, status=Attendance.GRADUATED, given_name="Kareem",
                    second_name="Abdul", third_name="Jabbar", performance_score=125.44),
            Student(age=35, status=Attendance.EXTERNAL, given_name="Rihanna",
                    notes="Celebrity endorsement"),
            Student(age=62, status=Attendance.DROPPED_OUT, given_name="Unruly Kid",
                    performance_score=-5.0, notes="Never enroll him again!", suspended=True),
        ],
    )
