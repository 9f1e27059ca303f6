"""Unit tests for the binser public API.

Organized by feature area.  Exact byte layouts are pinned down in
test_wire_format.py; the building blocks (cursor, primitives, strings,
validator) are tested in isolation in test_codec.py.
"""

from __future__ import annotations

import os
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from binser import (
    ERR_BOOL,
    ERR_COUNT,
    ERR_EMPTY,
    ERR_ENUM,
    ERR_FLOAT,
    ERR_RANGE,
    ERR_STRING_LENGTH,
    ERR_STRING_REQUIRED,
    ERR_TRAILING,
    ERR_TRUNCATED,
    ERR_UTF8,
    ERR_VALUE,
    MAX_NAME_LEN_1,
    MAX_NAME_LEN_2,
    Attendance,
    BinserError,
    EncodeError,
    SchoolClass,
    Student,
    decode,
    encode,
    encode_into,
    encoded_size,
    sample_class,
)


def _scenario_class() -> SchoolClass:
    return SchoolClass(
        year=2023,
        name="Class of 2023",
        students=[Student(age=21, status=Attendance.ENROLLED,
                          given_name="John", second_name="Doe")],
        notes="note",
    )


# ── Round trip ────────────────────────────────────────────────

class TestRoundTrip(unittest.TestCase):
    def test_concrete_scenario(self):
        cls = _scenario_class()
        blob = encode(cls)
        result = decode(SchoolClass, blob)
        self.assertTrue(result.ok, result.message)
        self.assertIsNone(result.error)
        self.assertEqual(result.consumed, len(blob))
        self.assertEqual(result.record, cls)

        student = result.record.students[0]
        self.assertEqual(result.record.year, 2023)
        self.assertEqual(result.record.name, "Class of 2023")
        self.assertEqual(result.record.notes, "note")
        self.assertEqual(student.age, 21)
        self.assertIs(student.status, Attendance.ENROLLED)
        self.assertEqual(student.given_name, "John")
        self.assertEqual(student.second_name, "Doe")
        self.assertEqual(student.third_name, "")

    def test_sample_class(self):
        cls = sample_class()
        blob = encode(cls)
        result = decode(SchoolClass, blob, exact=True)
        self.assertTrue(result.ok, result.message)
        self.assertEqual(result.record, cls)
        self.assertEqual(len(result.record.students), 5)
        self.assertTrue(result.record.students[4].suspended)
        self.assertEqual(result.record.students[2].performance_score, 125.44)

    def test_decoded_record_is_a_fresh_object(self):
        cls = sample_class()
        result = decode(SchoolClass, encode(cls))
        self.assertIsNot(result.record, cls)
        self.assertIsNot(result.record.students, cls.students)

    def test_default_record(self):
        """An all-default class fails: its name is required."""
        result = decode(SchoolClass, encode(SchoolClass()))
        self.assertFalse(result.ok)
        self.assertEqual(result.error, ERR_STRING_REQUIRED)

    def test_no_students(self):
        cls = SchoolClass(name="Empty")
        result = decode(SchoolClass, encode(cls))
        self.assertTrue(result.ok)
        self.assertEqual(result.record.students, [])

    def test_zero_sentinels(self):
        cls = SchoolClass(year=0, name="x", students=[Student(age=0, given_name="y")])
        result = decode(SchoolClass, encode(cls))
        self.assertTrue(result.ok, result.message)
        self.assertEqual(result.record.year, 0)
        self.assertEqual(result.record.students[0].age, 0)

    def test_non_ascii_text(self):
        cls = SchoolClass(name="Ĉlass ☃", notes="𝄞 notes",
                          students=[Student(given_name="Zoë")])
        result = decode(SchoolClass, encode(cls))
        self.assertTrue(result.ok, result.message)
        self.assertEqual(result.record, cls)

    def test_bytearray_and_memoryview_input(self):
        blob = encode(sample_class())
        for data in (bytearray(blob), memoryview(blob)):
            with self.subTest(kind=type(data).__name__):
                self.assertTrue(decode(SchoolClass, data).ok)

    def test_strided_memoryview_input(self):
        blob = encode(sample_class())
        spread = bytearray(2 * len(blob))
        spread[::2] = blob
        result = decode(SchoolClass, memoryview(spread)[::2], exact=True)
        self.assertTrue(result.ok, result.message)
        self.assertEqual(result.record, sample_class())

    def test_student_alone(self):
        st = Student(age=30, given_name="Ann", status=Attendance.GRADUATED,
                     performance_score=-1.5, suspended=True)
        result = decode(Student, encode(st))
        self.assertTrue(result.ok, result.message)
        self.assertEqual(result.record, st)

    def test_alternative_alignments(self):
        cls = sample_class()
        for align in (1, 2, 4, 8, 16):
            with self.subTest(align=align):
                blob = encode(cls, align=align)
                self.assertEqual(len(blob) % align, 0)
                result = decode(SchoolClass, blob, align=align)
                self.assertTrue(result.ok, result.message)
                self.assertEqual(result.record, cls)

    def test_bad_alignment_rejected(self):
        with self.assertRaises(ValueError):
            encode(sample_class(), align=3)
        with self.assertRaises(ValueError):
            decode(SchoolClass, b"\x00" * 8, align=0)


# ── Size query / fill ─────────────────────────────────────────

class TestEncodeModes(unittest.TestCase):
    def test_size_query_matches_fill(self):
        cls = sample_class()
        self.assertEqual(encoded_size(cls), len(encode(cls)))

    def test_encode_into_exact_buffer(self):
        cls = sample_class()
        size = encoded_size(cls)
        buf = bytearray(size)
        self.assertEqual(encode_into(cls, buf), size)
        self.assertEqual(bytes(buf), encode(cls))

    def test_encode_into_larger_buffer_leaves_tail(self):
        cls = _scenario_class()
        size = encoded_size(cls)
        buf = bytearray(b"\xaa" * (size + 5))
        self.assertEqual(encode_into(cls, buf), size)
        self.assertEqual(bytes(buf[:size]), encode(cls))
        self.assertEqual(bytes(buf[size:]), b"\xaa" * 5)

    def test_encode_into_zero_fills_dirty_buffer(self):
        cls = _scenario_class()
        size = encoded_size(cls)
        buf = bytearray(b"\xff" * size)
        encode_into(cls, buf)
        self.assertEqual(bytes(buf), encode(cls))

    def test_encode_into_small_buffer(self):
        cls = _scenario_class()
        buf = bytearray(b"\xaa" * (encoded_size(cls) - 1))
        self.assertEqual(encode_into(cls, buf), 0)
        self.assertEqual(set(buf), {0xAA})

    def test_encode_into_readonly_buffer(self):
        with self.assertRaises(TypeError):
            encode_into(_scenario_class(), bytes(1024))

    def test_size_grows_with_students(self):
        cls = SchoolClass(name="x")
        before = encoded_size(cls)
        st = Student(given_name="y")
        cls.students.append(st)
        self.assertEqual(encoded_size(cls), before + encoded_size(st))


# ── Construction vs decode validation ─────────────────────────

class TestRangeEnforcement(unittest.TestCase):
    """Construction never validates; decode always does."""

    def test_age_below_minimum(self):
        st = Student(age=5, given_name="Kid")
        blob = encode(st)  # must not raise
        result = decode(Student, blob)
        self.assertFalse(result.ok)
        self.assertEqual(result.error, ERR_RANGE)

    def test_age_bounds_inclusive(self):
        for age, ok in [(10, True), (200, True), (9, False), (201, False),
                        (-1, False), (0, True)]:
            with self.subTest(age=age):
                result = decode(Student, encode(Student(age=age, given_name="a")))
                self.assertEqual(result.ok, ok)
                if not ok:
                    self.assertEqual(result.error, ERR_RANGE)

    def test_year_bounds(self):
        for year, ok in [(1000, True), (2100, True), (999, False), (2101, False)]:
            with self.subTest(year=year):
                result = decode(SchoolClass, encode(SchoolClass(year=year, name="c")))
                self.assertEqual(result.ok, ok)

    def test_nested_violation_fails_whole_class(self):
        cls = sample_class()
        cls.students[3].age = 5
        result = decode(SchoolClass, encode(cls))
        self.assertFalse(result.ok)
        self.assertEqual(result.error, ERR_RANGE)
        self.assertEqual(result.record, SchoolClass())
        self.assertEqual(result.consumed, 0)


class TestEnumBoundary(unittest.TestCase):
    def test_largest_valid_ordinal(self):
        result = decode(Student, encode(Student(given_name="a", status=Attendance.EXTERNAL)))
        self.assertTrue(result.ok)
        self.assertIs(result.record.status, Attendance.EXTERNAL)

    def test_sentinel_ordinal(self):
        result = decode(Student, encode(Student(given_name="a", status=len(Attendance))))
        self.assertFalse(result.ok)
        self.assertEqual(result.error, ERR_ENUM)

    def test_unknown_is_valid(self):
        result = decode(Student, encode(Student(given_name="a", status=0)))
        self.assertTrue(result.ok)
        self.assertIs(result.record.status, Attendance.UNKNOWN)


class TestFloatAndBool(unittest.TestCase):
    def test_non_finite_scores(self):
        for val in (float("nan"), float("inf"), float("-inf")):
            with self.subTest(val=val):
                result = decode(Student, encode(Student(given_name="a", performance_score=val)))
                self.assertFalse(result.ok)
                self.assertEqual(result.error, ERR_FLOAT)

    def test_integer_score_encodes_as_float(self):
        result = decode(Student, encode(Student(given_name="a", performance_score=3)))
        self.assertTrue(result.ok)
        self.assertEqual(result.record.performance_score, 3.0)
        self.assertIsInstance(result.record.performance_score, float)

    def test_bad_boolean_byte(self):
        st = Student(given_name="a")
        blob = bytearray(encode(st, align=8))
        # age(8) given(8+8) second(8) third(8) status(8) -> suspended at 48
        blob[48] = 0x02
        result = decode(Student, bytes(blob), align=8)
        self.assertFalse(result.ok)
        self.assertEqual(result.error, ERR_BOOL)


class TestStrings(unittest.TestCase):
    def test_required_given_name(self):
        result = decode(Student, encode(Student(given_name="")))
        self.assertEqual(result.error, ERR_STRING_REQUIRED)

    def test_optional_names_may_be_empty(self):
        result = decode(Student, encode(Student(given_name="a", second_name="", third_name="")))
        self.assertTrue(result.ok)

    def test_name_length_limit(self):
        at_limit = Student(given_name="x" * MAX_NAME_LEN_1)
        over = Student(given_name="x" * (MAX_NAME_LEN_1 + 1))
        self.assertTrue(decode(Student, encode(at_limit)).ok)
        self.assertEqual(decode(Student, encode(over)).error, ERR_STRING_LENGTH)

    def test_class_name_limit(self):
        over = SchoolClass(name="x" * (MAX_NAME_LEN_2 + 1))
        self.assertEqual(decode(SchoolClass, encode(over)).error, ERR_STRING_LENGTH)

    def test_limit_counts_utf8_units(self):
        """513 two-byte characters are 1026 units, over the 1024 limit."""
        st = Student(given_name="é" * 513)
        self.assertEqual(decode(Student, encode(st)).error, ERR_STRING_LENGTH)

    def test_notes_unlimited(self):
        st = Student(given_name="a", notes="n" * 100_000)
        self.assertTrue(decode(Student, encode(st)).ok)

    def test_invalid_utf8(self):
        blob = bytearray(encode(Student(given_name="abcd"), align=8))
        blob[16] = 0xFF  # first byte of given_name text
        result = decode(Student, bytes(blob), align=8)
        self.assertEqual(result.error, ERR_UTF8)


# ── Malformed input ───────────────────────────────────────────

class TestMalformedInput(unittest.TestCase):
    def test_empty_input(self):
        result = decode(SchoolClass, b"")
        self.assertFalse(result.ok)
        self.assertEqual(result.error, ERR_EMPTY)
        self.assertEqual(result.record, SchoolClass())

    def test_every_truncation_fails(self):
        blob = encode(_scenario_class())
        for cut in range(len(blob)):
            with self.subTest(cut=cut):
                result = decode(SchoolClass, blob[:cut])
                self.assertFalse(result.ok)
                self.assertEqual(result.consumed, 0)
                self.assertEqual(result.record, SchoolClass())

    def test_truncation_reports_overrun(self):
        blob = encode(sample_class())
        self.assertEqual(decode(SchoolClass, blob[:-1]).error, ERR_TRUNCATED)

    def test_trailing_bytes(self):
        blob = encode(_scenario_class())
        loose = decode(SchoolClass, blob + b"\x00" * 8)
        self.assertTrue(loose.ok)
        self.assertEqual(loose.consumed, len(blob))
        strict = decode(SchoolClass, blob + b"\x00" * 8, exact=True)
        self.assertEqual(strict.error, ERR_TRAILING)
        self.assertEqual(strict.record, SchoolClass())

    def test_failure_never_raises(self):
        for data in (b"\x00", b"\xff" * 7, b"\xff" * 64, bytes(range(256)) * 4):
            with self.subTest(n=len(data)):
                result = decode(SchoolClass, data)
                self.assertFalse(result.ok)
                self.assertIsInstance(result.message, str)

    def test_huge_student_count(self):
        cls = SchoolClass(name="c")
        blob = bytearray(encode(cls, align=8))
        # year(8) name(8+8) -> count at 24
        blob[24:32] = (2**63).to_bytes(8, sys.byteorder)
        result = decode(SchoolClass, bytes(blob) + bytes(64), align=8)
        self.assertFalse(result.ok)
        self.assertEqual(result.error, ERR_COUNT)


# ── Encode-side caller errors ─────────────────────────────────

class TestEncodeErrors(unittest.TestCase):
    def test_int_too_wide(self):
        with self.assertRaises(EncodeError) as ctx:
            encode(Student(age=2**40, given_name="a"))
        self.assertEqual(ctx.exception.code, ERR_VALUE)
        self.assertIn("age", str(ctx.exception))

    def test_wrong_python_types(self):
        bad = [
            Student(given_name=42),
            Student(given_name="a", suspended=1),
            Student(given_name="a", age=True),
            Student(given_name="a", performance_score="1.0"),
            Student(given_name="a", status=-1),
            Student(given_name="\ud800"),
        ]
        for st in bad:
            with self.subTest(st=st):
                with self.assertRaises(EncodeError):
                    encoded_size(st)

    def test_wrong_array_element(self):
        with self.assertRaises(EncodeError):
            encode(SchoolClass(name="c", students=[SchoolClass(name="d")]))

    def test_encode_error_is_value_error(self):
        with self.assertRaises(ValueError):
            encode(Student(age=2**40))
        self.assertTrue(issubclass(EncodeError, BinserError))

    def test_unknown_constructor_field(self):
        with self.assertRaises(TypeError):
            Student(nickname="x")


if __name__ == "__main__":
    unittest.main()
