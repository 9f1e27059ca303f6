#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Codec invariants (property tests) for binser.
#
# This runner:
# - generates random valid SchoolClass records within the domain limits
# - checks size-query / fill agreement, round-trip, and truncation safety
# - checks the alignment law over a range of sizes and alignments
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import os, sys, math, random
from typing import List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(ROOT, "implementations", "python"))

from binser import (
    ALIGN_BY,
    Attendance,
    SchoolClass,
    Student,
    aligned,
    decode,
    encode,
    encode_into,
    encoded_size,
)

SEED = int(os.environ.get("BINSER_SEED", "1337"))
TRIALS = int(os.environ.get("BINSER_TRIALS", "2000"))
MAX_STUDENTS = int(os.environ.get("BINSER_GEN_MAX_STUDENTS", "6"))
MAX_STR = int(os.environ.get("BINSER_GEN_MAX_STR", "24"))
ALIGNMENTS = [1, 2, 4, 8, 16]

random.seed(SEED)

def rand_text(nmin: int = 0) -> str:
    # Mostly ASCII with some multi-byte code points; never surrogates.
    out = []
    for _ in range(random.randint(nmin, MAX_STR)):
        r = random.random()
        if r < 0.80:
            out.append(chr(random.randint(0x20, 0x7E)))
        elif r < 0.95:
            out.append(chr(random.randint(0xA0, 0xD7FF)))
        else:
            out.append(chr(random.randint(0x10000, 0x10FFFF)))
    return "".join(out)

def rand_student() -> Student:
    return Student(
        age=random.choice([0, 10, 200, random.randint(10, 200)]),
        given_name=rand_text(1),
        second_name=rand_text(),
        third_name=rand_text() if random.random() < 0.3 else "",
        status=random.choice(list(Attendance)),
        suspended=random.random() < 0.5,
        performance_score=random.choice([0.0, -0.0, 1e308, -1e-308, random.uniform(-1e6, 1e6)]),
        notes=rand_text(),
    )

def rand_class() -> SchoolClass:
    students: List[Student] = [rand_student() for _ in range(random.randint(0, MAX_STUDENTS))]
    return SchoolClass(
        year=random.choice([0, 1000, 2100, random.randint(1000, 2100)]),
        name=rand_text(1),
        students=students,
        notes=rand_text(),
    )

def fail(msg: str, cls: SchoolClass, align: int) -> int:
    print("INVARIANT FAIL:", msg)
    print("ALIGN:", align)
    print("RECORD:", repr(cls)[:2000])
    return 1

def main() -> int:
    # (0) Alignment law
    for a in ALIGNMENTS:
        if aligned(0, a) != 0:
            print("INVARIANT FAIL: aligned(0) != 0 for align", a)
            return 1
        for n in range(0, 257):
            an = aligned(n, a)
            if an != aligned(an, a) or an % a or an < n or an - n >= a:
                print("INVARIANT FAIL: alignment law", n, a)
                return 1

    for t in range(TRIALS):
        cls = rand_class()
        align = random.choice(ALIGNMENTS + [ALIGN_BY])

        # (1) Size query agrees with fill
        size = encoded_size(cls, align=align)
        blob = encode(cls, align=align)
        if len(blob) != size:
            return fail("size query {} != encoded {}".format(size, len(blob)), cls, align)
        buf = bytearray(size + random.randint(0, 16))
        if encode_into(cls, buf, align=align) != size or bytes(buf[:size]) != blob:
            return fail("encode_into disagrees with encode", cls, align)
        if size % align:
            return fail("encoded size {} not a multiple of {}".format(size, align), cls, align)

        # (2) Round-trip
        res = decode(SchoolClass, blob, align=align, exact=True)
        if not res.ok or res.record != cls or res.consumed == 0:
            return fail("round-trip: {} {}".format(res.error, res.message), cls, align)
        for s_in, s_out in zip(cls.students, res.record.students):
            if math.copysign(1.0, s_in.performance_score) != math.copysign(1.0, s_out.performance_score):
                return fail("float sign lost", cls, align)

        # (3) Truncation safety
        cut = random.randrange(len(blob))
        if decode(SchoolClass, blob[:cut], align=align).ok:
            return fail("truncated to {} of {} accepted".format(cut, len(blob)), cls, align)

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
