#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Decode fuzzing for binser.
#
# Feeds three input categories into decode(SchoolClass, ...):
#   A) random byte blobs of random length
#   B) valid encodings with a few bytes flipped
#   C) valid encodings cut short, or with garbage appended
#
# decode must never raise, never report consuming more than it was given,
# and any record it accepts must re-encode to the same length and decode
# back to an equal record.  Any violation prints a repro payload and exits non-zero.

import os, sys, base64, random
from typing import Any, Dict, List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(ROOT, "implementations", "python"))

from binser import ALIGN_BY, Attendance, SchoolClass, Student, decode, encode, sample_class

SEED = int(os.environ.get("BINSER_SEED", "4242"))
ROUNDS = int(os.environ.get("BINSER_FUZZ_ROUNDS", "5000"))
MAX_SIZE = int(os.environ.get("BINSER_FUZZ_MAX_SIZE", "10000"))
ALIGN = int(os.environ.get("BINSER_ALIGN", str(ALIGN_BY)))

random.seed(SEED)

def b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def failure(label: str, data: bytes, detail: str, ctx: Dict[str, Any]) -> None:
    print("FAIL:", label)
    print("DETAIL:", detail)
    print("CTX:", ctx)
    print("INPUT_B64:", b64(data)[:4000])
    raise SystemExit(1)

# --- generators ---

def rand_blob() -> bytes:
    n = random.randint(1, MAX_SIZE)
    return random.randbytes(n)

def rand_name(nmax: int) -> str:
    n = random.randint(0, nmax)
    return "".join(chr(random.randint(0x20, 0x7E)) for _ in range(n))

def rand_class() -> SchoolClass:
    students: List[Student] = []
    for _ in range(random.randint(0, 4)):
        students.append(Student(
            age=random.choice([0, random.randint(10, 200)]),
            given_name=rand_name(12) or "x",
            second_name=rand_name(12),
            status=random.choice(list(Attendance)),
            suspended=random.random() < 0.2,
            performance_score=random.uniform(-100.0, 100.0),
            notes=rand_name(30),
        ))
    return SchoolClass(
        year=random.choice([0, random.randint(1000, 2100)]),
        name=rand_name(20) or "c",
        students=students,
        notes=rand_name(30),
    )

def mutate(blob: bytes) -> bytes:
    b = bytearray(blob)
    for _ in range(random.randint(1, 4)):
        i = random.randrange(len(b))
        b[i] = random.getrandbits(8)
    return bytes(b)

def reshape(blob: bytes) -> bytes:
    if random.random() < 0.7:
        return blob[:random.randrange(len(blob))]
    return blob + random.randbytes(random.randint(1, 64))

# --- oracle ---

def check(label: str, data: bytes, ctx: Dict[str, Any]) -> bool:
    try:
        result = decode(SchoolClass, data, align=ALIGN)
    except Exception as e:  # anything escaping decode is the bug we are hunting
        failure(label, data, "decode raised {!r}".format(e), ctx)
    if not result.ok:
        if result.consumed != 0 or result.record != SchoolClass():
            failure(label, data, "failed decode returned a non-default result", ctx)
        return False
    if result.consumed > len(data):
        failure(label, data, "consumed {} of {}".format(result.consumed, len(data)), ctx)
    # Padding is ignored on decode, so compare records, not bytes.
    again = encode(result.record, align=ALIGN)
    if len(again) != result.consumed:
        failure(label, data, "re-encoded {} bytes, consumed {}".format(len(again), result.consumed), ctx)
    back = decode(SchoolClass, again, align=ALIGN)
    if not back.ok or back.record != result.record:
        failure(label, data, "accepted record does not survive a round-trip", ctx)
    return True

def main() -> int:
    base = encode(sample_class(), align=ALIGN)
    accepted = 0
    for i in range(ROUNDS):
        r = random.random()

        # A) random blobs
        if r < 0.40:
            accepted += check("A random", rand_blob(), {"round": i})
            continue

        src = base if random.random() < 0.3 else encode(rand_class(), align=ALIGN)

        # B) byte flips
        if r < 0.75:
            accepted += check("B mutate", mutate(src), {"round": i})
            continue

        # C) truncation / trailing garbage
        data = reshape(src)
        ok = check("C reshape", data, {"round": i})
        if len(data) < len(src) and ok:
            failure("C reshape", data, "truncated encoding accepted", {"round": i})
        accepted += ok

    print(f"OK: fuzz rounds={ROUNDS} seed={SEED} align={ALIGN} accepted={accepted}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
