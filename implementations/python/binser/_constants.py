"""binser constants — alignment and the sample-domain limits.

The wire format is native byte order with standard sizes.  Changing
ALIGN_BY changes the wire format: both sides must agree on it.
"""

from __future__ import annotations

import struct

# Align every field to the platform pointer width (8 on 64-bit builds).
# Must be a power of two.  ALIGN_BY = 1 disables padding entirely.
ALIGN_BY: int = struct.calcsize("P")

# Text is stored as UTF-8 code units; one unit per byte.
CHAR_SIZE: int = 1

# ── Sample domain limits (all inclusive) ─────────────────────
# Zero is the "unknown" sentinel for ages and years and is never
# range-checked.
MIN_ALLOWED_AGE: int = 10
MAX_ALLOWED_AGE: int = 200

MIN_ALLOWED_YEAR: int = 1000
MAX_ALLOWED_YEAR: int = 2100

# Maximum lengths in characters.
MAX_NAME_LEN_1: int = 1024  # student names
MAX_NAME_LEN_2: int = 256   # class name
