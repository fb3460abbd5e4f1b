"""Short public order codes.

A tracking code is ``TM-`` followed by six characters from an alphabet of
uppercase letters and digits with the look-alikes ``0 O 1 I`` removed, so a
customer can read it off a receipt and type it back. 32**6 is roughly one
billion codes, far above the number of orders the platform will ever hold,
so rejection sampling terminates after a handful of draws in practice.
"""

from __future__ import annotations

import secrets
from typing import Callable

from qrorder.domain.common.ids import TrackingCode

TRACKING_CODE_PREFIX = "TM-"
TRACKING_CODE_LENGTH = 6
TRACKING_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
MAX_GENERATION_ATTEMPTS = 200


class TrackingCodeSpaceExhaustedError(Exception):
    pass


def generate_unique_code(
    exists: Callable[[str], bool],
    *,
    prefix: str = TRACKING_CODE_PREFIX,
    length: int = TRACKING_CODE_LENGTH,
    alphabet: str = TRACKING_CODE_ALPHABET,
    max_attempts: int = MAX_GENERATION_ATTEMPTS,
    choice: Callable[[str], str] = secrets.choice,
) -> TrackingCode:
    for _ in range(max_attempts):
        candidate = prefix + "".join(choice(alphabet) for _ in range(length))
        if not exists(candidate):
            return TrackingCode(candidate)
    raise TrackingCodeSpaceExhaustedError(
        f"no free tracking code after {max_attempts} attempts"
    )


def normalize_tracking_code(raw: str) -> str:
    return raw.strip().upper()


def is_well_formed(code: str, *, prefix: str = TRACKING_CODE_PREFIX) -> bool:
    body = code[len(prefix) :] if code.startswith(prefix) else None
    return (
        body is not None
        and len(body) == TRACKING_CODE_LENGTH
        and all(char in TRACKING_CODE_ALPHABET for char in body)
    )
