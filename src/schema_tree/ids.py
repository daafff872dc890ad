"""Identifier and timestamp helpers.

Ids are ``"<epoch-ms>-<9 base36 chars>"``: a time component plus a random
suffix. Collisions are possible in principle and treated as negligible.
"""

from __future__ import annotations

import secrets
import string
import time

__all__ = ["generate_id", "now_ms"]

_BASE36 = string.digits + string.ascii_lowercase


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def generate_id() -> str:
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"{now_ms()}-{suffix}"
