"""Record id generation."""

import secrets
import string
import threading
import time

_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 5

_lock = threading.Lock()
_last_ms = 0


def to_base36(number: int) -> str:
    """Encode a non-negative integer in lowercase base 36."""
    if number < 0:
        raise ValueError("number must be non-negative")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def _next_millis() -> int:
    """Current epoch milliseconds, strictly increasing within the process."""
    global _last_ms
    with _lock:
        now = int(time.time() * 1000)
        if now <= _last_ms:
            now = _last_ms + 1
        _last_ms = now
        return now


def generate_id() -> str:
    """Return a compact id: base-36 timestamp followed by a random suffix.

    e.g. ``lx3k9a2f7q1zb``
    """
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_SUFFIX_LENGTH))
    return f"{to_base36(_next_millis())}{suffix}"
