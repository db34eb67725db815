from __future__ import annotations


def _string_hash(value: str) -> int:
    h = 0
    for char in value:
        h = (ord(char) + (h << 5) - h) & 0xFFFFFFFF
    return h


def generate_color(label: str) -> str:
    """Map a label name to a stable six-digit hex color (no leading ``#``)."""
    h = _string_hash(label)
    return "".join(f"{(h >> (8 * i)) & 0xFF:02x}" for i in range(3))
