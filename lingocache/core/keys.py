"""
Cache key derivation.

Two key spaces share one store:

    hash:<hash(text)>:<target>                      content-addressed
    res:<type>:<id>:<field>:<target>                application-addressed

The same rule picks the in-flight key used for request coalescing.
"""

from __future__ import annotations

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def hash_text(text: str) -> str:
    """
    Cheap deterministic string hash.

    Polynomial rolling hash (h * 31 + unit) over UTF-16 code units, wrapped
    to 32 bits and read back as a signed integer. The absolute value is rendered
    in base 36, so the empty string hashes to "0".
    """
    data = text.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return _to_base36(abs(h))


def hash_key(text: str, target: str) -> str:
    return f"hash:{hash_text(text)}:{target}"


def resource_key(resource_type: str, resource_id: str, field: str, target: str) -> str:
    return f"res:{resource_type}:{resource_id}:{field}:{target}"


def has_resource_info(
    resource_type: str | None = None,
    resource_id: str | None = None,
    field: str | None = None,
) -> bool:
    """True only when type, id and field are all present and non-empty."""
    return bool(resource_type and resource_id and field)


def cache_key(
    text: str,
    target: str,
    resource_type: str | None = None,
    resource_id: str | None = None,
    field: str | None = None,
) -> str:
    """Resource key when the request is resource-scoped, hash key otherwise."""
    if has_resource_info(resource_type, resource_id, field):
        return resource_key(resource_type, resource_id, field, target)
    return hash_key(text, target)
