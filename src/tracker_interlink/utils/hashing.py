"""
Hashing utilities.

Provides deterministic identifiers for derived analysis objects.
"""

import hashlib


def generate_insight_id(parts: list[str], algorithm: str = "sha256", length: int = 12) -> str:
    """
    Generate a deterministic identifier from ordered parts.

    Args:
        parts: Ordered string components identifying the object.
        algorithm: Hash algorithm to use.
        length: Number of hex characters to keep.

    Returns:
        Hex identifier prefixed with "insight-".
    """
    hash_string = "|".join(parts)

    hash_func = hashlib.new(algorithm)
    hash_func.update(hash_string.encode("utf-8"))

    return f"insight-{hash_func.hexdigest()[:length]}"
