import hashlib


def deterministic_id(*parts: object, length: int = 40) -> str:
    """Generate a stable hex identifier from the given parts."""
    raw = "|".join("" if p is None else str(p) for p in parts)
    return hashlib.sha256(raw.encode()).hexdigest()[:length]
