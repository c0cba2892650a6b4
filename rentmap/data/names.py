"""Neighbourhood / zone name canonicalization.

Every index key and every lookup goes through canonical_name so that
"Downtown", " downtown " and "DOWNTOWN" resolve to the same record.
"""


def canonical_name(name: str | None) -> str | None:
    """Uppercase and trim a name. Returns None for None or blank input."""
    if name is None:
        return None
    canonical = str(name).strip().upper()
    return canonical or None
