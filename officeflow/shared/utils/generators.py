"""Primary key generation for every table."""

from cuid2 import cuid_wrapper

_next_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new CUID2 string (collision resistant, URL safe)."""
    return str(_next_cuid())
