"""
Entity identifiers.

Identifiers are random UUID4 values in canonical lowercase text form. They
are assigned once, as the primary-key default, and carry no store-specific
meaning, so they can be embedded in public verification URLs.
"""
import re
import uuid

from agridirect.core.errors import InvalidIdentifierError

_CANONICAL = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$")


def generate() -> str:
    return str(uuid.uuid4())


def validate(candidate) -> bool:
    """Syntactic check only; never touches the store."""
    return isinstance(candidate, str) and bool(_CANONICAL.match(candidate))


def require_valid(candidate, label: str = "identifier") -> str:
    if not validate(candidate):
        raise InvalidIdentifierError(f"Invalid {label}: {candidate!r}")
    return candidate
