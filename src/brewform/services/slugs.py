"""URL slug helpers."""

import re
import secrets
import string
import unicodedata

_SUFFIX_ALPHABET = string.ascii_lowercase + string.digits
_SUFFIX_LENGTH = 8
_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(text: str) -> str:
    """Lowercase ASCII slug with hyphens between alphanumeric runs."""
    ascii_text = (
        unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    )
    slug = re.sub(r"[^a-zA-Z0-9]+", "-", ascii_text).strip("-").lower()
    return slug or "recipe"


def unique_slug(text: str) -> str:
    """Slug with a short random suffix; collisions are not retried."""
    suffix = "".join(
        secrets.choice(_SUFFIX_ALPHABET) for _ in range(_SUFFIX_LENGTH)
    )
    return f"{slugify(text)}-{suffix}"


def is_valid_slug(slug: str) -> bool:
    """Return True when the value is a well-formed slug."""
    return bool(_SLUG_RE.match(slug))


def comparison_token() -> str:
    """Random 16-character URL-safe share token."""
    return secrets.token_urlsafe(12)
