# shop/utils/slug.py
import re
import unicodedata
from uuid import uuid4


def slugify(value: str) -> str:
    """Lowercase, ascii-only, hyphen separated form of a display name."""
    ascii_value = (
        unicodedata.normalize("NFKD", value or "")
        .encode("ascii", "ignore")
        .decode("ascii")
        .lower()
    )
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_value).strip("-")
    if not slug:
        slug = uuid4().hex
    return slug


def with_suffix(base: str, n: int) -> str:
    # base, base-1, base-2, ...
    return base if n == 0 else f"{base}-{n}"
