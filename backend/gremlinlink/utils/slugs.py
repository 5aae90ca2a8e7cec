import re
import secrets
import time
import unicodedata

from gremlinlink.domain.invariants.slug import SLUG_MAX_LENGTH, is_reserved

_slug_strip_re = re.compile(r"[^\w\s-]")
_slug_hyphenate_re = re.compile(r"[-\s]+")

MIN_GENERATED_LENGTH = 3


def slugify(value: str) -> str:
    if not value:
        return ""
    value = (
        unicodedata.normalize("NFKD", value)
        .encode("ascii", "ignore")
        .decode("ascii")
    )
    value = _slug_strip_re.sub("", value).strip().lower()
    return _slug_hyphenate_re.sub("-", value).strip("-")[:SLUG_MAX_LENGTH]


def is_slug_available(slug, store) -> bool:
    return not is_reserved(slug) and not store.slug_exists(slug)


def generate_unique_slug(title, store) -> str:
    """
    Suggest a free slug for `title`: the slugified title, then
    `<slug>-1` .. `<slug>-100`, then a timestamp suffix.
    """
    base = slugify(title)
    if len(base) < MIN_GENERATED_LENGTH:
        base = f"content-{base}".rstrip("-")

    if is_slug_available(base, store):
        return base

    for i in range(1, 101):
        candidate = f"{base[:SLUG_MAX_LENGTH - 4]}-{i}"
        if is_slug_available(candidate, store):
            return candidate

    return f"{base[:SLUG_MAX_LENGTH - 14]}-{int(time.time() * 1000)}"


def child_slug(parent_slug: str, renderer: str) -> str:
    """Globally unique slug for a child block; children are never looked up by it."""
    suffix = f"-{renderer}-{secrets.token_hex(4)}"
    return f"{parent_slug[:SLUG_MAX_LENGTH - len(suffix)]}{suffix}"
