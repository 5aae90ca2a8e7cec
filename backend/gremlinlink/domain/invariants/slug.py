import re

from .exceptions import InvariantViolation

SLUG_MAX_LENGTH = 255
SLUG_PATTERN = re.compile(r"^[a-z0-9_-]+$")

# Paths owned by the application itself
RESERVED_SLUGS = frozenset({
    "admin", "api", "auth", "login", "logout", "signup", "dashboard",
    "settings", "profile", "help", "about", "contact", "privacy",
    "terms", "robots", "sitemap", "favicon", "manifest", "sw",
    "page", "post", "image", "link", "block", "edit", "delete",
    "create", "new", "update", "view", "preview", "draft", "published",
    "swagger", "openapi", "static",
})


def is_reserved(slug):
    return slug in RESERVED_SLUGS


def assert_slug(slug):
    if not isinstance(slug, str) or not slug:
        raise InvariantViolation("Slug is required.")

    if len(slug) > SLUG_MAX_LENGTH:
        raise InvariantViolation(f"Slug must be at most {SLUG_MAX_LENGTH} characters.")

    if not SLUG_PATTERN.match(slug):
        raise InvariantViolation(
            "Slug must contain only lowercase letters, numbers, hyphens, and underscores."
        )

    if is_reserved(slug):
        raise InvariantViolation(f"Slug '{slug}' is reserved.")
