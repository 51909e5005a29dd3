"""Turn decision text into short, filesystem-safe slugs."""

from __future__ import annotations

import re

MAX_SLUG_LENGTH = 30
FALLBACK_SLUG = "decision"

# Domain terms transliterated before generic normalisation. Order matters:
# "5万円" must be replaced before the bare "万円".
TERM_MAPPINGS: tuple[tuple[str, str], ...] = (
    ("価格", "pricing"),
    ("月額", "monthly"),
    ("5万円", "50k"),
    ("万円", "k"),
    ("API", "api"),
    ("REST", "rest"),
    ("GraphQL", "graphql"),
    ("設計", "design"),
    ("ローンチ", "launch"),
    ("予定", "schedule"),
)

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")
_EDGE_HYPHENS = re.compile(r"^-+|-+$")


def slugify(content: str | None) -> str:
    """Build a slug of at most 30 characters matching ``^[a-z0-9-]+$``.

    Empty input, or input with nothing transliterable, yields ``"decision"``.
    """
    if not content or not content.strip():
        return FALLBACK_SLUG

    slug = content.strip().lower()
    for term, replacement in TERM_MAPPINGS:
        slug = re.sub(re.escape(term), replacement, slug, flags=re.IGNORECASE)

    slug = _NON_SLUG_CHARS.sub("-", slug)
    slug = _EDGE_HYPHENS.sub("", slug)

    if len(slug) > MAX_SLUG_LENGTH:
        slug = slug[:MAX_SLUG_LENGTH].rstrip("-")

    return slug or FALLBACK_SLUG


def decision_file_name(meeting_date: str, content: str | None) -> str:
    """File name for a decision: ``{meeting_date}_{slug}.md``."""
    return f"{meeting_date}_{slugify(content)}.md"
