"""Slug generation utilities for cocktail and ingredient identifiers.

Slugs are the stable, human-readable `_id` used to name exported files.

Examples:
    >>> create_slug("Negroni Sbagliato")
    'negroni-sbagliato'

    >>> create_slug("Crème de Cassis")
    'creme-de-cassis'
"""

import re
import unicodedata
from typing import Optional

from sqlalchemy.orm import Session


def create_slug(
    name: str,
    session: Optional[Session] = None,
    model=None,
    bar_id: Optional[int] = None,
) -> str:
    """Generate a URL-safe slug from a display name.

    Algorithm:
        1. Normalize Unicode to NFKD and drop non-ASCII characters
        2. Lowercase
        3. Replace runs of whitespace, underscores and hyphens with one hyphen
        4. Remove everything that is not alphanumeric or a hyphen
        5. Strip leading/trailing hyphens
        6. If a session and model are given, append -1, -2... until the slug
           is unique within the bar

    Args:
        name: Display name to convert
        session: Optional database session for uniqueness checking
        model: Mapped class with `slug` and `bar_id` columns
        bar_id: Bar scope for the uniqueness check

    Returns:
        Slug string (lowercase, alphanumeric + hyphens)

    Raises:
        ValueError: If the name produces an empty slug
    """
    normalized = unicodedata.normalize("NFKD", name)
    slug = normalized.encode("ascii", "ignore").decode("ascii").lower()
    slug = re.sub(r"[\s_\-]+", "-", slug)
    slug = re.sub(r"[^a-z0-9\-]", "", slug)
    slug = re.sub(r"-{2,}", "-", slug).strip("-")

    if not slug:
        raise ValueError(f"Cannot create slug from name: {name!r}")

    if session is None or model is None:
        return slug

    candidate = slug
    counter = 1
    while _slug_exists(session, model, candidate, bar_id):
        candidate = f"{slug}-{counter}"
        counter += 1
    return candidate


def _slug_exists(session: Session, model, slug: str, bar_id: Optional[int]) -> bool:
    query = session.query(model).filter(model.slug == slug)
    if bar_id is not None:
        query = query.filter(model.bar_id == bar_id)
    return query.first() is not None
