"""
URL slugs for blog posts
"""
import re
from typing import Optional

from sqlalchemy.orm import Session

from ..db.models import BlogPost

_INVALID_CHARS = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_DASHES = re.compile(r"-+")

FALLBACK_SLUG = "post"


def slugify(value: str) -> str:
    """
    Lowercase, strip everything but letters, digits, spaces and dashes,
    then join words with single dashes

    >>> slugify("  Hello, World!  ")
    'hello-world'
    """
    slug = (value or "").lower().strip()
    slug = _INVALID_CHARS.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    return _DASHES.sub("-", slug)


def generate_unique_slug(db: Session, title: str, exclude_id: Optional[str] = None) -> str:
    """
    First free slug among base, base-1, base-2, ...

    Args:
        exclude_id: post being renamed; its own slug does not count as taken
    """
    base = slugify(title) or FALLBACK_SLUG
    slug = base
    counter = 1

    while True:
        query = db.query(BlogPost.id).filter(BlogPost.slug == slug)
        if exclude_id:
            query = query.filter(BlogPost.id != exclude_id)
        if query.first() is None:
            return slug
        slug = f"{base}-{counter}"
        counter += 1
