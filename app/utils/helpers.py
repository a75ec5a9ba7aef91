"""
Helper functions for common operations.
Text shortening and park deep-link paths used in notifications.
"""
import re
from typing import Optional

_NON_SLUG_CHARS = re.compile(r"[^\w\s-]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_DASH_RUNS = re.compile(r"-+")


def truncate_text(text: str, max_length: int = 100, suffix: str = "") -> str:
    """
    Cut text to its first max_length characters, appending suffix when cut.

    Args:
        text: Text to truncate
        max_length: Number of characters kept from the original
        suffix: Appended only if something was removed

    Returns:
        Truncated text

    Example:
        >>> truncate_text("Great park, lots of shade", 10, "...")
        'Great park...'
    """
    if len(text) <= max_length:
        return text

    return text[:max_length] + suffix


def generate_park_slug(name: str) -> str:
    """
    URL-friendly slug from a park name.

    Example:
        >>> generate_park_slug("Sunnyside Dog Park!")
        'sunnyside-dog-park'
    """
    slug = name.lower().strip()
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = _WHITESPACE.sub("-", slug)
    slug = _DASH_RUNS.sub("-", slug)
    return slug.strip("-")


def build_park_path(park_id: str, name: Optional[str], state: Optional[str]) -> str:
    """
    Deep-link path for a park: "<state-slug>/<name-slug>".

    Falls back to the park ID when the name or state is unknown.

    Example:
        >>> build_park_path("p1", "Sunnyside Dog Park", "New York")
        'new-york/sunnyside-dog-park'
    """
    if not name or not state:
        return park_id

    state_slug = _WHITESPACE.sub("-", state.lower())
    return f"{state_slug}/{generate_park_slug(name)}"
