import re

from slugify import slugify

# Punctuation removed outright instead of turning into a separator
_REMOVED = re.compile(r"[*+~.()'\"!:@]")


def generate_slug(text: str) -> str:
    """
    Derive a URL-safe slug from human-readable text.

    Deterministic: the same input always yields the same slug.

    Example:
        >>> generate_slug("Web Development")
        'web-development'
        >>> generate_slug("Node.js Tips")
        'nodejs-tips'
    """
    return slugify(_REMOVED.sub("", text))
