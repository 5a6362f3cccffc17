"""Slug generator service.

Generates URL-friendly slugs from collection titles.
"""

import re
import unicodedata


class SlugGenerator:
    """Generate URL-friendly slugs.

    Slug rules:
    - At most 191 characters
    - Lowercase alphanumerics and hyphens only
    - No leading, trailing or repeated hyphens
    """

    MAX_LENGTH = 191

    @classmethod
    def generate(cls, text: str, fallback: str = "collection") -> str:
        """Generate a slug from text.

        Args:
            text: The text to convert to a slug (e.g., a collection title).
            fallback: Slug returned when the text has no usable characters.

        Returns:
            URL-friendly slug.

        Examples:
            >>> SlugGenerator.generate("Featured Posts")
            'featured-posts'
            >>> SlugGenerator.generate("Café & Bar, 2024!")
            'cafe-bar-2024'
            >>> SlugGenerator.generate("???")
            'collection'
        """
        # Normalize unicode characters and drop anything non-ASCII
        normalized = unicodedata.normalize("NFKD", text)
        ascii_text = normalized.encode("ascii", "ignore").decode("ascii")

        slug = ascii_text.lower()

        # Replace runs of special characters with a single hyphen
        slug = re.sub(r"[^a-z0-9]+", "-", slug)
        slug = slug.strip("-")

        if len(slug) > cls.MAX_LENGTH:
            slug = slug[: cls.MAX_LENGTH].rstrip("-")

        return slug or fallback
