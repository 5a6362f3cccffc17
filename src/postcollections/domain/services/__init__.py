"""Domain services for postcollections.

The collection service is imported from its own module,
``postcollections.domain.services.collection_service``, since it depends on
the entities that use these helpers.
"""

from postcollections.domain.services.slug_generator import SlugGenerator

__all__ = [
    "SlugGenerator",
]
