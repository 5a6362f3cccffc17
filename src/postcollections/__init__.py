"""postcollections - ordered collections of posts for a publishing platform.

Collections are either manual, ordered by editors, or automatic, filled by
a filter expression over post attributes.
"""

__version__ = "0.1.0"

from postcollections.domain.entities.collection import Collection, CollectionType

__all__ = ["Collection", "CollectionType", "__version__"]
