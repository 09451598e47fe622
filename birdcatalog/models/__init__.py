# Models package init
"""
Bird Catalogue — ORM Models
=============================

Importing this package registers every table on Base.metadata.
"""

from birdcatalog.models.bird import Bird
from birdcatalog.models.bird_list import BirdList, ListBird

__all__ = ["Bird", "BirdList", "ListBird"]
