"""
Bird Catalogue — /bird-lists Alias
====================================

The lists collection is also reachable under its earlier name. Same
handlers as /lists without the membership endpoints; `self` links point
at /bird-lists.
"""

from birdcatalog.routes.lists import build_router

router = build_router("/bird-lists", kind="bird-lists", tag="Bird Lists", with_members=False)
