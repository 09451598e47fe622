# Routes package init
"""
Bird Catalogue — API Routes Package
=====================================

Route Inventory:
    - birds.py:       /birds, /birds/{id}, /birds/{id}/subspecies
    - lists.py:       /lists, /lists/{id}, /lists/{id}/birds[/{birdId}]
    - bird_lists.py:  /bird-lists, /bird-lists/{id}  (alias of /lists)
    - health.py:      GET /health

Routes stay thin: read the request, call a service, attach links, pick the
status code. Anything that touches the database lives in services.
"""
