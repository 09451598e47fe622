# Services package init
"""
Bird Catalogue — Services Layer
=================================

Service Inventory:
    - BirdService:  bird listing, subspecies hierarchy, create/delete
    - ListService:  lists and list membership
    - base:         payload validation, id parsing, write error translation

Services take an AsyncSession and return response schemas (or None when a
resource is absent); they never build HTTP responses.
"""
