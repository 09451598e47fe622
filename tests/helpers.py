"""Request bodies shared by the service and route tests."""

from typing import Any, Dict


def bird_payload(common_name: str, scientific_name: str, sort: int, **extra: Any) -> Dict[str, Any]:
    """Valid POST /birds body with the given names and sort position."""
    payload = {
        "commonName": common_name,
        "scientificName": scientific_name,
        "familyName": "Test family",
        "family": "Testidae",
        "order": "Passeriformes",
        "sort": sort,
    }
    payload.update(extra)
    return payload


def list_payload(name: str, description: str = "A list of birds") -> Dict[str, Any]:
    return {"name": name, "description": description}
