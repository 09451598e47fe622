"""
Bird Catalogue — /birds Endpoint Tests
========================================

End-to-end through the FastAPI app: routing, validation, error envelope,
hypermedia and pagination links.
"""

import uuid

import pytest

from birdcatalog.config import settings
from helpers import bird_payload


def assert_envelope(response, status_code, error):
    body = response.json()
    assert response.status_code == status_code
    assert body["statusCode"] == status_code
    assert body["error"] == error
    assert isinstance(body["message"], str) and body["message"]


class TestListBirds:

    @pytest.mark.asyncio
    async def test_default_page(self, client, seeded_birds):
        response = await client.get("/birds")

        assert response.status_code == 200
        body = response.json()
        assert body["page"] == 1
        assert body["perPage"] == 20
        assert body["total"] == 5
        assert body["links"] == {"next": None, "previous": None}
        assert [b["commonName"] for b in body["data"][:3]] == ["Robin", "Eagle", "Crow"]

    @pytest.mark.asyncio
    async def test_bird_fields_are_camel_case(self, client, seeded_birds):
        response = await client.get("/birds", params={"perPage": 1})

        robin = response.json()["data"][0]
        assert set(robin) == {
            "id", "commonName", "scientificName", "familyName", "family", "order",
            "alternativeNames", "sort", "speciesId", "subspecies", "createdAt",
            "updatedAt", "links",
        }
        assert robin["links"] == {"self": f"http://test/birds/{seeded_birds['robin'].id}"}

    @pytest.mark.asyncio
    async def test_pagination_links(self, client, seeded_birds):
        response = await client.get("/birds?page=2&perPage=1")

        body = response.json()
        assert [b["commonName"] for b in body["data"]] == ["Eagle"]
        assert body["links"]["next"] == "http://test/birds?page=3&perPage=1"
        assert body["links"]["previous"] == "http://test/birds?page=1&perPage=1"

    @pytest.mark.asyncio
    async def test_unrelated_parameters_are_preserved(self, client, seeded_birds):
        response = await client.get("/birds?region=eu&page=2&perPage=1")

        links = response.json()["links"]
        assert links["next"] == "http://test/birds?region=eu&page=3&perPage=1"
        assert links["previous"] == "http://test/birds?region=eu&page=1&perPage=1"

    @pytest.mark.asyncio
    async def test_repeated_parameters_are_preserved(self, client, seeded_birds):
        response = await client.get("/birds?tag=a&tag=b&page=2&perPage=1")

        links = response.json()["links"]
        assert links["next"] == "http://test/birds?tag=a&tag=b&page=3&perPage=1"
        assert links["previous"] == "http://test/birds?tag=a&tag=b&page=1&perPage=1"

    @pytest.mark.asyncio
    async def test_defaults_are_added_to_links(self, client, seeded_birds):
        response = await client.get("/birds?perPage=2")

        assert response.json()["links"]["next"] == "http://test/birds?perPage=2&page=2"

    @pytest.mark.asyncio
    async def test_filter_by_common_name_prefix(self, client, seeded_birds):
        response = await client.get("/birds", params={"q": "cr"})

        body = response.json()
        assert body["total"] == 1
        assert body["data"][0]["commonName"] == "Crow"

    @pytest.mark.asyncio
    async def test_filter_by_scientific_name(self, client, seeded_birds):
        response = await client.get("/birds", params={"scientificName": "aquila chrysaetos"})

        assert [b["commonName"] for b in response.json()["data"]] == ["Eagle"]

    @pytest.mark.asyncio
    async def test_zero_per_page(self, client, seeded_birds):
        response = await client.get("/birds?perPage=0")

        body = response.json()
        assert response.status_code == 200
        assert body["data"] == []
        assert body["total"] == 5
        assert body["links"]["next"] == "http://test/birds?perPage=0&page=2"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "query",
        [
            "page=0",
            "perPage=-1",
            "page=abc",
            "page=2147483648",
            "page=100000000000000000000&perPage=1",
            "perPage=100000000000000000000",
        ],
    )
    async def test_invalid_pagination_is_bad_request(self, client, query):
        response = await client.get(f"/birds?{query}")

        assert_envelope(response, 400, "Bad Request")

    @pytest.mark.asyncio
    async def test_public_url_prefixes_links(self, client, seeded_birds, monkeypatch):
        monkeypatch.setattr(settings, "public_url", "https://birds.example")

        response = await client.get("/birds?perPage=1")

        body = response.json()
        assert body["links"]["next"] == "https://birds.example/birds?perPage=1&page=2"
        assert body["data"][0]["links"]["self"].startswith("https://birds.example/birds/")


class TestGetBird:

    @pytest.mark.asyncio
    async def test_species_links_to_subspecies(self, client, seeded_birds):
        eagle_id = seeded_birds["eagle"].id

        response = await client.get(f"/birds/{eagle_id}")

        body = response.json()
        assert response.status_code == 200
        assert body["subspecies"] == 2
        assert body["speciesId"] is None
        assert body["links"] == {
            "self": f"http://test/birds/{eagle_id}",
            "subspecies": f"http://test/birds/{eagle_id}/subspecies",
        }

    @pytest.mark.asyncio
    async def test_subspecies_links_to_species(self, client, seeded_birds):
        eagle_id = seeded_birds["eagle"].id
        golden_id = seeded_birds["eagle_a"].id

        response = await client.get(f"/birds/{golden_id}")

        body = response.json()
        assert body["speciesId"] == str(eagle_id)
        assert body["subspecies"] == 0
        assert body["links"]["species"] == f"http://test/birds/{eagle_id}"

    @pytest.mark.asyncio
    async def test_missing_bird(self, client):
        response = await client.get(f"/birds/{uuid.uuid4()}")
        assert_envelope(response, 404, "Not Found")

    @pytest.mark.asyncio
    async def test_non_uuid_id_is_not_found(self, client):
        response = await client.get("/birds/robin")
        assert_envelope(response, 404, "Not Found")


class TestSubspecies:

    @pytest.mark.asyncio
    async def test_lists_subspecies(self, client, seeded_birds):
        eagle_id = seeded_birds["eagle"].id

        response = await client.get(f"/birds/{eagle_id}/subspecies?perPage=1")

        body = response.json()
        assert body["total"] == 2
        assert [b["commonName"] for b in body["data"]] == ["Golden Eagle"]
        assert body["links"]["next"] == f"http://test/birds/{eagle_id}/subspecies?perPage=1&page=2"
        assert body["data"][0]["links"]["species"] == f"http://test/birds/{eagle_id}"

    @pytest.mark.asyncio
    async def test_species_without_subspecies(self, client, seeded_birds):
        response = await client.get(f"/birds/{seeded_birds['robin'].id}/subspecies")

        assert response.status_code == 200
        assert response.json()["data"] == []

    @pytest.mark.asyncio
    async def test_unknown_species(self, client):
        response = await client.get(f"/birds/{uuid.uuid4()}/subspecies")
        assert_envelope(response, 404, "Not Found")


class TestCreateBird:

    @pytest.mark.asyncio
    async def test_create(self, client):
        response = await client.post(
            "/birds",
            json=bird_payload("Robin", "Erithacus rubecula", 1, alternativeNames=["Robin redbreast"]),
        )

        body = response.json()
        assert response.status_code == 201
        assert body["id"]
        assert body["createdAt"] and body["updatedAt"]
        assert body["alternativeNames"] == ["Robin redbreast"]
        assert body["subspecies"] == 0
        assert body["links"] == {"self": f"http://test/birds/{body['id']}"}

        fetched = await client.get(f"/birds/{body['id']}")
        assert fetched.json()["scientificName"] == "Erithacus rubecula"

    @pytest.mark.asyncio
    async def test_create_subspecies(self, client, seeded_birds):
        crow_id = str(seeded_birds["crow"].id)

        response = await client.post(
            "/birds",
            json=bird_payload("Northern Raven", "Corvus corax principalis", 9, speciesId=crow_id),
        )

        assert response.status_code == 201
        assert response.json()["links"]["species"] == f"http://test/birds/{crow_id}"
        parent = await client.get(f"/birds/{crow_id}")
        assert parent.json()["subspecies"] == 1

    @pytest.mark.asyncio
    async def test_duplicate_scientific_name_conflicts(self, client):
        first = await client.post("/birds", json=bird_payload("Robin", "Robin Robin", 1))
        second = await client.post("/birds", json=bird_payload("Robin", "Robin Robin", 2))

        assert first.status_code == 201
        assert_envelope(second, 409, "Conflict")
        listing = await client.get("/birds")
        assert listing.json()["total"] == 1

    @pytest.mark.asyncio
    async def test_missing_field(self, client):
        payload = bird_payload("Robin", "Erithacus rubecula", 1)
        del payload["scientificName"]

        response = await client.post("/birds", json=payload)

        assert_envelope(response, 400, "Bad Request")
        assert "scientificName" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_unknown_field(self, client):
        response = await client.post(
            "/birds",
            json=bird_payload("Robin", "Erithacus rubecula", 1, colour="red"),
        )

        assert_envelope(response, 400, "Bad Request")
        assert "colour" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_sort_outside_integer_range(self, client):
        response = await client.post("/birds", json=bird_payload("Robin", "Erithacus rubecula", 10**20))

        assert_envelope(response, 400, "Bad Request")
        assert "sort" in response.json()["message"]
        assert (await client.get("/birds")).json()["total"] == 0

    @pytest.mark.asyncio
    async def test_malformed_json(self, client):
        response = await client.post(
            "/birds",
            content=b'{"commonName": "Robin",',
            headers={"Content-Type": "application/json"},
        )

        assert_envelope(response, 400, "Bad Request")
        assert "JSON" in response.json()["message"]

    @pytest.mark.asyncio
    async def test_subspecies_of_subspecies_is_rejected(self, client, seeded_birds):
        response = await client.post(
            "/birds",
            json=bird_payload("Tiny Eagle", "Aquila minima", 9, speciesId=str(seeded_birds["eagle_a"].id)),
        )

        assert_envelope(response, 400, "Bad Request")


class TestDeleteBird:

    @pytest.mark.asyncio
    async def test_delete_then_not_found(self, client, seeded_birds):
        robin_id = seeded_birds["robin"].id

        first = await client.delete(f"/birds/{robin_id}")
        second = await client.delete(f"/birds/{robin_id}")

        assert first.status_code == 204
        assert first.content == b""
        assert_envelope(second, 404, "Not Found")
        assert (await client.get(f"/birds/{robin_id}")).status_code == 404


class TestApplication:

    @pytest.mark.asyncio
    async def test_unknown_route_uses_envelope(self, client):
        response = await client.get("/nests")
        assert_envelope(response, 404, "Not Found")

    @pytest.mark.asyncio
    async def test_method_not_allowed_uses_envelope(self, client):
        response = await client.put("/birds")
        assert_envelope(response, 405, "Method Not Allowed")

    @pytest.mark.asyncio
    async def test_request_id_is_generated(self, client):
        response = await client.get("/birds")
        assert response.headers["X-Request-ID"]

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, client):
        response = await client.get("/birds", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"

    @pytest.mark.asyncio
    async def test_cors_allows_any_origin(self, client):
        response = await client.options(
            "/birds",
            headers={
                "Origin": "http://example.org",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"
        assert "access-control-allow-credentials" not in response.headers

    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "1.0.0", "database": "connected"}
