"""
Test Case Suite: Property Management Module
Test ID Range: TC-201 to TC-219

Validates public listing and search (filters, sentinels, pagination and
sorting) and agent-owned create, update and delete.
"""
from decimal import Decimal

import pytest
from httpx import AsyncClient

from homesphere.models.enums import PropertyStatus, PropertyType

NEW_PROPERTY = {
    "title": "Lekki Waterfront Villa",
    "description": "Five bedroom villa with a private jetty",
    "price": 450000,
    "address": "7 Admiralty Way, Lekki",
    "city": "Lagos",
    "state": "Lagos",
    "bedrooms": 5,
    "bathrooms": 4.5,
    "propertyType": "HOUSE",
}


@pytest.fixture
def three_listings(agent, create_property):
    """Three ACTIVE listings priced 100, 150 and 200 plus one PENDING listing"""
    async def _create():
        for price in ("100", "150", "200"):
            await create_property(agent, title=f"Listing {price}", price=Decimal(price))
        await create_property(agent, title="Unpublished", price=Decimal("175"), status=PropertyStatus.PENDING)
    return _create


class TestPublicListing:
    """
    Test Case TC-201: Public Listing Shows Only Active Properties
    Expected Result: PENDING listings are hidden from anonymous callers
    """
    @pytest.mark.asyncio
    async def test_tc201_only_active(self, client: AsyncClient, three_listings):
        """TC-201: Anonymous listing"""
        await three_listings()
        response = await client.get("/properties")
        assert response.status_code == 200

        data = response.json()
        assert data["total"] == 3
        assert {p["status"] for p in data["properties"]} == {"ACTIVE"}
        assert data["page"] == 1
        assert data["pages"] == 1

    @pytest.mark.asyncio
    async def test_tc202_price_min(self, client: AsyncClient, three_listings):
        """TC-202: priceMin=150 keeps 150 and 200"""
        await three_listings()
        response = await client.get("/properties", params={"priceMin": "150"})
        data = response.json()
        assert data["total"] == 2
        assert sorted(p["price"] for p in data["properties"]) == [150, 200]

    @pytest.mark.asyncio
    async def test_tc203_sentinel_status_is_absent_status(self, client: AsyncClient, three_listings):
        """TC-203: status=all, status= and no status answer identically"""
        await three_listings()
        bodies = [
            (await client.get("/properties", params=params)).json()
            for params in ({"status": "all"}, {"status": ""}, {})
        ]
        assert bodies[0] == bodies[1] == bodies[2]
        assert bodies[0]["total"] == 3

    @pytest.mark.asyncio
    async def test_tc204_admin_status_filter(self, client: AsyncClient, three_listings, admin, headers_for):
        """TC-204: Admins may pick a status; all means every status"""
        await three_listings()
        headers = headers_for(admin)
        everything = await client.get("/properties", params={"status": "all"}, headers=headers)
        pending = await client.get("/properties", params={"status": "pending"}, headers=headers)
        assert everything.json()["total"] == 4
        assert [p["title"] for p in pending.json()["properties"]] == ["Unpublished"]

    @pytest.mark.asyncio
    async def test_tc205_malformed_number_is_400(self, client: AsyncClient):
        """TC-205: priceMin=abc names the parameter"""
        response = await client.get("/properties", params={"priceMin": "abc"})
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "priceMin"

    @pytest.mark.asyncio
    async def test_tc206_search_is_case_insensitive(self, client: AsyncClient, agent, create_property):
        """TC-206: search matches title, description, city or address"""
        await create_property(agent, title="Ikoyi VILLA", city="Lagos")
        await create_property(agent, title="Garden Flat", city="Abuja")
        response = await client.get("/properties/search", params={"search": "villa"})
        assert [p["title"] for p in response.json()["properties"]] == ["Ikoyi VILLA"]

        by_city = await client.get("/properties", params={"city": "abu"})
        assert [p["title"] for p in by_city.json()["properties"]] == ["Garden Flat"]

    @pytest.mark.asyncio
    async def test_tc207_property_type_filter(self, client: AsyncClient, agent, create_property):
        """TC-207: propertyType is case-insensitive"""
        await create_property(agent, property_type=PropertyType.APARTMENT, title="Flat")
        await create_property(agent, property_type=PropertyType.HOUSE, title="House")
        response = await client.get("/properties", params={"propertyType": "apartment"})
        assert [p["title"] for p in response.json()["properties"]] == ["Flat"]


class TestPagination:
    """
    Test Case TC-208: Pagination and Sorting
    Expected Result: Stable pages, empty pages past the end, correct totals
    """
    @pytest.mark.asyncio
    async def test_tc208_pages(self, client: AsyncClient, agent, create_property):
        """TC-208: Five listings, two per page"""
        for i in range(5):
            await create_property(agent, title=f"Home {i}", price=Decimal(100 + i))

        first = (await client.get("/properties", params={"limit": "2"})).json()
        last = (await client.get("/properties", params={"limit": "2", "page": "3"})).json()
        assert len(first["properties"]) == 2
        assert first["total"] == 5
        assert first["pages"] == 3
        assert len(last["properties"]) == 1

        seen = set()
        for page in ("1", "2", "3"):
            body = (await client.get("/properties", params={"limit": "2", "page": page})).json()
            seen.update(p["id"] for p in body["properties"])
        assert len(seen) == 5

    @pytest.mark.asyncio
    async def test_tc209_past_the_end(self, client: AsyncClient, agent, create_property):
        """TC-209: A page beyond the last is empty but keeps the total"""
        await create_property(agent)
        body = (await client.get("/properties", params={"page": "10"})).json()
        assert body["properties"] == []
        assert body["total"] == 1
        assert body["page"] == 10

    @pytest.mark.asyncio
    async def test_tc219_huge_page_number(self, client: AsyncClient, agent, create_property):
        """TC-219: A page number too large for the database is an empty past-the-end page"""
        await create_property(agent)
        response = await client.get("/properties", params={"page": "99999999999999999999"})
        assert response.status_code == 200
        assert response.json()["properties"] == []
        assert response.json()["total"] == 1

    @pytest.mark.asyncio
    async def test_tc210_repeatable_order(self, client: AsyncClient, three_listings):
        """TC-210: Identical requests give identical results"""
        await three_listings()
        params = {"sort": "price-asc"}
        first = (await client.get("/properties", params=params)).json()
        second = (await client.get("/properties", params=params)).json()
        assert first == second
        assert [p["price"] for p in first["properties"]] == [100, 150, 200]

    @pytest.mark.asyncio
    async def test_tc211_sort_desc(self, client: AsyncClient, three_listings):
        """TC-211: price-desc"""
        await three_listings()
        body = (await client.get("/properties", params={"sortBy": "price-desc"})).json()
        assert [p["price"] for p in body["properties"]] == [200, 150, 100]


class TestPropertyDetail:
    """
    Test Case TC-212: Retrieve Property by ID
    Expected Result: Unpublished listings are only visible to the owner and admins
    """
    @pytest.mark.asyncio
    async def test_tc212_active_property(self, client: AsyncClient, agent, create_property):
        """TC-212: Active property with its agent block"""
        prop = await create_property(agent)
        response = await client.get(f"/properties/{prop.id}")
        assert response.status_code == 200
        data = response.json()["property"]
        assert data["id"] == prop.id
        assert data["agent"]["name"] == "Ada Agent"
        assert data["reviewCount"] == 0

    @pytest.mark.asyncio
    async def test_tc213_pending_property_visibility(
        self, client: AsyncClient, agent, admin, user, create_property, headers_for
    ):
        """TC-213: Anonymous and other users get 404; owner and admin get 200"""
        prop = await create_property(agent, status=PropertyStatus.PENDING)
        url = f"/properties/{prop.id}"
        assert (await client.get(url)).status_code == 404
        assert (await client.get(url, headers=headers_for(user))).status_code == 404
        assert (await client.get(url, headers=headers_for(agent))).status_code == 200
        assert (await client.get(url, headers=headers_for(admin))).status_code == 200

    @pytest.mark.asyncio
    async def test_tc214_missing_property(self, client: AsyncClient):
        """TC-214: Unknown id"""
        response = await client.get("/properties/does-not-exist")
        assert response.status_code == 404
        assert response.json()["message"] == "Property not found"


class TestPropertyWrites:
    """
    Test Case TC-215: Create, Update and Delete
    Expected Result: Only agents write, only owners modify, new listings start PENDING
    """
    @pytest.mark.asyncio
    async def test_tc215_create_property(self, client: AsyncClient, agent, headers_for):
        """TC-215: Agent creates a listing"""
        response = await client.post("/properties", json=NEW_PROPERTY, headers=headers_for(agent))
        assert response.status_code == 201
        data = response.json()["property"]
        assert data["status"] == "PENDING"
        assert data["price"] == 450000
        assert data["agentId"] == agent.id

    @pytest.mark.asyncio
    async def test_tc216_create_requires_agent(self, client: AsyncClient, user, headers_for):
        """TC-216: Users cannot list; bad bodies are 400"""
        assert (await client.post("/properties", json=NEW_PROPERTY)).status_code == 401
        assert (await client.post("/properties", json=NEW_PROPERTY, headers=headers_for(user))).status_code == 403

    @pytest.mark.asyncio
    async def test_tc217_listing_limit(self, client: AsyncClient, create_agent, create_property, headers_for):
        """TC-217: Open listings count against the plan limit"""
        agent = await create_agent(listing_limits=1)
        await create_property(agent)
        response = await client.post("/properties", json=NEW_PROPERTY, headers=headers_for(agent))
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_tc218_update_and_delete(
        self, client: AsyncClient, agent, create_agent, create_property, headers_for
    ):
        """TC-218: Owner marks SOLD and deletes; another agent is refused"""
        prop = await create_property(agent)
        intruder = await create_agent(first_name="Other")

        refused = await client.put(f"/properties/{prop.id}", json={"price": 1}, headers=headers_for(intruder))
        assert refused.status_code == 403

        sold = await client.put(
            f"/properties/{prop.id}", json={"status": "SOLD", "price": 95}, headers=headers_for(agent)
        )
        assert sold.status_code == 200
        assert sold.json()["property"]["status"] == "SOLD"
        assert sold.json()["property"]["price"] == 95

        again = await client.put(f"/properties/{prop.id}", json={"status": "RENTED"}, headers=headers_for(agent))
        assert again.status_code == 400

        deleted = await client.delete(f"/properties/{prop.id}", headers=headers_for(agent))
        assert deleted.status_code == 200
        assert (await client.get(f"/properties/{prop.id}", headers=headers_for(agent))).status_code == 404
