"""
Test Case Suite: Review Management Module
Test ID Range: TC-401 to TC-415
"""
import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from homesphere.models.enums import PropertyStatus, ReviewStatus
from homesphere.models.review import AgentTarget, PropertyTarget, Review

COMMENT = "Responsive agent and an honest description of the house"


async def _review_count(db_session) -> int:
    return (await db_session.execute(select(func.count()).select_from(Review))).scalar_one()


class TestReviewCreation:
    """
    Test Case TC-401: Create a Review
    Expected Result: Exactly one target; one review per user and target; starts PENDING
    """
    @pytest.mark.asyncio
    async def test_tc401_review_without_target(self, client: AsyncClient, db_session, user, headers_for):
        """TC-401: Neither propertyId nor agentId is a 400 and nothing is stored"""
        response = await client.post(
            "/reviews", json={"rating": 5, "comment": COMMENT}, headers=headers_for(user)
        )
        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "target"
        assert await _review_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_tc402_review_with_both_targets(
        self, client: AsyncClient, db_session, user, agent, create_property, headers_for
    ):
        """TC-402: Both targets at once is also a 400"""
        prop = await create_property(agent)
        response = await client.post(
            "/reviews",
            json={"rating": 4, "comment": COMMENT, "propertyId": prop.id, "agentId": agent.id},
            headers=headers_for(user),
        )
        assert response.status_code == 400
        assert await _review_count(db_session) == 0

    @pytest.mark.asyncio
    async def test_tc403_create_property_review(self, client: AsyncClient, user, agent, create_property, headers_for):
        """TC-403: Property review is stored PENDING"""
        prop = await create_property(agent)
        response = await client.post(
            "/reviews",
            json={"rating": 4, "comment": COMMENT, "propertyId": prop.id},
            headers=headers_for(user),
        )
        assert response.status_code == 201
        review = response.json()["review"]
        assert review["status"] == "PENDING"
        assert review["targetType"] == "property"
        assert review["property"]["id"] == prop.id
        assert review["user"]["firstName"] == "Regular"

    @pytest.mark.asyncio
    async def test_tc404_duplicate_review(self, client: AsyncClient, db_session, user, agent, headers_for):
        """TC-404: Second review of the same agent is a 409"""
        payload = {"rating": 5, "comment": COMMENT, "agentId": agent.id}
        first = await client.post("/reviews", json=payload, headers=headers_for(user))
        second = await client.post("/reviews", json=payload, headers=headers_for(user))
        assert first.status_code == 201
        assert second.status_code == 409
        assert await _review_count(db_session) == 1

    @pytest.mark.asyncio
    async def test_tc405_unpublished_targets(self, client: AsyncClient, user, agent, create_property, headers_for):
        """TC-405: Pending properties cannot be reviewed"""
        prop = await create_property(agent, status=PropertyStatus.PENDING)
        response = await client.post(
            "/reviews",
            json={"rating": 3, "comment": COMMENT, "propertyId": prop.id},
            headers=headers_for(user),
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_tc406_agent_cannot_review_self(self, client: AsyncClient, agent, headers_for):
        """TC-406: Self-reviews are refused"""
        response = await client.post(
            "/reviews",
            json={"rating": 5, "comment": COMMENT, "agentId": agent.id},
            headers=headers_for(agent),
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_tc414_create_agent_review(self, client: AsyncClient, user, agent, headers_for):
        """TC-414: A regular user can review an approved agent"""
        response = await client.post(
            "/reviews",
            json={"rating": 5, "comment": COMMENT, "agentId": agent.id},
            headers=headers_for(user),
        )
        assert response.status_code == 201
        review = response.json()["review"]
        assert review["targetType"] == "agent"
        assert review["agentId"] == agent.id
        assert review["propertyId"] is None

    def test_tc415_target_switches_foreign_keys(self):
        """TC-415: Assigning a target sets exactly one of property_id and agent_id"""
        review = Review(property_id="p-1")
        assert review.target == PropertyTarget("p-1")

        review.target = AgentTarget("a-1")
        assert (review.property_id, review.agent_id) == (None, "a-1")
        assert review.target == AgentTarget("a-1")

    @pytest.mark.asyncio
    async def test_tc407_rating_range(self, client: AsyncClient, user, agent, headers_for):
        """TC-407: Ratings outside 1..5 are rejected"""
        response = await client.post(
            "/reviews",
            json={"rating": 6, "comment": COMMENT, "agentId": agent.id},
            headers=headers_for(user),
        )
        assert response.status_code == 400


class TestReviewListing:
    """
    Test Case TC-408: Review Listings and Stats
    Expected Result: Public listings and stats only count approved reviews
    """
    @pytest.mark.asyncio
    async def test_tc408_pending_reviews_hidden(
        self, client: AsyncClient, user, agent, create_property, create_review
    ):
        """TC-408: Only approved reviews are public"""
        prop = await create_property(agent)
        await create_review(user, property_id=prop.id)
        await create_review(user, agent_id=agent.id, status=ReviewStatus.PENDING)

        assert (await client.get("/reviews")).json()["total"] == 1
        assert (await client.get(f"/reviews/property/{prop.id}")).json()["total"] == 1
        assert (await client.get(f"/reviews/agent/{agent.id}")).json()["total"] == 0

    @pytest.mark.asyncio
    async def test_tc409_author_sees_own_pending(
        self, client: AsyncClient, user, create_user, agent, create_review, headers_for
    ):
        """TC-409: The author sees every status of their reviews, others do not"""
        await create_review(user, agent_id=agent.id, status=ReviewStatus.PENDING)
        stranger = await create_user()

        own = await client.get(f"/reviews/user/{user.id}", headers=headers_for(user))
        other = await client.get(f"/reviews/user/{user.id}", headers=headers_for(stranger))
        assert own.json()["total"] == 1
        assert other.json()["total"] == 0

    @pytest.mark.asyncio
    async def test_tc410_rating_filter_and_sort(
        self, client: AsyncClient, create_user, agent, create_property, create_review
    ):
        """TC-410: rating is a minimum; lowest sorts ascending"""
        prop = await create_property(agent)
        for rating in (2, 5, 4):
            author = await create_user()
            await create_review(author, property_id=prop.id, rating=rating)

        high = (await client.get("/reviews", params={"rating": "4"})).json()
        assert sorted(r["rating"] for r in high["reviews"]) == [4, 5]

        lowest = (await client.get("/reviews", params={"sort": "lowest"})).json()
        assert [r["rating"] for r in lowest["reviews"]] == [2, 4, 5]

    @pytest.mark.asyncio
    async def test_tc411_stats(self, client: AsyncClient, create_user, agent, create_review):
        """TC-411: Aggregates over approved reviews"""
        for rating, status in ((5, ReviewStatus.APPROVED), (4, ReviewStatus.APPROVED), (1, ReviewStatus.PENDING)):
            author = await create_user()
            await create_review(author, agent_id=agent.id, rating=rating, status=status)

        stats = (await client.get("/reviews/stats")).json()
        assert stats["averageRating"] == 4.5
        assert stats["totalReviews"] == 2
        assert stats["minRating"] == 4
        assert stats["maxRating"] == 5
        assert stats["ratingDistribution"] == {"5": 1, "4": 1}


class TestReviewReactions:
    """
    Test Case TC-412: Like and Dislike
    Expected Result: Counters change atomically on approved reviews only
    """
    @pytest.mark.asyncio
    async def test_tc412_like_and_dislike(self, client: AsyncClient, user, agent, create_review, headers_for):
        """TC-412: Each reaction increments its own counter"""
        review = await create_review(user, agent_id=agent.id)
        headers = headers_for(user)

        await client.post(f"/reviews/{review.id}/like", headers=headers)
        liked = await client.post(f"/reviews/{review.id}/like", headers=headers)
        disliked = await client.post(f"/reviews/{review.id}/dislike", headers=headers)

        assert liked.json()["review"]["likes"] == 2
        assert disliked.json()["review"]["dislikes"] == 1
        assert disliked.json()["review"]["likes"] == 2

    @pytest.mark.asyncio
    async def test_tc413_reactions_need_approved_review_and_login(
        self, client: AsyncClient, user, agent, create_review, headers_for
    ):
        """TC-413: Pending reviews are 404; anonymous callers are 401"""
        pending = await create_review(user, agent_id=agent.id, status=ReviewStatus.PENDING)
        assert (await client.post(f"/reviews/{pending.id}/like", headers=headers_for(user))).status_code == 404
        assert (await client.post(f"/reviews/{pending.id}/like")).status_code == 401
