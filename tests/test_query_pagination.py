"""
Test Case Suite: Paginator and Query Compilation
Test ID Range: TC-015 to TC-022, TC-029
"""
import pytest

from homesphere.config import settings
from homesphere.query.collections import PROPERTIES, REVIEWS
from homesphere.query.pagination import MAX_PAGE, PageResult, page_count, parse_page_request
from homesphere.query.predicate import Condition, Op, Predicate, compile_predicate, escape_like


class TestPageParsing:
    """
    Test Case TC-015: Lenient Page and Limit Parsing
    Expected Result: Bad values fall back to defaults, limits are capped
    """
    def test_tc015_defaults(self):
        """TC-015: Missing values use page 1 and the endpoint default"""
        request = parse_page_request(None, None, default_limit=10)
        assert (request.page, request.limit, request.offset) == (1, 10, 0)

    @pytest.mark.parametrize("page", ["0", "-3", "abc", ""])
    def test_tc016_invalid_page_is_first_page(self, page):
        """TC-016: Non-positive or non-numeric page means page 1"""
        assert parse_page_request(page, "5").page == 1

    def test_tc017_limit_is_capped(self):
        """TC-017: limit above the maximum is clamped"""
        request = parse_page_request("2", "100000")
        assert request.limit == settings.MAX_PAGE_LIMIT
        assert request.offset == settings.MAX_PAGE_LIMIT

    def test_tc029_huge_page_is_clamped(self):
        """TC-029: An absurd page number still yields an offset the database can bind"""
        request = parse_page_request("99999999999999999999", "100")
        assert request.page == MAX_PAGE
        assert request.offset < 2 ** 63

    def test_tc018_page_count(self):
        """TC-018: pages is the ceiling of total / limit"""
        assert page_count(0, 10) == 0
        assert page_count(20, 10) == 2
        assert page_count(21, 10) == 3

    def test_tc019_result_envelope(self):
        """TC-019: to_dict names the collection and carries pagination metadata"""
        body = PageResult(items=["a"], total=11, page=2, limit=5).to_dict("properties")
        assert body == {"properties": ["a"], "total": 11, "page": 2, "pages": 3, "limit": 5}


class TestCompilation:
    """
    Test Case TC-020: Predicate Compilation
    Expected Result: Only mapped fields compile; ordering is always deterministic
    """
    def test_tc020_unknown_field_is_rejected(self):
        """TC-020: Compiling a field the collection does not expose raises"""
        predicate = Predicate().where(Condition("hashed_password", Op.EQ, "x"))
        with pytest.raises(ValueError):
            compile_predicate(predicate, PROPERTIES.field_map)

    def test_tc021_unknown_sort_falls_back_with_tiebreaker(self):
        """TC-021: Unknown sort keys use newest, always ending with the primary key"""
        fallback = PROPERTIES.order_by("sideways")
        assert len(fallback) == len(PROPERTIES.order_by("newest"))
        assert str(fallback[-1]) == str(PROPERTIES.model.id.asc())
        assert len(REVIEWS.order_by("highest")) >= 2

    def test_tc022_like_wildcards_are_escaped(self):
        """TC-022: % and _ in user input match literally"""
        assert escape_like("50%_off") == "50\\%\\_off"
