# Listing query layer: filters -> predicate -> count + fetch -> projection
from homesphere.query.predicate import AnyOf, Condition, Op, Predicate
from homesphere.query.pagination import PageRequest, PageResult, parse_page_request
from homesphere.query.executor import Collection, fetch_all, fetch_page

__all__ = [
    "AnyOf",
    "Condition",
    "Op",
    "Predicate",
    "PageRequest",
    "PageResult",
    "parse_page_request",
    "Collection",
    "fetch_all",
    "fetch_page",
]
