"""
Filter building - raw query parameters to validated predicates

Every listing endpoint receives loosely typed strings from the query string.
The builders here normalise them once: sentinel values mean "no filter",
numbers are parsed strictly and enums case-insensitively. The result is a
``Predicate`` over logical field names; columns are resolved later by the
query executor.
"""
import enum
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Mapping, Optional, Type

from homesphere.models.base import utcnow
from homesphere.models.enums import (
    ContactStatus,
    InquiryType,
    PaymentStatus,
    PropertyStatus,
    PropertyType,
    ReviewStatus,
    VerificationStatus,
)
from homesphere.query.predicate import AnyOf, Condition, Op, Predicate, conditions_for
from homesphere.utils.errors import ValidationError, field_error

# Values clients send when they mean "don't filter on this"
SENTINELS = frozenset({"", "all", "undefined", "null"})

PERIODS: Dict[str, timedelta] = {
    "7d": timedelta(days=7),
    "30d": timedelta(days=30),
    "90d": timedelta(days=90),
    "1y": timedelta(days=365),
}


def clean(value: Optional[str]) -> Optional[str]:
    """Trimmed value, or None when it is absent or a sentinel"""
    if value is None:
        return None
    text = str(value).strip()
    if text.lower() in SENTINELS:
        return None
    return text


def parse_enum(value: Optional[str], enum_cls: Type[enum.Enum]) -> Optional[enum.Enum]:
    """Case-insensitive match against the enum values; unknown values are ignored"""
    text = clean(value)
    if text is None:
        return None
    normalized = text.upper().replace("-", "_")
    for member in enum_cls:
        if member.value.upper() == normalized:
            return member
    return None


def period_start(value: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    text = clean(value)
    if text is None or text.lower() not in PERIODS:
        return None
    return (now or utcnow()) - PERIODS[text.lower()]


@dataclass
class FilterBuilder:
    """
    Accumulates clauses and per-field validation errors for one request.

    Parse errors are collected instead of raised so a response can list every
    bad parameter at once; ``build()`` raises when any were recorded.
    """
    predicate: Predicate = field(default_factory=Predicate)
    errors: List[Dict[str, str]] = field(default_factory=list)

    def add(self, *clauses) -> "FilterBuilder":
        self.predicate = self.predicate.where(*clauses)
        return self

    def equals(self, name: str, value) -> "FilterBuilder":
        if value is not None:
            self.add(Condition(name, Op.EQ, value))
        return self

    def contains(self, name: str, raw: Optional[str]) -> "FilterBuilder":
        text = clean(raw)
        if text is not None:
            self.add(Condition(name, Op.CONTAINS, text))
        return self

    def search(self, fields, raw: Optional[str], extra: Optional[List[Condition]] = None) -> "FilterBuilder":
        """One free-text term OR-ed across several fields"""
        text = clean(raw)
        if text is None:
            return self
        group = conditions_for(fields, Op.CONTAINS, text)
        if extra:
            group = AnyOf(group.conditions + tuple(c for c in extra if c is not None))
        self.add(group)
        return self

    def number(self, name: str, raw: Optional[str], op: Op, param: str, integer: bool = False) -> "FilterBuilder":
        text = clean(raw)
        if text is None:
            return self
        try:
            number = Decimal(text)
        except InvalidOperation:
            self.errors.append(field_error(param, f"{param} must be a number"))
            return self
        if not number.is_finite():
            self.errors.append(field_error(param, f"{param} must be a number"))
            return self
        if number < 0:
            self.errors.append(field_error(param, f"{param} must not be negative"))
            return self
        if integer:
            if number != number.to_integral_value():
                self.errors.append(field_error(param, f"{param} must be a whole number"))
                return self
            number = int(number)
        self.add(Condition(name, op, number))
        return self

    def enum(self, name: str, raw: Optional[str], enum_cls: Type[enum.Enum]) -> "FilterBuilder":
        return self.equals(name, parse_enum(raw, enum_cls))

    def period(self, raw: Optional[str], name: str = "created_at") -> "FilterBuilder":
        start = period_start(raw)
        if start is not None:
            self.add(Condition(name, Op.GTE, start))
        return self

    def build(self) -> Predicate:
        if self.errors:
            raise ValidationError("Invalid query parameters", errors=list(self.errors))
        return self.predicate


def _get(params: Mapping[str, Optional[str]], *names: str) -> Optional[str]:
    """First non-sentinel value among alias parameter names"""
    for name in names:
        value = clean(params.get(name))
        if value is not None:
            return value
    return None


def build_property_filters(params: Mapping[str, Optional[str]], allow_status: bool = False) -> Predicate:
    """
    Public property listing and search.

    ``bedrooms`` and ``bathrooms`` are minimums. Public callers always see
    ACTIVE listings only; ``allow_status`` lets an admin pick the status.
    """
    builder = FilterBuilder()
    builder.search(("title", "description", "city", "address"), _get(params, "search", "q"))
    builder.number("price", params.get("priceMin"), Op.GTE, "priceMin")
    builder.number("price", params.get("priceMax"), Op.LTE, "priceMax")
    builder.number("bedrooms", params.get("bedrooms"), Op.GTE, "bedrooms", integer=True)
    builder.number("bathrooms", params.get("bathrooms"), Op.GTE, "bathrooms")
    builder.enum("property_type", _get(params, "propertyType", "type"), PropertyType)
    builder.contains("city", params.get("city"))
    builder.contains("state", params.get("state"))
    builder.period(params.get("period"))

    if allow_status:
        builder.enum("status", params.get("status"), PropertyStatus)
    else:
        builder.equals("status", PropertyStatus.ACTIVE)
    return builder.build()


def build_agent_property_filters(params: Mapping[str, Optional[str]], show_all: bool) -> Predicate:
    """Properties of one agent; only the owner and admins see non-ACTIVE rows"""
    builder = FilterBuilder()
    builder.search(("title", "description", "city", "address"), _get(params, "search", "q"))
    if show_all:
        builder.enum("status", params.get("status"), PropertyStatus)
    else:
        builder.equals("status", PropertyStatus.ACTIVE)
    return builder.build()


def build_admin_property_filters(params: Mapping[str, Optional[str]]) -> Predicate:
    builder = FilterBuilder()
    builder.enum("status", params.get("status"), PropertyStatus)
    builder.search(
        ("title", "description", "address", "agent_first_name", "agent_last_name", "agent_email"),
        params.get("search"),
    )
    builder.period(params.get("period"))
    return builder.build()


def build_agent_filters(params: Mapping[str, Optional[str]]) -> Predicate:
    """
    Public agent directory.

    ``search`` matches names by substring or a specialty exactly; ``location``
    matches agents with a listing in a matching city or state.
    """
    builder = FilterBuilder()
    search = clean(params.get("search"))
    builder.search(
        ("first_name", "last_name"),
        search,
        extra=[Condition("specialties", Op.HAS, search)] if search else None,
    )
    location = clean(params.get("location"))
    if location is not None:
        builder.add(conditions_for(("property_city", "property_state"), Op.CONTAINS, location))
    specialty = clean(params.get("specialty"))
    if specialty is not None:
        builder.add(Condition("specialties", Op.HAS, specialty))
    return builder.build()


def build_admin_agent_filters(params: Mapping[str, Optional[str]]) -> Predicate:
    builder = FilterBuilder()
    builder.search(("first_name", "last_name", "email", "registration_number"), params.get("search"))
    builder.enum("verification_status", params.get("status"), VerificationStatus)
    builder.period(params.get("period"))
    return builder.build()


def build_review_filters(params: Mapping[str, Optional[str]], allow_status: bool = False) -> Predicate:
    """Review listings; non-admin callers only ever see APPROVED reviews"""
    builder = FilterBuilder()
    if allow_status:
        builder.enum("status", params.get("status"), ReviewStatus)
    else:
        builder.equals("status", ReviewStatus.APPROVED)
    builder.number("rating", params.get("rating"), Op.GTE, "rating", integer=True)
    builder.period(params.get("period"))
    return builder.build()


def build_contact_filters(params: Mapping[str, Optional[str]]) -> Predicate:
    builder = FilterBuilder()
    builder.enum("status", params.get("status"), ContactStatus)
    inquiry_type = parse_enum(params.get("inquiryType"), InquiryType)
    if inquiry_type is not None:
        builder.equals("inquiry_type", inquiry_type.value)
    builder.search(("name", "email", "subject"), params.get("search"))
    builder.period(params.get("period"))
    return builder.build()


def build_payment_filters(params: Mapping[str, Optional[str]]) -> Predicate:
    builder = FilterBuilder()
    builder.enum("status", params.get("status"), PaymentStatus)
    builder.period(params.get("period"))
    return builder.build()
