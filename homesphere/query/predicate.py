"""
Storage-independent predicates and their compilation to SQLAlchemy.

A ``Predicate`` is an AND of clauses; each clause is either a single
``Condition`` on a logical field name or an ``AnyOf`` group (OR). Logical
names are resolved through a per-entity ``FieldMap`` only at compile time, so
filter building never touches ORM columns or SQL text.
"""
import enum
import json
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple, Union

from sqlalchemy import String, and_, cast, or_, true
from sqlalchemy.orm.attributes import InstrumentedAttribute


class Op(str, enum.Enum):
    EQ = "eq"
    CONTAINS = "contains"
    GTE = "gte"
    LTE = "lte"
    HAS = "has"  # JSON list membership


@dataclass(frozen=True)
class Condition:
    field: str
    op: Op
    value: Any


@dataclass(frozen=True)
class AnyOf:
    conditions: Tuple[Condition, ...]


Clause = Union[Condition, AnyOf]


@dataclass(frozen=True)
class Predicate:
    clauses: Tuple[Clause, ...] = ()

    def where(self, *clauses: Clause) -> "Predicate":
        return Predicate(self.clauses + tuple(clauses))

    def merge(self, other: "Predicate") -> "Predicate":
        return Predicate(self.clauses + other.clauses)


@dataclass(frozen=True)
class FieldPath:
    """
    A column reached through zero or more relationships.

    ``FieldPath(User.first_name, via=(Property.agent, Agent.user))`` compiles to
    ``Property.agent.has(Agent.user.has(<condition on User.first_name>))``.
    """
    column: InstrumentedAttribute
    via: Tuple[InstrumentedAttribute, ...] = ()


FieldMap = Dict[str, Union[InstrumentedAttribute, FieldPath]]


def escape_like(value: str) -> str:
    """Make %, _ and the escape character match literally in LIKE patterns"""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _column_condition(column, op: Op, value):
    if op is Op.EQ:
        return column == value
    if op is Op.CONTAINS:
        return column.ilike(f"%{escape_like(str(value))}%", escape="\\")
    if op is Op.GTE:
        return column >= value
    if op is Op.LTE:
        return column <= value
    if op is Op.HAS:
        # Match the stored encoding: json.dumps with quotes and \uXXXX escapes
        needle = escape_like(json.dumps(str(value)))
        return cast(column, String).like(f"%{needle}%", escape="\\")
    raise ValueError(f"Unsupported operator: {op}")


def _wrap_relationships(expression, via: Tuple[InstrumentedAttribute, ...]):
    for relationship_attr in reversed(via):
        if relationship_attr.property.uselist:
            expression = relationship_attr.any(expression)
        else:
            expression = relationship_attr.has(expression)
    return expression


def compile_condition(condition: Condition, field_map: FieldMap):
    try:
        target = field_map[condition.field]
    except KeyError:
        raise ValueError(f"Field '{condition.field}' is not filterable on this collection")

    if isinstance(target, FieldPath):
        expression = _column_condition(target.column, condition.op, condition.value)
        return _wrap_relationships(expression, target.via)
    return _column_condition(target, condition.op, condition.value)


def compile_predicate(predicate: Predicate, field_map: FieldMap) -> List[Any]:
    """Return SQLAlchemy where-criteria, one per AND-ed clause"""
    criteria = []
    for clause in predicate.clauses:
        if isinstance(clause, AnyOf):
            criteria.append(or_(*[compile_condition(c, field_map) for c in clause.conditions]))
        else:
            criteria.append(compile_condition(clause, field_map))
    return criteria


def compile_to_clause(predicate: Predicate, field_map: FieldMap):
    """Single boolean clause, convenient for aggregate queries"""
    criteria = compile_predicate(predicate, field_map)
    return and_(*criteria) if criteria else true()


def conditions_for(fields: Iterable[str], op: Op, value) -> AnyOf:
    return AnyOf(tuple(Condition(field, op, value) for field in fields))
