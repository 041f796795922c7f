"""
Query-parameter filters.

A list endpoint receives loosely-typed query parameters (strings, possibly
missing or empty). `build_filter` turns them into a `FilterSpec` for one
filter scope using a fixed per-field policy table, and `where_clauses`
compiles a spec into SQL predicates with asyncpg placeholders.

Scopes name the table a rule applies to, seen from the resource being listed:
- "product"         products listed directly
- "product.shop"    shop of a listed product
- "shop"            shops listed directly
- "shop.products"   products of a listed shop
- "shop.user"       owner of a listed shop
- "user"            users listed directly

Rules:
- absent or empty-string parameters never add a predicate
- parameters a scope does not know are ignored
- EXACT values are compared as text against the column cast to text, so a
  non-numeric value for a numeric column matches nothing instead of failing
- CONTAINS_CI is a case-insensitive substring match with LIKE wildcards in
  the value escaped
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class MatchKind(str, Enum):
    EXACT = "exact"
    CONTAINS_CI = "contains_ci"


@dataclass(frozen=True)
class FieldRule:
    field: str
    param: str
    kind: MatchKind
    column: str


@dataclass(frozen=True)
class Predicate:
    kind: MatchKind
    value: str


@dataclass(frozen=True)
class FilterSpec:
    scope: str
    predicates: dict[str, Predicate] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.predicates)

    def __len__(self) -> int:
        return len(self.predicates)


FILTER_RULES: dict[str, tuple[FieldRule, ...]] = {
    "product": (
        FieldRule("name", "productName", MatchKind.CONTAINS_CI, "name"),
        FieldRule("stock", "stock", MatchKind.EXACT, "stock"),
    ),
    "product.shop": (
        FieldRule("name", "shopName", MatchKind.CONTAINS_CI, "name"),
    ),
    "shop": (
        FieldRule("name", "shopName", MatchKind.CONTAINS_CI, "name"),
        FieldRule("adminEmail", "adminEmail", MatchKind.CONTAINS_CI, "admin_email"),
    ),
    "shop.products": (
        FieldRule("name", "productName", MatchKind.CONTAINS_CI, "name"),
        FieldRule("stock", "stock", MatchKind.EXACT, "stock"),
    ),
    "shop.user": (
        FieldRule("name", "userName", MatchKind.CONTAINS_CI, "name"),
    ),
    "user": (
        FieldRule("name", "name", MatchKind.CONTAINS_CI, "name"),
        FieldRule("age", "age", MatchKind.EXACT, "age"),
        FieldRule("role", "role", MatchKind.EXACT, "role"),
        FieldRule("address", "address", MatchKind.CONTAINS_CI, "address"),
        FieldRule("shopId", "shopId", MatchKind.EXACT, "shop_id"),
    ),
}


def _rules(scope: str) -> tuple[FieldRule, ...]:
    try:
        return FILTER_RULES[scope]
    except KeyError:
        raise ValueError(f"Unknown filter scope: {scope!r}") from None


def build_filter(scope: str, params: Mapping[str, Any]) -> FilterSpec:
    """
    Build the predicates of `scope` from raw query parameters.
    """
    rules = _rules(scope)
    predicates: dict[str, Predicate] = {}
    for rule in rules:
        raw = params.get(rule.param)
        if raw is None:
            continue
        value = str(raw)
        if value == "":
            continue
        predicates[rule.field] = Predicate(kind=rule.kind, value=value)
    return FilterSpec(scope=scope, predicates=predicates)


def build_filters(params: Mapping[str, Any], *scopes: str) -> dict[str, FilterSpec]:
    """
    Build one spec per scope from the same parameters.

    Parameters that no scope understands are logged and dropped.
    """
    known = {rule.param for scope in scopes for rule in _rules(scope)}
    unknown = sorted(k for k in params if k not in known)
    if unknown:
        logger.debug("ignored_filter_params scopes=%s params=%s", ",".join(scopes), unknown)
    return {scope: build_filter(scope, params) for scope in scopes}


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def where_clauses(spec: FilterSpec, *, alias: str, args: list[Any]) -> list[str]:
    """
    Compile `spec` into SQL predicates on table alias `alias`.

    Bound values are appended to `args`; placeholders are numbered from the
    current length of `args`, so several specs can share one argument list.
    """
    columns = {rule.field: rule.column for rule in _rules(spec.scope)}
    clauses: list[str] = []
    for field_name, predicate in spec.predicates.items():
        column = f"{alias}.{columns[field_name]}"
        if predicate.kind is MatchKind.CONTAINS_CI:
            args.append(f"%{escape_like(predicate.value)}%")
            clauses.append(f"{column} ILIKE ${len(args)}")
        else:
            args.append(predicate.value)
            clauses.append(f"{column}::text = ${len(args)}")
    return clauses

