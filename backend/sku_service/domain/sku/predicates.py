"""Filter and search predicate builder.

Turns optional criteria into a single SQLAlchemy boolean expression. Every
supplied field contributes one fragment; fragments are AND-ed together and an
empty criteria set yields ``true()``. The result can be dropped into any
``select(Sku).where(...)`` regardless of backend.
"""

import json
from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, ColumnElement, String, and_, cast, or_, true, type_coerce
from sqlalchemy.dialects.postgresql import JSONB, array
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.sql.functions import FunctionElement

from ...models.sku import Sku
from .models import SkuSearchCriteria


def _present(value: Optional[str]) -> bool:
    return value is not None and value.strip() != ""


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def text_query_fragment(query: str) -> ColumnElement[bool]:
    """Case-insensitive substring match on name OR description."""
    pattern = f"%{_escape_like(query.strip())}%"
    return or_(
        Sku.name.ilike(pattern, escape="\\"),
        Sku.description.ilike(pattern, escape="\\"),
    )


class tags_match_any(FunctionElement):
    """True when a JSON tag array shares at least one tag with the given ones.

    Arguments are the tags column followed by ``(tag, like_pattern)`` pairs.
    PostgreSQL compiles this to JSONB ``?|``; other backends match the
    serialized ``"tag"`` token in the JSON text, which is how SQLAlchemy's
    JSON type writes it there.
    """
    type = Boolean()
    inherit_cache = True
    name = "tags_match_any"


def _tag_arguments(element: tags_match_any):
    column, *pairs = list(element.clauses)
    return column, pairs[0::2], pairs[1::2]


@compiles(tags_match_any)
def _compile_tags_text(element, compiler, **kw):
    column, _, patterns = _tag_arguments(element)
    tags_text = cast(column, String)
    return compiler.process(or_(*(tags_text.like(p, escape="\\") for p in patterns)), **kw)


@compiles(tags_match_any, "postgresql")
def _compile_tags_jsonb(element, compiler, **kw):
    column, tags, _ = _tag_arguments(element)
    return compiler.process(type_coerce(column, JSONB).has_any(array(tags)), **kw)


def tags_fragment(tags: list[str]) -> Optional[ColumnElement[bool]]:
    """Match SKUs carrying ANY of `tags`."""
    wanted = [tag for tag in tags if _present(tag)]
    if not wanted:
        return None
    arguments = []
    for tag in wanted:
        arguments.extend([tag, f"%{_escape_like(json.dumps(tag))}%"])
    return tags_match_any(Sku.tags, *arguments)


def price_range_fragments(
    min_price: Optional[Decimal],
    max_price: Optional[Decimal],
) -> list[ColumnElement[bool]]:
    fragments = []
    if min_price is not None:
        fragments.append(Sku.price >= min_price)
    if max_price is not None:
        fragments.append(Sku.price <= max_price)
    return fragments


def combine(fragments: list[ColumnElement[bool]]) -> ColumnElement[bool]:
    """AND all fragments; no fragments means no constraint."""
    if not fragments:
        return true()
    if len(fragments) == 1:
        return fragments[0]
    return and_(*fragments)


def build_filter_predicate(
    category: Optional[str] = None,
    status: Optional[str] = None,
    brand: Optional[str] = None,
    min_price: Optional[Decimal] = None,
    max_price: Optional[Decimal] = None,
) -> ColumnElement[bool]:
    """Predicate for the listing endpoint: exact matches plus a price range."""
    fragments = []
    if _present(category):
        fragments.append(Sku.category == category)
    if _present(status):
        fragments.append(Sku.status == status)
    if _present(brand):
        fragments.append(Sku.brand == brand)
    fragments.extend(price_range_fragments(min_price, max_price))
    return combine(fragments)


def build_search_predicate(criteria: SkuSearchCriteria) -> ColumnElement[bool]:
    """Predicate for the search endpoint.

    Args:
        criteria: Any subset of query, category, subcategory, brand, status,
            min_price, max_price, tags

    Returns:
        Boolean clause matching only SKUs that satisfy every supplied field
    """
    fragments = []

    if _present(criteria.query):
        fragments.append(text_query_fragment(criteria.query))
    if _present(criteria.category):
        fragments.append(Sku.category == criteria.category)
    if _present(criteria.subcategory):
        fragments.append(Sku.subcategory == criteria.subcategory)
    if _present(criteria.brand):
        fragments.append(Sku.brand == criteria.brand)
    if _present(criteria.status):
        fragments.append(Sku.status == criteria.status)

    fragments.extend(price_range_fragments(criteria.min_price, criteria.max_price))

    if criteria.tags:
        tag_match = tags_fragment(criteria.tags)
        if tag_match is not None:
            fragments.append(tag_match)

    return combine(fragments)
