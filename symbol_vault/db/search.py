"""
Weighted full-text search over posts (PostgreSQL).

Each searchable field is a `SearchField` record pairing a column expression with
a weight tier. The enabled fields are folded into one `tsvector` and ranked with
`ts_rank` against the query text. Disabled fields are not part of the
expression at all. No index is kept: the vector is built per request.
"""

from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import Callable, Iterable, List, Optional, Union

from sqlalchemy import Float, Select, String, cast, func, literal, select
from sqlalchemy.dialects.postgresql import REGCONFIG, TSVECTOR, aggregate_order_by
from sqlalchemy.sql.elements import ColumnElement
from sqlalchemy.sql.selectable import Subquery

from symbol_vault.constants import (
    SEARCH_RANK_THRESHOLD,
    SEARCH_RESULT_LIMIT,
    SEARCH_TEXT_CONFIG,
)
from symbol_vault.db.projection import post_projection
from symbol_vault.exceptions import InvalidRequest
from symbol_vault.models import Post, Tagging, User


class SearchColumn(str, Enum):
    """Fields a search can be run against."""

    TITLE = "title"
    DESCRIPTION = "description"
    TAGS = "tags"
    USERNAME = "username"


@dataclass(frozen=True)
class SearchField:
    column: SearchColumn
    weight: str
    # Builds the text expression given the flattened-tags subquery
    expression: Callable[[Subquery], ColumnElement]


# Highest priority first
SEARCH_FIELDS = (
    SearchField(SearchColumn.TITLE, "A", lambda tag_text: Post.title),
    SearchField(SearchColumn.DESCRIPTION, "B", lambda tag_text: Post.description),
    SearchField(SearchColumn.TAGS, "C", lambda tag_text: tag_text.c.tags),
    SearchField(SearchColumn.USERNAME, "D", lambda tag_text: User.username),
)


def parse_search_columns(
    raw: Optional[Union[str, Iterable[str]]]
) -> List[SearchColumn]:
    """
    Parse the enabled search fields from a comma-separated string or a list of
    strings (e.g. repeated `cols` query parameters).

    Raises:
        InvalidRequest: If no field is given or a name is unknown
    """
    if raw is None:
        chunks: List[str] = []
    elif isinstance(raw, str):
        chunks = [raw]
    else:
        chunks = list(raw)

    columns: List[SearchColumn] = []
    for chunk in chunks:
        for name in chunk.split(","):
            name = name.strip().lower()
            if not name:
                continue
            try:
                column = SearchColumn(name)
            except ValueError:
                raise InvalidRequest(f"unknown search column: {name}")
            if column not in columns:
                columns.append(column)

    if not columns:
        raise InvalidRequest("no search column specified")
    return columns


def text_config() -> ColumnElement:
    """The text search configuration, e.g. `CAST('english' AS REGCONFIG)`."""
    return cast(literal(SEARCH_TEXT_CONFIG, String), REGCONFIG)


def tag_text_subquery() -> Subquery:
    """Each post's tags joined by spaces into one text blob."""
    return (
        select(
            Tagging.post_id.label("post_id"),
            func.string_agg(
                Tagging.tag_name, aggregate_order_by(" ", Tagging.position)
            ).label("tags"),
        )
        .group_by(Tagging.post_id)
        .subquery("tag_text")
    )


def weighted_vector(columns: Iterable[SearchColumn], tag_text: Subquery) -> ColumnElement:
    """Concatenate the weighted tsvectors of the enabled fields, in tier order."""
    enabled = set(columns)
    vectors = [
        func.setweight(
            func.to_tsvector(
                text_config(),
                func.coalesce(field.expression(tag_text), ""),
            ),
            field.weight,
            type_=TSVECTOR,
        )
        for field in SEARCH_FIELDS
        if field.column in enabled
    ]
    if not vectors:
        raise InvalidRequest("no search column specified")
    return reduce(lambda left, right: left.op("||", return_type=TSVECTOR)(right), vectors)


def build_search_statement(
    query: Optional[str], columns: Optional[Union[str, Iterable[str]]]
) -> Select:
    """
    Build the ranked search SELECT.

    Rows rank above SEARCH_RANK_THRESHOLD, best first, newest first on ties,
    capped at SEARCH_RESULT_LIMIT.

    Raises:
        InvalidRequest: If no field is enabled or the query text is missing
    """
    enabled = parse_search_columns(columns)
    if query is None or not query.strip():
        raise InvalidRequest("no query text specified")

    tag_text = tag_text_subquery()
    ts_query = func.plainto_tsquery(text_config(), query.strip())
    rank = func.ts_rank(weighted_vector(enabled, tag_text), ts_query, type_=Float)
    ranked = rank.label("rank")

    return (
        post_projection()
        .outerjoin(tag_text, tag_text.c.post_id == Post.id)
        .add_columns(ranked)
        .where(rank > SEARCH_RANK_THRESHOLD)
        .order_by(ranked.desc(), Post.created_at.desc(), Post.id.desc())
        .limit(SEARCH_RESULT_LIMIT)
    )
