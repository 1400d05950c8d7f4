"""Public post projection and per-post tag aggregation."""

from collections import defaultdict
from typing import Dict, Iterable, List, Type

from sqlalchemy import Select, select
from sqlalchemy.engine import Row
from sqlalchemy.orm import Session

from symbol_vault.models import Asset, Post, Tagging, User
from symbol_vault.schemas import PostDetail


def post_projection() -> Select:
    """
    SELECT of every public post field: post metadata, the owner's username and
    the asset's display properties. Column labels match `PostDetail` fields.
    """
    return (
        select(
            Post.id.label("post_id"),
            Post.title.label("title"),
            Post.description.label("description"),
            User.username.label("username"),
            Post.user_id.label("user_id"),
            Post.created_at.label("created_at"),
            Asset.object_key.label("file_object_key"),
            Asset.preview_image_url.label("file_thumbnail_url"),
            Asset.props_name.label("file_props_name"),
            Asset.props_sound.label("file_props_sound"),
            Asset.props_layer_count.label("file_props_layer_count"),
        )
        .select_from(Post)
        .join(User, User.id == Post.user_id)
        .join(Asset, Asset.id == Post.asset_id)
    )


def aggregate_tags(db: Session, post_ids: Iterable[int]) -> Dict[int, List[str]]:
    """
    Collect each post's tag names in submission order.

    Args:
        db: Database session
        post_ids: Posts to resolve

    Returns:
        Mapping of post id to its ordered tag names. Posts without taggings are
        absent from the query result, so callers use `.get(post_id, [])`.
    """
    post_ids = list(post_ids)
    if not post_ids:
        return {}
    stmt = (
        select(Tagging.post_id, Tagging.tag_name)
        .where(Tagging.post_id.in_(post_ids))
        .order_by(Tagging.post_id, Tagging.position)
    )

    tags: Dict[int, List[str]] = defaultdict(list)
    for post_id, tag_name in db.execute(stmt):
        tags[post_id].append(tag_name)
    return dict(tags)


def assemble_posts(
    db: Session, rows: List[Row], model: Type[PostDetail] = PostDetail
) -> List[PostDetail]:
    """Turn projection rows into `PostDetail`s, keeping row order and attaching tags."""
    tags = aggregate_tags(db, [row.post_id for row in rows])
    return [
        model(**row._mapping, tags=tags.get(row.post_id, []))
        for row in rows
    ]
