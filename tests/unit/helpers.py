"""Shared builders for unit tests."""

import itertools
from typing import List, Optional, Union

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from symbol_vault.db.repositories.post import PostRepository
from symbol_vault.models import User
from symbol_vault.schemas import AssetCreate, PostContent, PostDetail

_asset_counter = itertools.count(1)


def make_asset(**overrides) -> AssetCreate:
    n = next(_asset_counter)
    data = {
        "object_key": f"asset-{n}.sar",
        "preview_image_url": f"https://cdn.example.test/asset-{n}.png",
        "props_name": f"Symbol {n}",
        "props_sound": 3,
        "props_layer_count": 42,
    }
    data.update(overrides)
    return AssetCreate(**data)


def make_post(
    repo: PostRepository,
    title: str = "Rappy Punch",
    description: Optional[str] = None,
    tags: Union[str, List[str], None] = None,
    user_id: int = 1,
) -> PostDetail:
    content = PostContent(title=title, description=description, tags=tags)
    return repo.create(make_asset(), content, user_id=user_id)


def make_user(session: Session, username: str) -> User:
    user = User(username=username, hashed_password="!")
    session.add(user)
    session.commit()
    return user


def count_rows(session: Session, model) -> int:
    return session.scalar(select(func.count()).select_from(model))
