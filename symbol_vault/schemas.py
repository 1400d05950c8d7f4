from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from symbol_vault.constants import SOUND_CATALOG
from symbol_vault.utils.tags import normalize_tags


class VaultModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )


class UserProfile(VaultModel):
    """Public part of a user account."""

    user_id: int
    username: str


class PostDetail(VaultModel):
    """Public representation of a post, shared by every read operation."""

    post_id: int
    title: str
    description: str = ""
    username: str
    user_id: int
    created_at: datetime
    file_object_key: str
    file_thumbnail_url: str
    file_props_name: Optional[str] = None
    file_props_sound: Optional[int] = None
    file_props_layer_count: Optional[int] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("description", mode="before")
    @classmethod
    def description_never_null(cls, v):
        return v or ""


class UserPosts(UserProfile):
    """A user's profile with their posts, newest first."""

    posts: List[PostDetail] = Field(default_factory=list)


class AssetProps(VaultModel):
    """Display properties read from the .sar file."""

    props_name: Optional[str] = None
    props_sound: Optional[int] = Field(default=None, ge=0, lt=len(SOUND_CATALOG))
    props_layer_count: Optional[int] = Field(default=None, ge=0)


class AssetCreate(AssetProps):
    """Asset row written at the start of the post write transaction."""

    object_key: str = Field(min_length=1, max_length=255)
    preview_image_url: str = Field(min_length=1)


class PostContent(VaultModel):
    """Editable post fields: title, description and tags."""

    title: str
    description: Optional[str] = Field(default=None, validate_default=True)
    tags: Union[str, List[str], None] = Field(default=None, validate_default=True)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    @field_validator("description")
    @classmethod
    def description_default(cls, v: Optional[str]) -> str:
        return v or ""

    @field_validator("tags")
    @classmethod
    def tags_normalized(cls, v) -> List[str]:
        return normalize_tags(v)


class Credentials(BaseModel):
    """Sign-up and sign-in request body."""

    username: str
    password: str

    @field_validator("username", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("username")
    @classmethod
    def strip_username(cls, v: str) -> str:
        return v.strip()


class SignInResponse(VaultModel):
    token: str
    user: UserProfile


class SearchResult(PostDetail):
    """A post matched by search, with its relevance score."""

    rank: float
