from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from symbol_vault.schemas import (
    AssetCreate,
    AssetProps,
    Credentials,
    PostContent,
    PostDetail,
    SearchResult,
)

pytestmark = pytest.mark.unit


def _detail(**overrides):
    data = dict(
        post_id=3,
        title="Rappy",
        description=None,
        username="anonymous",
        user_id=1,
        created_at=datetime(2024, 1, 2, tzinfo=UTC),
        file_object_key="abc.sar",
        file_thumbnail_url="https://cdn.example.test/abc.png",
    )
    data.update(overrides)
    return PostDetail(**data)


def test_post_detail_serializes_camel_case():
    payload = _detail(tags=["pso2"]).model_dump(by_alias=True)
    assert payload["postId"] == 3
    assert payload["fileObjectKey"] == "abc.sar"
    assert payload["fileThumbnailUrl"] == "https://cdn.example.test/abc.png"
    assert payload["filePropsLayerCount"] is None
    assert payload["tags"] == ["pso2"]


def test_post_detail_null_description_becomes_empty():
    assert _detail().description == ""


def test_post_detail_tags_default_empty():
    assert _detail().tags == []


def test_search_result_carries_rank():
    result = SearchResult(**_detail().model_dump(), rank=0.6)
    assert result.model_dump(by_alias=True)["rank"] == 0.6


def test_post_content_defaults():
    content = PostContent(title=" Rappy ")
    assert content.title == "Rappy"
    assert content.description == ""
    assert content.tags == []


def test_post_content_normalizes_tags():
    assert PostContent(title="x", tags="a, a , b,").tags == ["a", "b"]
    assert PostContent(title="x", tags=["b", "a,b"]).tags == ["b", "a"]


@pytest.mark.parametrize("title", ["", "   "])
def test_post_content_rejects_blank_title(title):
    with pytest.raises(ValidationError):
        PostContent(title=title)


def test_post_content_accepts_camel_case_input():
    content = PostContent.model_validate({"title": "x", "description": "d"})
    assert content.description == "d"


@pytest.mark.parametrize("sound", [0, 12])
def test_asset_props_sound_in_catalog(sound):
    assert AssetProps(props_sound=sound).props_sound == sound


@pytest.mark.parametrize("field,value", [("props_sound", 13), ("props_sound", -1), ("props_layer_count", -1)])
def test_asset_props_rejects_out_of_range(field, value):
    with pytest.raises(ValidationError):
        AssetProps(**{field: value})


def test_asset_create_requires_object_key():
    with pytest.raises(ValidationError):
        AssetCreate(object_key="", preview_image_url="https://x/y.png")


def test_credentials_strip_username_and_reject_blank():
    creds = Credentials(username="  rappy ", password="secret")
    assert creds.username == "rappy"
    with pytest.raises(ValidationError):
        Credentials(username="rappy", password="  ")
    with pytest.raises(ValidationError):
        Credentials(username="", password="secret")
