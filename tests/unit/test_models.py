import pytest
from sqlalchemy.exc import IntegrityError

from symbol_vault.models import Asset, Post, Tag, Tagging

pytestmark = pytest.mark.unit


@pytest.fixture
def asset(db_session) -> Asset:
    asset = Asset(object_key="a.sar", preview_image_url="https://cdn.example.test/a.png")
    db_session.add(asset)
    db_session.commit()
    return asset


def test_post_relationships(db_session, asset):
    post = Post(asset_id=asset.id, user_id=1, title="Rappy")
    db_session.add_all([post, Tag(name="b"), Tag(name="a")])
    db_session.flush()
    db_session.add_all(
        [
            Tagging(post_id=post.id, tag_name="b", position=0),
            Tagging(post_id=post.id, tag_name="a", position=1),
        ]
    )
    db_session.commit()
    db_session.refresh(post)

    assert post.description == ""
    assert post.created_at is not None
    assert post.asset.object_key == "a.sar"
    assert post.user.username == "anonymous"
    assert [tagging.tag_name for tagging in post.taggings] == ["b", "a"]


def test_post_title_must_not_be_empty(db_session, asset):
    db_session.add(Post(asset_id=asset.id, user_id=1, title=""))
    with pytest.raises(IntegrityError):
        db_session.commit()


def test_one_post_per_asset(db_session, asset):
    db_session.add(Post(asset_id=asset.id, user_id=1, title="one"))
    db_session.commit()
    db_session.add(Post(asset_id=asset.id, user_id=1, title="two"))
    with pytest.raises(IntegrityError):
        db_session.commit()


@pytest.mark.parametrize("field,value", [("props_sound", 13), ("props_layer_count", -1)])
def test_asset_property_ranges(db_session, field, value):
    db_session.add(
        Asset(object_key="b.sar", preview_image_url="https://x/b.png", **{field: value})
    )
    with pytest.raises(IntegrityError):
        db_session.commit()


def test_tagging_requires_known_tag(db_session, asset):
    post = Post(asset_id=asset.id, user_id=1, title="Rappy")
    db_session.add(post)
    db_session.commit()
    db_session.add(Tagging(post_id=post.id, tag_name="ghost", position=0))
    with pytest.raises(IntegrityError):
        db_session.commit()
