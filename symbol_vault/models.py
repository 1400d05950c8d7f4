"""
SQLAlchemy models for Symbol Vault.

- Asset: the uploaded .sar object plus its preview image and display properties
- Post: title/description metadata, owning one Asset and one User
- Tag: append-only tag vocabulary, identified by its exact name
- Tagging: Post <-> Tag association rows
- User: account with a unique username and a bcrypt password hash
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

from symbol_vault.constants import SOUND_CATALOG

Base = declarative_base()


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    posts = relationship("Post", back_populates="user")

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"


class Asset(Base):
    __tablename__ = "assets"
    __table_args__ = (
        CheckConstraint(
            f"props_sound IS NULL OR (props_sound >= 0 AND props_sound < {len(SOUND_CATALOG)})",
            name="ck_assets_props_sound",
        ),
        CheckConstraint(
            "props_layer_count IS NULL OR props_layer_count >= 0",
            name="ck_assets_props_layer_count",
        ),
    )

    id = Column(Integer, primary_key=True)
    object_key = Column(String(255), unique=True, nullable=False)
    preview_image_url = Column(Text, nullable=False)
    props_name = Column(Text, nullable=True)
    props_sound = Column(Integer, nullable=True)
    props_layer_count = Column(Integer, nullable=True)

    post = relationship("Post", back_populates="asset", uselist=False)

    def __repr__(self):
        return f"<Asset(id={self.id}, object_key={self.object_key})>"


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("title <> ''", name="ck_posts_title_not_empty"),
    )

    id = Column(Integer, primary_key=True)
    asset_id = Column(
        Integer, ForeignKey("assets.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="", server_default="")

    asset = relationship("Asset", back_populates="post")
    user = relationship("User", back_populates="posts")
    taggings = relationship(
        "Tagging",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Tagging.position",
    )

    def __repr__(self):
        return f"<Post(id={self.id}, title={self.title})>"


Index("ix_posts_created_at", Post.created_at.desc())


class Tag(Base):
    __tablename__ = "tags"

    name = Column(Text, primary_key=True)

    def __repr__(self):
        return f"<Tag(name={self.name})>"


class Tagging(Base):
    __tablename__ = "taggings"

    post_id = Column(
        Integer, ForeignKey("posts.id", ondelete="CASCADE"), primary_key=True
    )
    tag_name = Column(Text, ForeignKey("tags.name"), primary_key=True)
    # Submission order of the tag within its post
    position = Column(Integer, nullable=False, default=0)

    post = relationship("Post", back_populates="taggings")

    def __repr__(self):
        return f"<Tagging(post_id={self.post_id}, tag_name={self.tag_name})>"


Index("ix_taggings_tag_name", Tagging.tag_name)
