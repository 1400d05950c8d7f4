"""Repository for post reads, search, and the post write/edit transactions."""

from typing import Iterable, List, Optional, Type, Union

from sqlalchemy import delete, insert, select, text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from symbol_vault.constants import CATALOG_PAGE_SIZE
from symbol_vault.db.projection import assemble_posts, post_projection
from symbol_vault.db.search import build_search_statement
from symbol_vault.exceptions import NotFound, StorageFailure
from symbol_vault.models import Asset, Post, Tagging, User
from symbol_vault.schemas import (
    AssetCreate,
    PostContent,
    PostDetail,
    SearchResult,
    UserPosts,
)
from symbol_vault.structlog_config import get_logger

logger = get_logger(__name__)

# Works on PostgreSQL and SQLite alike
UPSERT_TAG_SQL = text("INSERT INTO tags (name) VALUES (:name) ON CONFLICT (name) DO NOTHING")


class PostRepository:
    """Handles database operations for posts, their assets and taggings."""

    def __init__(self, db: Session):
        """Initializes the repository with a database session."""
        self.db = db

    # --- Reads ---

    def get(self, post_id: int) -> PostDetail:
        """Return one post by id.

        Raises:
            NotFound: If no post has this id
        """
        logger.debug("Querying post by id", operation="db_query", table="posts", post_id=post_id)
        posts = self._fetch_posts(post_projection().where(Post.id == post_id))
        if not posts:
            raise NotFound(f"post {post_id} not found")
        return posts[0]

    def list_all(self) -> List[PostDetail]:
        """Every post, newest first."""
        stmt = post_projection().order_by(Post.created_at.desc(), Post.id.desc())
        return self._fetch_posts(stmt)

    def list_page(self, offset: int) -> List[PostDetail]:
        """One page of posts in creation order (oldest first), starting at `offset`."""
        stmt = (
            post_projection()
            .order_by(Post.created_at.asc(), Post.id.asc())
            .offset(offset)
            .limit(CATALOG_PAGE_SIZE)
        )
        return self._fetch_posts(stmt)

    def list_by_owner(self, user_id: int) -> UserPosts:
        """A user's profile and all their posts, newest first.

        Raises:
            NotFound: If the user does not exist
        """
        try:
            user = self.db.get(User, user_id)
        except SQLAlchemyError as e:
            self._raise_storage_failure("list_by_owner", e, user_id=user_id)
        if user is None:
            raise NotFound(f"user {user_id} not found")

        stmt = (
            post_projection()
            .where(Post.user_id == user_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
        )
        posts = self._fetch_posts(stmt)
        return UserPosts(user_id=user.id, username=user.username, posts=posts)

    def search(
        self, query: Optional[str], columns: Optional[Union[str, Iterable[str]]]
    ) -> List[SearchResult]:
        """Ranked full-text search over the enabled columns.

        Raises:
            InvalidRequest: If no column is enabled or the query is empty
        """
        stmt = build_search_statement(query, columns)
        logger.debug(
            "Executing search query",
            operation="db_query",
            table="posts",
            query_type="search",
            search_query=query,
        )
        results = self._fetch_posts(stmt, model=SearchResult)
        logger.debug(
            "Search query completed",
            operation="db_query",
            query_type="search",
            returned_results=len(results),
        )
        return results

    def get_asset(self, post_id: int) -> Asset:
        """The asset attached to a post.

        Raises:
            NotFound: If no post has this id
        """
        try:
            asset = self.db.scalars(
                select(Asset).join(Post, Post.asset_id == Asset.id).where(Post.id == post_id)
            ).first()
        except SQLAlchemyError as e:
            self._raise_storage_failure("get_asset", e, post_id=post_id)
        if asset is None:
            raise NotFound(f"post {post_id} not found")
        return asset

    # --- Writes ---

    def create(self, asset: AssetCreate, content: PostContent, user_id: int) -> PostDetail:
        """Create an asset, its post and the post's taggings in one transaction.

        Either every row is written or none is.

        Raises:
            StorageFailure: If any step fails; the transaction is rolled back
        """
        logger.debug(
            "Creating post",
            operation="db_create",
            table="posts",
            object_key=asset.object_key,
            user_id=user_id,
            tag_count=len(content.tags),
        )
        try:
            orm_asset = Asset(**asset.model_dump())
            self.db.add(orm_asset)
            self.db.flush()

            orm_post = Post(
                asset_id=orm_asset.id,
                user_id=user_id,
                title=content.title,
                description=content.description,
            )
            self.db.add(orm_post)
            self.db.flush()
            post_id = orm_post.id

            self._upsert_tags(content.tags)
            self._insert_taggings(post_id, content.tags)
            # Read back inside the transaction; nothing may fail after commit
            post = self._query_posts(post_projection().where(Post.id == post_id))[0]
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._raise_storage_failure("db_create", e, object_key=asset.object_key)

        logger.info(
            "Post created successfully",
            operation="db_create",
            table="posts",
            post_id=post_id,
            status="created",
        )
        return post

    def edit(self, post_id: int, content: PostContent) -> PostDetail:
        """Replace a post's title, description and whole tag set in one transaction.

        Raises:
            NotFound: If no post has this id
            StorageFailure: If any step fails; the transaction is rolled back
        """
        try:
            orm_post = self.db.get(Post, post_id)
            if orm_post is None:
                self.db.rollback()
                raise NotFound(f"post {post_id} not found")

            orm_post.title = content.title
            orm_post.description = content.description
            self.db.execute(delete(Tagging).where(Tagging.post_id == post_id))
            self._upsert_tags(content.tags)
            self._insert_taggings(post_id, content.tags)
            self.db.flush()
            post = self._query_posts(post_projection().where(Post.id == post_id))[0]
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            self._raise_storage_failure("db_update", e, post_id=post_id)

        logger.info(
            "Post updated successfully",
            operation="db_update",
            table="posts",
            post_id=post_id,
            status="updated",
        )
        return post

    # --- Helpers ---

    def _upsert_tags(self, tags: List[str]) -> None:
        """Add tag names to the vocabulary; existing names are left untouched."""
        if tags:
            self.db.execute(UPSERT_TAG_SQL, [{"name": tag} for tag in tags])

    def _insert_taggings(self, post_id: int, tags: List[str]) -> None:
        if tags:
            self.db.execute(
                insert(Tagging),
                [
                    {"post_id": post_id, "tag_name": tag, "position": position}
                    for position, tag in enumerate(tags)
                ],
            )

    def _query_posts(
        self, stmt, model: Type[PostDetail] = PostDetail
    ) -> List[PostDetail]:
        """Run a projection query and attach tags. Driver errors propagate."""
        rows = list(self.db.execute(stmt).all())
        return assemble_posts(self.db, rows, model=model)

    def _fetch_posts(
        self, stmt, model: Type[PostDetail] = PostDetail
    ) -> List[PostDetail]:
        try:
            return self._query_posts(stmt, model)
        except SQLAlchemyError as e:
            self._raise_storage_failure("db_query", e)

    def _raise_storage_failure(self, operation: str, error: SQLAlchemyError, **context):
        logger.error(
            "Database operation failed",
            operation=operation,
            error_type=type(error).__name__,
            error_message=str(error),
            integrity_error=isinstance(error, IntegrityError),
            **context,
        )
        raise StorageFailure("the operation could not be completed") from error
