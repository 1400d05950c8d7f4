"""
Post routes for Symbol Vault.

This module provides API endpoints for:
- Full-text search across post title, description, tags and author
- Viewing, creating and editing a post
- Downloading a post's .sar file
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from fastapi.responses import RedirectResponse

from symbol_vault.auth_utils import get_acting_user_id
from symbol_vault.config import get_settings
from symbol_vault.constants import ASSET_FILE_EXTENSION
from symbol_vault.db.repositories.post import PostRepository
from symbol_vault.dependencies import get_post_repository, get_s3_binary_storage
from symbol_vault.exceptions import InvalidRequest, StorageFailure
from symbol_vault.s3_binary_storage import S3BinaryStorage
from symbol_vault.schemas import (
    AssetCreate,
    AssetProps,
    PostContent,
    PostDetail,
    SearchResult,
)
from symbol_vault.structlog_config import get_logger
from symbol_vault.utils.validation import build_model, parse_identity

logger = get_logger(__name__)

router = APIRouter()


@router.get("/search", response_model=List[SearchResult])
def search_posts(
    q: Optional[str] = Query(None, description="Search query"),
    cols: Optional[List[str]] = Query(
        None,
        description="Columns to search: title, description, tags, username. "
        "Comma-separated or repeated.",
    ),
    repo: PostRepository = Depends(get_post_repository),
) -> List[SearchResult]:
    """
    Search posts using weighted full-text search.

    Title matches weigh most, then description, then tags, then username.
    Only the requested columns count towards the rank. At most 20 results.
    """
    return repo.search(query=q, columns=cols)


@router.get("/{post_id}", response_model=PostDetail)
def get_post(
    post_id: str,
    repo: PostRepository = Depends(get_post_repository),
) -> PostDetail:
    """Returns one post with its tags, or 404 if not found."""
    return repo.get(parse_identity(post_id, "post id"))


@router.get("/{post_id}/download", response_class=RedirectResponse)
def download_post(
    post_id: str,
    repo: PostRepository = Depends(get_post_repository),
    storage: S3BinaryStorage = Depends(get_s3_binary_storage),
) -> RedirectResponse:
    """Redirects to a short-lived download link for the post's .sar file."""
    asset = repo.get_asset(parse_identity(post_id, "post id"))
    filename = asset.props_name or asset.object_key.removesuffix(ASSET_FILE_EXTENSION)
    url = storage.download_url(
        asset.object_key,
        filename=f"{filename}{ASSET_FILE_EXTENSION}",
        expires_in=get_settings().DOWNLOAD_URL_TTL_SECONDS,
    )
    return RedirectResponse(url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.post("", response_model=PostDetail, status_code=status.HTTP_201_CREATED)
def create_post(
    sar: UploadFile = File(..., description="The .sar file"),
    thumbnail: UploadFile = File(..., description="PNG preview of the symbol art"),
    title: str = Form(...),
    description: Optional[str] = Form(None),
    tags: Optional[str] = Form(None, description="Comma-separated tags"),
    props_name: Optional[str] = Form(None, alias="filePropsName"),
    props_sound: Optional[int] = Form(None, alias="filePropsSound"),
    props_layer_count: Optional[int] = Form(None, alias="filePropsLayerCount"),
    user_id: int = Depends(get_acting_user_id),
    repo: PostRepository = Depends(get_post_repository),
    storage: S3BinaryStorage = Depends(get_s3_binary_storage),
) -> PostDetail:
    """
    Upload a symbol art and create its post.

    The files are stored first; the asset, post and tag rows are then written
    in one transaction. If the transaction fails the uploaded files are removed.
    Unauthenticated uploads belong to the anonymous user.
    """
    content = build_model(PostContent, title=title, description=description, tags=tags)
    props = build_model(
        AssetProps,
        props_name=props_name,
        props_sound=props_sound,
        props_layer_count=props_layer_count,
    )
    asset_data = sar.file.read()
    preview_data = thumbnail.file.read()
    if not asset_data:
        raise InvalidRequest("sar file is empty")
    if not preview_data:
        raise InvalidRequest("thumbnail file is empty")

    stored = storage.put_asset(asset_data, preview_data)
    asset = AssetCreate(
        object_key=stored.object_key,
        preview_image_url=stored.preview_image_url,
        **props.model_dump(),
    )
    try:
        post = repo.create(asset, content, user_id=user_id)
    except StorageFailure:
        storage.delete_objects(stored.object_key, stored.preview_key)
        raise

    logger.info(
        "Post uploaded",
        operation="create_post",
        post_id=post.post_id,
        user_id=user_id,
        object_key=stored.object_key,
    )
    return post


@router.put("/{post_id}", response_model=PostDetail)
def edit_post(
    post_id: str,
    content: PostContent,
    user_id: int = Depends(get_acting_user_id),
    repo: PostRepository = Depends(get_post_repository),
) -> PostDetail:
    """Replace a post's title, description and tags. Returns the updated post."""
    post = repo.edit(parse_identity(post_id, "post id"), content)
    logger.info("Post edited", operation="edit_post", post_id=post.post_id, user_id=user_id)
    return post
