from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from symbol_vault.db.repositories.post import PostRepository
from symbol_vault.dependencies import get_post_repository
from symbol_vault.schemas import PostDetail
from symbol_vault.utils.validation import parse_offset

router = APIRouter()


@router.get("", response_model=List[PostDetail])
def list_catalog(
    offset: Optional[str] = Query(
        None, description="Return a page of 20 posts, oldest first, from this offset."
    ),
    repo: PostRepository = Depends(get_post_repository),
) -> List[PostDetail]:
    """
    Lists posts with their tags.

    Without `offset` every post is returned, newest first. With `offset` a page
    of 20 posts is returned in creation order; past the end the page is empty.
    """
    if offset is None:
        return repo.list_all()
    return repo.list_page(parse_offset(offset))
