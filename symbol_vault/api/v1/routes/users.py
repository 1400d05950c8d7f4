from fastapi import APIRouter, Depends

from symbol_vault.db.repositories.post import PostRepository
from symbol_vault.dependencies import get_post_repository
from symbol_vault.schemas import UserPosts
from symbol_vault.utils.validation import parse_identity

router = APIRouter()


@router.get("/{user_id}", response_model=UserPosts)
def get_user_posts(
    user_id: str,
    repo: PostRepository = Depends(get_post_repository),
) -> UserPosts:
    """A user's public profile with all their posts, newest first."""
    return repo.list_by_owner(parse_identity(user_id, "user id"))
