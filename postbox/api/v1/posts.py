"""Post routes"""

from fastapi import APIRouter, Depends, Response, status
from typing import List, Optional

from postbox.api.deps import get_current_user_id, get_post_service
from postbox.schemas.post import PostCreate, PostResponse
from postbox.services.post_service import PostService, SortOrder

router = APIRouter()


@router.get("", response_model=List[PostResponse])
def list_posts(
    author_id: Optional[int] = None,
    sort: SortOrder = SortOrder.ASC,
    posts: PostService = Depends(get_post_service)
):
    """
    List posts

    Args:
        author_id: Optional author filter
        sort: asc or desc by id
    """
    return posts.list_posts(author_id=author_id, order=sort)


@router.get("/{post_id}", response_model=PostResponse)
def get_post(
    post_id: int,
    posts: PostService = Depends(get_post_service)
):
    """Get a single post"""
    return posts.get_post(post_id)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    post_data: PostCreate,
    user_id: int = Depends(get_current_user_id),
    posts: PostService = Depends(get_post_service)
):
    """
    Create a post as the authenticated user

    Returns:
        Created post
    """
    return posts.create_post(post_data.body, author_id=user_id)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: int,
    user_id: int = Depends(get_current_user_id),
    posts: PostService = Depends(get_post_service)
):
    """Delete one of the authenticated user's posts"""
    posts.delete_post(post_id, author_id=user_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
