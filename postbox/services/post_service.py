"""Post service - create, list, fetch and delete posts"""

from enum import Enum
from typing import List, Optional, Union
import logging

from postbox.core.database import RecordStore
from postbox.core.exceptions import (
    AuthorizationError,
    ResourceNotFoundError,
    ValidationError
)
from postbox.models.post import Post
from postbox.services.post_validator import validate_post_body

logger = logging.getLogger(__name__)


class SortOrder(str, Enum):
    """Sort direction for post listings"""
    ASC = "asc"
    DESC = "desc"


class PostService:
    """Service for post management"""

    COLLECTION = "posts"

    def __init__(self, store: RecordStore):
        self.store = store

    def create_post(self, body: str, author_id: int) -> Post:
        """
        Validate and store a new post

        Args:
            body: Raw post text
            author_id: Id of the authenticated author

        Returns:
            Created post with its assigned id

        Raises:
            PostTooLongError: If the body exceeds the length limit
        """
        cleaned = validate_post_body(body)

        with self.store.edit() as document:
            post_id = self.store.next_id(self.COLLECTION, document.posts)
            post = Post(id=post_id, body=cleaned, author_id=author_id)
            document.posts[post_id] = post

        logger.info(f"Created post {post.id} by user {author_id}")
        return post

    def list_posts(
        self,
        author_id: Optional[int] = None,
        order: Union[SortOrder, str] = SortOrder.ASC
    ) -> List[Post]:
        """
        Get all posts, optionally filtered by author

        Args:
            author_id: Only return posts by this user
            order: "asc" or "desc" by id

        Returns:
            List of posts
        """
        try:
            order = SortOrder(order)
        except ValueError:
            raise ValidationError(
                f"Invalid sort order: {order}",
                details={"allowed": [o.value for o in SortOrder]}
            )

        posts = list(self.store.read().posts.values())
        if author_id is not None:
            posts = [post for post in posts if post.author_id == author_id]

        return sorted(posts, key=lambda post: post.id, reverse=order is SortOrder.DESC)

    def get_post(self, post_id: int) -> Post:
        """Get post by ID"""
        post = self.store.read().posts.get(post_id)
        if post is None:
            raise ResourceNotFoundError(f"Post {post_id}")
        return post

    def delete_post(self, post_id: int, author_id: Optional[int] = None) -> None:
        """
        Delete post

        When ``author_id`` is given, the authorship check happens in the same
        critical section as the delete.

        Args:
            post_id: Post ID
            author_id: Id of the user requesting the delete

        Raises:
            ResourceNotFoundError: If the post does not exist
            AuthorizationError: If the post belongs to someone else
        """
        with self.store.edit() as document:
            post = document.posts.get(post_id)
            if post is None:
                raise ResourceNotFoundError(f"Post {post_id}")
            if author_id is not None and post.author_id != author_id:
                raise AuthorizationError("You can only delete your own posts")
            del document.posts[post_id]

        logger.info(f"Deleted post {post_id}")
