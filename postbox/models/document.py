"""Persisted document - the single aggregate holding every collection"""

from typing import Dict

from pydantic import AliasChoices, BaseModel, Field

from postbox.models.post import Post
from postbox.models.refresh_token import RefreshToken
from postbox.models.user import User


class Document(BaseModel):
    """
    Root of the JSON file.

    Each collection maps id -> entity. JSON object keys are decimal strings
    and are coerced back to ``int`` on load. ``chirps`` is accepted as an
    alternative name for ``posts`` when reading.
    """

    posts: Dict[int, Post] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("posts", "chirps"),
    )
    users: Dict[int, User] = Field(default_factory=dict)
    refresh_tokens: Dict[int, RefreshToken] = Field(default_factory=dict)
