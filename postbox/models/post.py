"""Post model"""

from pydantic import BaseModel


class Post(BaseModel):
    """A short text post; immutable once stored"""

    id: int
    body: str
    author_id: int
