"""Post schemas"""

from pydantic import BaseModel, Field


class PostCreate(BaseModel):
    """Post creation schema"""
    body: str = Field(...)


class PostResponse(BaseModel):
    """Post response schema"""
    id: int
    body: str
    author_id: int

    class Config:
        from_attributes = True
