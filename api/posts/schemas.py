"""
Pydantic schemas for post endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

HEADER_MIN_LENGTH = 16
HEADER_MAX_LENGTH = 256
TEXT_MIN_LENGTH = 100
TEXT_MAX_LENGTH = 20000


class PostWriteRequest(BaseModel):
    """
    Body for both creating and updating a post; the bounds apply to both.
    """

    header: str = Field(..., min_length=HEADER_MIN_LENGTH, max_length=HEADER_MAX_LENGTH)
    text_post: str = Field(..., min_length=TEXT_MIN_LENGTH, max_length=TEXT_MAX_LENGTH)
