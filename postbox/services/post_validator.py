"""Post body validation and redaction."""

from __future__ import annotations

import re
from typing import Iterable, Optional

from postbox.config import settings
from postbox.core.exceptions import PostTooLongError

REDACTION_MASK = "****"
_SPACE_RUN = re.compile(r" +")


def redact(body: str, terms: Iterable[str]) -> str:
    """
    Replace whole words matching ``terms`` (case-insensitive) with a mask.

    Words are split on runs of the space character and joined with a single
    space, so consecutive spaces collapse to one.
    """
    lowered_terms = {term.lower() for term in terms}
    words = _SPACE_RUN.split(body)
    return " ".join(REDACTION_MASK if word.lower() in lowered_terms else word for word in words)


def validate_post_body(
    body: str,
    max_length: Optional[int] = None,
    redacted_terms: Optional[Iterable[str]] = None,
) -> str:
    """
    Validate a candidate post body and return the text to store.

    Length is counted in code points, not bytes.

    Raises:
        PostTooLongError: If the body is longer than ``max_length``
    """
    limit = settings.MAX_POST_LENGTH if max_length is None else max_length
    length = len(body)
    if length > limit:
        raise PostTooLongError(length, limit)

    terms = settings.REDACTED_TERMS if redacted_terms is None else redacted_terms
    return redact(body, terms)
