"""Tests for post request validation and poll option cleanup."""

import pytest

from unitea_functions.core.errors import ValidationError
from unitea_functions.schemas.post import PostCreate
from unitea_functions.services.post_service import normalize_poll_options, validate_post_request


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (["A", "A", "  B  ", ""], ["A", "B"]),
        (["  ", ""], []),
        (None, []),
        (["Pizza", "Sushi", "pizza"], ["Pizza", "Sushi", "pizza"]),
    ],
)
def test_normalize_poll_options(raw, expected) -> None:
    assert normalize_poll_options(raw) == expected


def test_repost_without_text_is_valid() -> None:
    validate_post_request(PostCreate(reposted_from_post_id="p1"))


def test_lost_found_requires_category() -> None:
    payload = PostCreate(content="Wallet", post_type="lost_found", location="Canteen")

    with pytest.raises(ValidationError) as exc_info:
        validate_post_request(payload)

    assert exc_info.value.message == "Category is required for lost & found posts"
