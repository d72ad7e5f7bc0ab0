"""Tests for mapping service errors to HTTP responses."""

from fastapi import HTTPException
from hypothesis import given, settings, strategies as st

from bridgeyou.error_handling import (
    BridgeYouError,
    DatabaseQueryError,
    ErrorHandler,
    GENERIC_ERROR_DETAIL,
    NotFoundError,
)


messages = st.text(min_size=1, max_size=100)
error_types = st.sampled_from([DatabaseQueryError, BridgeYouError, RuntimeError, ValueError])


@given(message=messages, error_type=error_types)
@settings(max_examples=100)
def test_internal_messages_never_reach_the_client(message, error_type):
    """
    Property: every failure other than not-found becomes a 500 with the
    generic detail, whatever its message.
    """
    handler = ErrorHandler()

    exc = handler.to_http_exception("search_posts", error_type(message), {"page": 0})

    assert exc.status_code == 500
    assert exc.detail == GENERIC_ERROR_DETAIL


def test_not_found_is_404():
    exc = ErrorHandler().to_http_exception("get_post", NotFoundError("Post", "p1"))

    assert exc.status_code == 404
    assert exc.detail == "Post not found: p1"


def test_http_exceptions_pass_through():
    original = HTTPException(status_code=401, detail="Authentication required")

    assert ErrorHandler().to_http_exception("x", original) is original


def test_database_query_error_message():
    error = DatabaseQueryError("timeout", operation="fetch_banks")

    assert str(error) == "fetch_banks: timeout"
    assert error.operation == "fetch_banks"
