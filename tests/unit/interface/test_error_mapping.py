"""Unit tests for HTTP mapping of domain errors."""

import pytest

from tally.domain.error import (
    ConflictError,
    DomainError,
    NotFoundError,
    SinkError,
    StorageError,
    ValidationError,
)
from tally.interface.error import status_for, to_http_exception


class TestStatusFor:
    """Tests for status_for."""

    @pytest.mark.parametrize(
        "error, status_code",
        [
            (ValidationError("bad direction"), 422),
            (NotFoundError("Post", "abc"), 404),
            (ConflictError("lost race"), 409),
            (StorageError("write failed"), 503),
            (SinkError("recommender down"), 503),
            (DomainError("unexpected"), 500),
        ],
    )
    def test_maps_error(self, error, status_code):
        assert status_for(error) == status_code


class TestToHttpException:
    """Tests for to_http_exception."""

    def test_carries_status_and_message(self):
        # Act
        exc = to_http_exception(NotFoundError("Post", "abc"))

        # Assert
        assert exc.status_code == 404
        assert exc.detail == "Post not found: abc"

    def test_storage_failure_is_service_unavailable(self):
        # Act
        exc = to_http_exception(StorageError("Failed to load post"))

        # Assert
        assert exc.status_code == 503
