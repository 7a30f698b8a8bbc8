"""Unit tests for ReaperOptions."""

from datetime import timedelta

import pytest
from pydantic import ValidationError
from reaper.models.options import ReaperOptions


class TestReaperOptions:
    """Tests for ReaperOptions validation."""

    def test_defaults(self) -> None:
        """Only the expiry is required."""
        options = ReaperOptions(expiry=timedelta(days=1))
        assert options.irregular is False
        assert options.protect == ()
        assert options.force is False

    def test_expiry_required(self) -> None:
        """Omitting the expiry is invalid."""
        with pytest.raises(ValidationError):
            ReaperOptions()  # type: ignore[call-arg]

    @pytest.mark.parametrize("expiry", [timedelta(0), timedelta(seconds=-1)])
    def test_non_positive_expiry_rejected(self, expiry: timedelta) -> None:
        """Zero and negative windows are invalid."""
        with pytest.raises(ValidationError, match="Expiry must be a duration > 0"):
            ReaperOptions(expiry=expiry)

    def test_protect_list_coerced(self) -> None:
        """Pattern lists are stored as tuples."""
        options = ReaperOptions(expiry=timedelta(hours=1), protect=["*.keep", ".git"])
        assert options.protect == ("*.keep", ".git")

    @pytest.mark.parametrize("pattern", ["", "[abc", "logs/[!"])
    def test_malformed_pattern_rejected(self, pattern: str) -> None:
        """Malformed globs are rejected when the options are built."""
        with pytest.raises(ValidationError):
            ReaperOptions(expiry=timedelta(hours=1), protect=[pattern])

    def test_frozen(self) -> None:
        """Options cannot change once a session holds them."""
        options = ReaperOptions(expiry=timedelta(hours=1))
        with pytest.raises(ValidationError):
            options.force = True  # type: ignore[misc]

    def test_extra_fields_forbidden(self) -> None:
        """Unknown option names are rejected."""
        with pytest.raises(ValidationError):
            ReaperOptions(expiry=timedelta(hours=1), dry_run=True)  # type: ignore[call-arg]
