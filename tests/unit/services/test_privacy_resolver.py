"""
Unit tests for PrivacyResolver
"""

import pytest

from focusboard.models.user import PrivacySetting
from focusboard.services.privacy_resolver import DirectoryUnavailableError, PrivacyResolver


class TestPrivacyResolver:
    """Test suite for privacy resolution and its defaults."""

    @pytest.mark.asyncio
    async def test_missing_setting_defaults(self, user_directory):
        """A user without a settings document is visible under their name."""
        resolver = PrivacyResolver(user_directory)

        result = await resolver.resolve(["u1"])

        assert result["u1"] == PrivacySetting(opt_out=False, anonymize=False)

    @pytest.mark.asyncio
    async def test_returns_stored_settings(self, user_directory):
        user_directory.privacy["hidden"] = PrivacySetting(opt_out=True)
        user_directory.privacy["masked"] = PrivacySetting(anonymize=True)
        resolver = PrivacyResolver(user_directory)

        result = await resolver.resolve(["hidden", "masked"])

        assert result["hidden"].opt_out is True
        assert result["masked"].anonymize is True
        assert result["masked"].opt_out is False

    @pytest.mark.asyncio
    async def test_partial_failure_defaults_only_failed_users(self, user_directory):
        user_directory.privacy["ok"] = PrivacySetting(anonymize=True)
        user_directory.failing_privacy.add("broken")
        resolver = PrivacyResolver(user_directory)

        result = await resolver.resolve(["ok", "broken"])

        assert result["ok"].anonymize is True
        assert result["broken"] == PrivacySetting()

    @pytest.mark.asyncio
    async def test_duplicate_ids_looked_up_once(self, user_directory):
        resolver = PrivacyResolver(user_directory)

        result = await resolver.resolve(["u1", "u1", "u2"])

        assert set(result) == {"u1", "u2"}
        assert user_directory.calls_for("u1") == ["privacy"]

    @pytest.mark.asyncio
    async def test_empty_input(self, user_directory):
        resolver = PrivacyResolver(user_directory)

        assert await resolver.resolve([]) == {}
        assert user_directory.calls == []

    @pytest.mark.asyncio
    async def test_every_lookup_failing_raises(self, user_directory):
        user_directory.privacy["hidden"] = PrivacySetting(opt_out=True)
        user_directory.unavailable = True
        resolver = PrivacyResolver(user_directory)

        with pytest.raises(DirectoryUnavailableError):
            await resolver.resolve(["hidden", "other"])

    @pytest.mark.asyncio
    async def test_single_failed_lookup_is_not_an_outage(self, user_directory):
        user_directory.failing_privacy.update({"a", "b"})
        resolver = PrivacyResolver(user_directory)

        result = await resolver.resolve(["a", "b", "c"])

        assert result == {"a": PrivacySetting(), "b": PrivacySetting(), "c": PrivacySetting()}
