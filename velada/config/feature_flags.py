"""
Feature Flags Configuration

Centralized feature flag management for the voting backend.
All feature flags are loaded from environment variables.
"""
import os


def get_bool_env(key: str, default: bool = False) -> bool:
    """Get a boolean value from environment variable."""
    value = os.getenv(key, str(default)).lower()
    return value in ('true', '1', 'yes', 'on', 'enabled')


class FeatureFlags:
    """
    Feature flags for the application.

    To add a new feature flag:
    1. Add it here as a class property
    2. Load it from environment variable
    3. Use it in your code
    """

    # Reject votes for a combat once an admin has recorded its winner
    FEATURE_LOCK_VOTING_ON_WINNER: bool = get_bool_env('FEATURE_LOCK_VOTING_ON_WINNER', True)

    # Name search on the public user endpoints
    FEATURE_USER_SEARCH: bool = get_bool_env('FEATURE_USER_SEARCH', True)

    # Check the combat registry for inconsistencies on startup
    FEATURE_VALIDATE_REGISTRY_ON_STARTUP: bool = get_bool_env('FEATURE_VALIDATE_REGISTRY_ON_STARTUP', True)

    @classmethod
    def get_all_flags(cls) -> dict:
        """Get all feature flags as a dictionary."""
        return {
            key: value
            for key, value in cls.__dict__.items()
            if not key.startswith('_') and isinstance(value, bool)
        }


# Singleton instance for easy importing
feature_flags = FeatureFlags()
