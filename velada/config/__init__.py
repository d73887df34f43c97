from .feature_flags import FeatureFlags, feature_flags, get_bool_env
from .settings import Settings, settings

__all__ = ["FeatureFlags", "feature_flags", "get_bool_env", "Settings", "settings"]
