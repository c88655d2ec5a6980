import os


def _utc_offset_hours(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        hours = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be a whole number of hours, got {raw!r}") from None
    if not -12 <= hours <= 14:
        raise ValueError(f"{name} must be between -12 and 14, got {hours}")
    return hours


class Settings:
    def __init__(self):
        self.app_name = "Group Roster"
        self.api_version = "1.0.0"
        self.environment = os.getenv("GROUPROSTER_ENVIRONMENT", "development")
        self.database_url = os.getenv("GROUPROSTER_DATABASE_URL", "sqlite:///./grouproster.db")
        self.base_url = os.getenv("GROUPROSTER_BASE_URL", "http://localhost:3000").rstrip("/")
        # "shared": one reusable roster link per group; "single_use": one link per member
        self.invite_link_policy = os.getenv("GROUPROSTER_INVITE_POLICY", "shared")
        self.log_level = os.getenv("GROUPROSTER_LOG_LEVEL", "INFO")
        # Class dates/times arrive as wall-clock values in the academy's timezone (KST).
        self.class_utc_offset_hours = _utc_offset_hours("GROUPROSTER_CLASS_UTC_OFFSET_HOURS", "9")


_settings_instance = None


def get_settings():
    """Return a singleton Settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
    return _settings_instance
