"""Domain model implementations; import from ``polychat_providers.base.models``."""
