from shared.auth.dependencies import (
    get_current_user_optional,
    get_current_user_required,
    require_admin,
)

__all__ = ["get_current_user_optional", "get_current_user_required", "require_admin"]
