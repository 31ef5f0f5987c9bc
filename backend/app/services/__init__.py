"""
服务层模块
提供业务逻辑的抽象层，封装用户解析与档案更新流程
"""

from .user_service import (
    UserService,
    OnboardingStatus,
    ProfileUpdateRequest,
    INSIGHT_REFRESH_INTERVAL,
    PROFILE_PATH
)
from .user_resolution import ResolutionOutcome, UserResolution, resolve_user, display_name_for
from .cache import PathRevalidator
from .errors import (
    UserServiceError,
    UnauthorizedError,
    UserNotFoundError,
    AccountConflictError,
    UserRecordError,
    ProfileUpdateError
)

__all__ = [
    "UserService",
    "OnboardingStatus",
    "ProfileUpdateRequest",
    "INSIGHT_REFRESH_INTERVAL",
    "PROFILE_PATH",
    "ResolutionOutcome",
    "UserResolution",
    "resolve_user",
    "display_name_for",
    "PathRevalidator",
    "UserServiceError",
    "UnauthorizedError",
    "UserNotFoundError",
    "AccountConflictError",
    "UserRecordError",
    "ProfileUpdateError"
]
