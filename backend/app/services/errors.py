"""
服务层错误类型

未认证（无会话）不是错误，由 get_user_onboarding_status 以默认结果返回；
以下异常都会传播给调用方。
"""

from typing import Optional


class UserServiceError(Exception):
    """用户服务异常基类"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class UnauthorizedError(UserServiceError):
    """需要认证的操作缺少 subject id"""


class UserNotFoundError(UserServiceError):
    """已认证但本地没有对应用户"""


class AccountConflictError(UserServiceError):
    """邮箱已绑定到另一个外部账号，重试无法恢复"""


class UserRecordError(UserServiceError):
    """查找、创建或绑定用户记录失败"""


class ProfileUpdateError(UserServiceError):
    """档案更新事务失败，已整体回滚"""
