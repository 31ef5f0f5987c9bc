"""
身份提供方边界

定义应用从身份提供方获取的两类信息：
1. 当前已认证的 subject id（无会话时为 None）
2. 当前 subject 的资料（邮箱列表、姓名、头像）
"""

from typing import List, Optional, Protocol

from pydantic import BaseModel, Field


class ProviderUser(BaseModel):
    """身份提供方返回的用户资料"""
    id: str = Field(description="外部 subject id")
    email_addresses: List[str] = Field(default_factory=list, description="邮箱列表，第一个为主邮箱")
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    image_url: Optional[str] = None

    @property
    def primary_email(self) -> Optional[str]:
        """主邮箱；列表为空或首项为空白时返回 None"""
        if not self.email_addresses:
            return None
        email = self.email_addresses[0].strip()
        return email or None

    @property
    def full_name(self) -> Optional[str]:
        parts = [p.strip() for p in (self.first_name, self.last_name) if p and p.strip()]
        return " ".join(parts) or None


class IdentityProvider(Protocol):
    """身份提供方接口，由调用方注入"""

    def get_subject_id(self) -> Optional[str]:
        ...

    def get_current_user(self) -> Optional[ProviderUser]:
        ...


class StaticIdentityProvider:
    """
    进程内身份提供方
    用于脚本和测试：直接返回构造时给定的 subject id 与资料
    """

    def __init__(self, subject_id: Optional[str] = None, user: Optional[ProviderUser] = None):
        self.subject_id = subject_id
        self.user = user

    def get_subject_id(self) -> Optional[str]:
        return self.subject_id

    def get_current_user(self) -> Optional[ProviderUser]:
        return self.user
