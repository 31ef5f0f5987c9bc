"""
用户域模型 - 用户表
与身份提供方（外部 subject）一一关联的应用内用户档案
"""

from typing import Optional, List
from sqlmodel import Field, Column, JSON

from .base import TimestampModel


class User(TimestampModel, table=True):
    """
    用户表
    首次认证时创建，通过 external_subject_id 与身份提供方账号绑定
    """
    __tablename__ = "users"

    # 主键
    id: Optional[int] = Field(default=None, primary_key=True)

    # 身份提供方的稳定标识；历史账号迁移时可能为空，首次登录时补绑
    external_subject_id: Optional[str] = Field(
        default=None,
        unique=True,
        index=True,
        nullable=True
    )

    # 全局唯一邮箱，作为未绑定账号的第二查找路径
    email: str = Field(unique=True, index=True, nullable=False)

    name: Optional[str] = Field(default=None)
    image_url: Optional[str] = Field(default=None)

    # 职业档案；industry 非空即视为完成 onboarding
    industry: Optional[str] = Field(default=None, index=True)
    experience: Optional[int] = Field(default=None, description="Years of experience")
    bio: Optional[str] = Field(default=None)

    # 技能列表，示例：["Python", "SQL", "Docker"]
    skills: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    # 更新档案时置为 True；onboarding 判定以 industry 为准
    is_onboarded: bool = Field(default=False, nullable=False)

    @property
    def has_completed_onboarding(self) -> bool:
        """industry 是否已填写"""
        return bool(self.industry)
