"""
用户服务层

封装两条用户业务流程：
1. Onboarding 状态解析：身份提供方 subject -> 本地用户（查找 / 绑定 / 创建）
2. 档案更新：在一个带超时的原子事务内确保行业洞察存在并更新用户档案
"""

import time
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, TypedDict, Union

from pydantic import BaseModel, Field, field_validator
from sqlmodel import Session

from app.auth.identity import IdentityProvider
from app.db.transaction import atomic, TransactionDeadline, TRANSACTION_TIMEOUT_SECONDS
from app.insights.generator import IndustryInsightGenerator
from app.models.base import utc_now
from app.models.industry_insight import IndustryInsight
from app.models.user import User
from app.repositories.industry_insight_repository import IndustryInsightRepository
from app.repositories.user_repository import UserRepository
from app.services.cache import PathRevalidator
from app.services.errors import (
    AccountConflictError,
    ProfileUpdateError,
    UnauthorizedError,
    UserNotFoundError,
)
from app.services.user_resolution import ResolutionOutcome, display_name_for, resolve_user


# 新生成的行业洞察在 7 天后到期刷新
INSIGHT_REFRESH_INTERVAL = timedelta(days=7)

# 档案更新后需要失效的展示路径
PROFILE_PATH = "/"


class OnboardingStatus(TypedDict):
    """Onboarding 状态；未认证时 user 为 None"""
    is_onboarded: bool
    user: Optional[User]


class ProfileUpdateRequest(BaseModel):
    """档案更新请求"""
    industry: str = Field(min_length=1, description="行业，例如 'tech-software-development'")
    experience: Optional[int] = Field(default=None, ge=0, description="从业年限")
    bio: Optional[str] = None
    skills: List[str] = Field(default_factory=list)

    @field_validator("industry")
    @classmethod
    def industry_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("industry must not be blank")
        return value

    @field_validator("bio")
    @classmethod
    def strip_bio(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("skills")
    @classmethod
    def clean_skills(cls, value: List[str]) -> List[str]:
        # 去除空白项，保留原有顺序
        return [skill.strip() for skill in value if skill and skill.strip()]


class UserService:
    """
    用户服务类

    所有外部依赖（数据库会话、身份提供方、洞察生成器、缓存失效器）
    均由调用方注入，便于在测试中替换。

    使用示例：
        with Session(get_engine()) as session:
            service = UserService(session, identity=provider)
            status = service.get_user_onboarding_status()
            if not status["is_onboarded"]:
                service.update_user({"industry": "Finance", "skills": ["Excel"]})
    """

    def __init__(
        self,
        session: Session,
        identity: IdentityProvider,
        insight_generator: Optional[IndustryInsightGenerator] = None,
        revalidator: Optional[PathRevalidator] = None,
        transaction_timeout: float = TRANSACTION_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        now: Callable[[], datetime] = utc_now
    ):
        """
        初始化服务

        Args:
            session: SQLModel 数据库会话
            identity: 身份提供方
            insight_generator: 行业洞察生成器，默认使用 LLM 实现
            revalidator: 缓存失效器
            transaction_timeout: 档案更新事务的超时上限（秒）
            clock: 事务计时用的单调时钟
            now: 当前 UTC 时间，用于计算洞察的下次刷新时间
        """
        self.session = session
        self.identity = identity
        self.insight_generator = insight_generator or IndustryInsightGenerator()
        self.revalidator = revalidator or PathRevalidator()
        self.transaction_timeout = transaction_timeout
        self._clock = clock
        self._now = now

        self.users = UserRepository(session)
        self.insights = IndustryInsightRepository(session)

    def get_user_onboarding_status(self) -> OnboardingStatus:
        """
        解析当前认证用户的 onboarding 状态

        流程：
        1. 无 subject id：未认证，返回默认结果
        2. 获取身份提供方资料；缺少资料或主邮箱时返回默认结果
        3. 查找 / 绑定 / 创建本地用户
        4. is_onboarded 以 industry 是否填写为准

        Returns:
            OnboardingStatus

        Raises:
            AccountConflictError: 邮箱已绑定到其他账号
            UserRecordError: 用户记录创建或绑定失败
        """
        subject_id = self.identity.get_subject_id()
        if not subject_id:
            return {"is_onboarded": False, "user": None}

        provider_user = self.identity.get_current_user()
        email = provider_user.primary_email if provider_user else None
        if not email:
            print(f"[UserService] 身份提供方缺少用户资料或主邮箱 (subject: {subject_id})")
            return {"is_onboarded": False, "user": None}

        resolution = resolve_user(
            self.users,
            subject_id=subject_id,
            email=email,
            name=display_name_for(provider_user),
            image_url=provider_user.image_url
        )

        if resolution["outcome"] == ResolutionOutcome.CONFLICT:
            raise AccountConflictError(
                "Account with this email already exists and is linked to another user. "
                "Please contact support."
            )

        user = resolution["user"]
        return {"is_onboarded": user.has_completed_onboarding, "user": user}

    def update_user(self, data: Union[ProfileUpdateRequest, Dict[str, Any]]) -> User:
        """
        更新当前用户的职业档案

        事务内两步：
        1. 确保该行业的洞察存在（不存在则同步生成并写入，7 天后刷新）
        2. 更新用户档案并标记 is_onboarded
        任一步失败或超时，整个事务回滚。

        Args:
            data: ProfileUpdateRequest 或等价字典

        Returns:
            更新后的 User 对象（不包含洞察）

        Raises:
            UnauthorizedError: 未认证
            pydantic.ValidationError: 请求数据无效
            UserNotFoundError: 本地用户不存在
            ProfileUpdateError: 事务失败（已回滚）
        """
        subject_id = self.identity.get_subject_id()
        if not subject_id:
            raise UnauthorizedError("Unauthorized")

        if isinstance(data, ProfileUpdateRequest):
            request = data
        else:
            request = ProfileUpdateRequest.model_validate(data)

        user = self.users.get_by_external_id(subject_id)
        if user is None:
            raise UserNotFoundError("User not found in database for the authenticated account.")
        user_id = user.id

        try:
            with atomic(self.session, timeout=self.transaction_timeout, clock=self._clock) as deadline:
                self._ensure_industry_insight(request.industry, deadline)

                updated_user = self.users.update_profile(
                    user_id,
                    industry=request.industry,
                    experience=request.experience,
                    bio=request.bio,
                    skills=request.skills,
                    commit=False
                )
                if updated_user is None:
                    raise UserNotFoundError(f"User {user_id} disappeared during profile update.")
                deadline.check("update_user")
        except Exception as e:
            print(f"[UserService] 更新用户档案和行业洞察失败: {e}")
            raise ProfileUpdateError(f"Failed to update profile: {e}", original_error=e) from e

        self.session.refresh(updated_user)
        print(f"[UserService] 用户 {user_id} 档案已更新 (industry: {request.industry})")

        self.revalidator.revalidate_path(PROFILE_PATH)
        return updated_user

    def _ensure_industry_insight(self, industry: str, deadline: TransactionDeadline) -> IndustryInsight:
        """
        确保行业洞察存在（在事务内调用，只 flush 不提交）

        Args:
            industry: 行业名
            deadline: 当前事务的截止时间

        Returns:
            已有的或新建的 IndustryInsight
        """
        insight = self.insights.get_by_industry(industry)
        if insight is not None:
            return insight

        print(f"[UserService] 新行业 '{industry}'，正在生成行业洞察")
        payload = self.insight_generator.generate(industry)
        deadline.check("generate_insights")

        return self.insights.create(
            industry=industry,
            payload=payload,
            next_update=self._now() + INSIGHT_REFRESH_INTERVAL,
            commit=False
        )
