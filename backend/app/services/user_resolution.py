"""
用户解析策略

将身份提供方的 subject 映射到本地 users 表，按顺序尝试：
1. 按 external_subject_id 查找          -> FOUND
2. 按邮箱查找，未绑定则绑定               -> LINKED
   已绑定其他 subject                     -> CONFLICT
3. 创建新用户                            -> CREATED
   邮箱唯一约束冲突（并发首登）时重新查找并套用第 2 步
"""

from enum import Enum
from typing import Optional, TypedDict

from sqlalchemy.exc import IntegrityError

from app.auth.identity import ProviderUser
from app.models.user import User
from app.repositories.errors import UniqueConstraintViolation
from app.repositories.user_repository import UserRepository
from app.services.errors import UserRecordError


class ResolutionOutcome(str, Enum):
    """用户解析结果"""
    FOUND = "found"
    LINKED = "linked"
    CREATED = "created"
    CONFLICT = "conflict"


class UserResolution(TypedDict):
    """解析结果；CONFLICT 时 user 为占用该邮箱的已有用户"""
    outcome: ResolutionOutcome
    user: User


# 并发首登时可以通过重新查找恢复的冲突字段
RECOVERABLE_FIELDS = ("email", "external_subject_id")


def display_name_for(provider_user: ProviderUser) -> str:
    """
    新用户的显示名称：名 > 全名 > 邮箱 @ 前缀

    Args:
        provider_user: 身份提供方资料（需包含主邮箱）

    Returns:
        显示名称
    """
    if provider_user.first_name and provider_user.first_name.strip():
        return provider_user.first_name.strip()
    if provider_user.full_name:
        return provider_user.full_name
    email = provider_user.primary_email or ""
    return email.split("@", 1)[0]


def _link_or_conflict(repo: UserRepository, user: User, subject_id: str) -> UserResolution:
    """按邮箱找到用户后的处理：未绑定则绑定，绑定的是其他 subject 则冲突"""
    if user.external_subject_id is None:
        try:
            current = repo.link_external_id(user.id, subject_id)
        except (UniqueConstraintViolation, IntegrityError) as e:
            print(f"[UserResolution] 绑定用户 {user.id} 到 subject {subject_id} 失败: {e}")
            raise UserRecordError(
                "Failed to link existing user to identity provider account.",
                original_error=e
            ) from e
        if current is None:
            raise UserRecordError("Failed to link existing user to identity provider account.")
        if current.external_subject_id == subject_id:
            print(f"[UserResolution] 已将邮箱 {current.email} 的用户绑定到 subject {subject_id}")
            return {"outcome": ResolutionOutcome.LINKED, "user": current}
        # 读取之后被并发请求绑定到了其他 subject
        user = current

    if user.external_subject_id == subject_id:
        return {"outcome": ResolutionOutcome.FOUND, "user": user}

    print(
        f"[UserResolution] 邮箱 {user.email} 已绑定到其他 subject "
        f"{user.external_subject_id}，拒绝绑定 {subject_id}"
    )
    return {"outcome": ResolutionOutcome.CONFLICT, "user": user}


def resolve_user(
    repo: UserRepository,
    subject_id: str,
    email: str,
    name: Optional[str] = None,
    image_url: Optional[str] = None
) -> UserResolution:
    """
    按 subject id -> 邮箱 -> 创建 的顺序解析本地用户

    每次调用最多一次写入（创建或绑定）；已绑定后重复调用不产生写入。

    Args:
        repo: UserRepository
        subject_id: 外部 subject id
        email: 主邮箱
        name: 新建用户时使用的显示名称，为空时取邮箱 @ 前缀
        image_url: 新建用户时使用的头像

    Returns:
        UserResolution

    Raises:
        UserRecordError: 创建/绑定失败，或冲突恢复后仍找不到用户
    """
    # 1. 按 subject id 查找
    user = repo.get_by_external_id(subject_id)
    if user:
        return {"outcome": ResolutionOutcome.FOUND, "user": user}

    # 2. 按邮箱查找
    user = repo.get_by_email(email)
    if user:
        return _link_or_conflict(repo, user, subject_id)

    # 3. 创建新用户
    print(f"[UserResolution] 为 subject {subject_id} 创建新用户 (email: {email})")
    try:
        user = repo.create(
            external_subject_id=subject_id,
            email=email,
            name=name or email.split("@", 1)[0],
            image_url=image_url
        )
        print(f"[UserResolution] 新用户创建成功 (ID: {user.id})")
        return {"outcome": ResolutionOutcome.CREATED, "user": user}
    except UniqueConstraintViolation as e:
        if e.field not in RECOVERABLE_FIELDS:
            raise UserRecordError(f"Failed to create user record: {e.message}", original_error=e) from e
        violation = e
    except IntegrityError as e:
        raise UserRecordError(f"Failed to create user record: {e}", original_error=e) from e

    # 并发首登：另一个请求已经写入，重新查找一次
    print(
        f"[UserResolution] 创建用户时 {violation.field} 唯一约束冲突 ({email})，"
        f"尝试读取已有用户"
    )
    user = repo.get_by_external_id(subject_id)
    if user:
        return {"outcome": ResolutionOutcome.FOUND, "user": user}

    user = repo.get_by_email(email)
    if user is None:
        print(f"[UserResolution] 冲突恢复失败：邮箱 {email} 仍不存在")
        raise UserRecordError(
            "Failed to retrieve or create user in database.",
            original_error=violation
        )
    return _link_or_conflict(repo, user, subject_id)
