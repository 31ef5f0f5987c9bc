"""
用户管理 Repository
提供 users 表的查询、创建、绑定和档案更新操作
"""

from typing import Optional, List

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.models.user import User
from app.repositories.errors import to_unique_violation


class UserRepository:
    """
    用户数据访问对象
    封装所有与 users 表相关的数据库操作
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def get_by_id(self, user_id: int) -> Optional[User]:
        """
        根据 ID 获取用户

        Args:
            user_id: 用户 ID

        Returns:
            User 对象，不存在则返回 None
        """
        return self.session.get(User, user_id)

    def get_by_external_id(self, external_subject_id: str) -> Optional[User]:
        """
        根据身份提供方 subject id 获取用户

        Args:
            external_subject_id: 外部 subject id

        Returns:
            User 对象，不存在则返回 None
        """
        statement = select(User).where(User.external_subject_id == external_subject_id)
        return self.session.exec(statement).first()

    def get_by_email(self, email: str) -> Optional[User]:
        """
        根据邮箱获取用户

        Args:
            email: 邮箱地址

        Returns:
            User 对象，不存在则返回 None
        """
        statement = select(User).where(User.email == email)
        return self.session.exec(statement).first()

    def create(
        self,
        external_subject_id: Optional[str],
        email: str,
        name: Optional[str] = None,
        image_url: Optional[str] = None
    ) -> User:
        """
        创建新用户（未完成 onboarding）

        Args:
            external_subject_id: 外部 subject id
            email: 邮箱（必须唯一）
            name: 显示名称
            image_url: 头像地址

        Returns:
            创建的 User 对象

        Raises:
            UniqueConstraintViolation: 邮箱或 subject id 已存在
            IntegrityError: 其他完整性错误
        """
        user = User(
            external_subject_id=external_subject_id,
            email=email,
            name=name,
            image_url=image_url,
            is_onboarded=False
        )
        self.session.add(user)
        self._commit()
        self.session.refresh(user)
        return user

    def link_external_id(self, user_id: int, external_subject_id: str) -> Optional[User]:
        """
        将尚未绑定的用户绑定到外部 subject id

        以条件 UPDATE 执行（仅当 external_subject_id 为空时写入），
        已被并发请求绑定的行不会被覆盖。调用方需比对返回行的
        external_subject_id 判断本次是否绑定成功。

        Args:
            user_id: 用户 ID
            external_subject_id: 外部 subject id

        Returns:
            数据库中当前的 User 对象，不存在则返回 None
        """
        statement = (
            update(User)
            .where(User.id == user_id, User.external_subject_id.is_(None))
            .values(external_subject_id=external_subject_id)
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(statement)
        self._commit()

        if result.rowcount == 0:
            print(f"[UserRepository] 用户 {user_id} 不存在或已绑定，未写入 subject {external_subject_id}")

        user = self.get_by_id(user_id)
        if user:
            self.session.refresh(user)
        return user

    def update_profile(
        self,
        user_id: int,
        industry: str,
        experience: Optional[int],
        bio: Optional[str],
        skills: List[str],
        commit: bool = True
    ) -> Optional[User]:
        """
        更新用户职业档案并标记为已 onboarding

        Args:
            user_id: 用户 ID
            industry: 行业
            experience: 从业年限
            bio: 个人简介
            skills: 技能列表
            commit: False 时只 flush，由外层事务提交

        Returns:
            更新后的 User 对象，不存在则返回 None
        """
        user = self.get_by_id(user_id)
        if user:
            user.industry = industry
            user.experience = experience
            user.bio = bio
            user.skills = list(skills)
            user.is_onboarded = True
            self.session.add(user)
            if commit:
                self._commit()
                self.session.refresh(user)
            else:
                self._flush()
        return user

    def _commit(self) -> None:
        """提交；唯一约束冲突时回滚并转换为 UniqueConstraintViolation"""
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            violation = to_unique_violation(e)
            if violation is not None:
                raise violation from e
            raise

    def _flush(self) -> None:
        """flush；回滚交给外层事务"""
        try:
            self.session.flush()
        except IntegrityError as e:
            violation = to_unique_violation(e)
            if violation is not None:
                raise violation from e
            raise
