"""
Pytest 测试配置
提供测试数据库、Mock 洞察生成器、身份提供方等测试基础设施
"""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Generator, Optional

import pytest
from sqlmodel import Session, create_engine
from unittest.mock import Mock

# 添加项目根目录到 sys.path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from app.auth.identity import ProviderUser, StaticIdentityProvider
from app.db.init_db import create_tables
from app.insights.schemas import IndustryInsightPayload
from app.models import User, IndustryInsight
from app.services.cache import PathRevalidator
from app.services.user_service import UserService


FIXED_NOW = datetime(2026, 1, 15, 9, 30, tzinfo=timezone.utc)


# ==================== 数据库 Fixtures ====================

@pytest.fixture(scope="function")
def test_db_engine():
    """
    创建测试用的内存数据库引擎
    每个测试函数都会获得一个全新的数据库
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False}
    )

    create_tables(engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def test_db_session(test_db_engine) -> Generator[Session, None, None]:
    """
    创建测试用的数据库会话
    """
    with Session(test_db_engine) as session:
        yield session


# ==================== 测试数据 Fixtures ====================

@pytest.fixture(scope="function")
def linked_user(test_db_session: Session) -> User:
    """
    已绑定 subject 且已完成 onboarding 的用户
    """
    user = User(
        external_subject_id="user_linked",
        email="linked@example.com",
        name="Linked",
        industry="Finance",
        experience=3,
        bio="Analyst",
        skills=["Excel", "SQL"],
        is_onboarded=True
    )
    test_db_session.add(user)
    test_db_session.commit()
    test_db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def legacy_user(test_db_session: Session) -> User:
    """
    旧系统迁移的用户：有邮箱，未绑定 subject
    """
    user = User(email="legacy@example.com", name="Legacy")
    test_db_session.add(user)
    test_db_session.commit()
    test_db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def existing_insight(test_db_session: Session) -> IndustryInsight:
    """
    已缓存的行业洞察
    """
    insight = IndustryInsight(
        industry="Healthcare",
        average_salary=85000.0,
        in_demand_skills=["EHR", "Patient Care"],
        industry_growth=4.2,
        demand_level="High",
        market_outlook="Positive",
        key_trends=["Telehealth"],
        next_update=FIXED_NOW + timedelta(days=3)
    )
    test_db_session.add(insight)
    test_db_session.commit()
    test_db_session.refresh(insight)
    return insight


# ==================== 身份提供方 Fixtures ====================

def make_identity(
    subject_id: Optional[str],
    email: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None
) -> StaticIdentityProvider:
    """构造进程内身份提供方；email 为 None 时不提供资料"""
    user = None
    if subject_id and email is not None:
        user = ProviderUser(
            id=subject_id,
            email_addresses=[email] if email else [],
            first_name=first_name,
            last_name=last_name
        )
    return StaticIdentityProvider(subject_id=subject_id, user=user)


# ==================== Mock 洞察生成器 Fixtures ====================

@pytest.fixture(scope="function")
def insight_payload() -> IndustryInsightPayload:
    return IndustryInsightPayload(
        average_salary=120000.0,
        in_demand_skills=["Python", "Cloud", "SQL", "Kubernetes", "ML"],
        industry_growth=6.5,
        demand_level="High",
        market_outlook="Positive",
        key_trends=["AI adoption", "Platform engineering"]
    )


@pytest.fixture(scope="function")
def mock_insight_generator(insight_payload):
    """
    Mock 洞察生成器
    避免真实调用 LLM API
    """
    mock = Mock()
    mock.generate.return_value = insight_payload
    return mock


@pytest.fixture(scope="function")
def mock_llm():
    """
    Mock LLM 实例
    with_structured_output 返回一个可配置的 Mock
    """
    mock = Mock()
    mock_structured = Mock()
    mock.with_structured_output.return_value = mock_structured
    return mock


# ==================== Service Fixtures ====================

@pytest.fixture(scope="function")
def revalidator() -> PathRevalidator:
    return PathRevalidator()


@pytest.fixture(scope="function")
def make_service(test_db_session, mock_insight_generator, revalidator):
    """
    UserService 工厂
    用法：service = make_service(make_identity("user_1", "a@b.com"))
    """
    def _make(identity, **kwargs):
        kwargs.setdefault("insight_generator", mock_insight_generator)
        kwargs.setdefault("revalidator", revalidator)
        kwargs.setdefault("now", lambda: FIXED_NOW)
        return UserService(test_db_session, identity=identity, **kwargs)

    return _make


@pytest.fixture(scope="function")
def identity_factory():
    """返回 make_identity，供测试构造身份提供方"""
    return make_identity


@pytest.fixture(scope="function")
def fixed_now() -> datetime:
    return FIXED_NOW


# ==================== Pytest 配置 ====================

def pytest_configure(config):
    """
    Pytest 初始化配置
    """
    config.addinivalue_line(
        "markers", "unit: Unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests"
    )
