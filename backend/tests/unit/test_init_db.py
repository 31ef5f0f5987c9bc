"""
数据库初始化单元测试
验证数据库 URL 配置与表结构创建
"""

import os

import pytest
from sqlmodel import Session, create_engine, select
from unittest.mock import patch

from app.db.init_db import create_tables, get_database_url, get_engine, init_db
from app.models.industry_insight import IndustryInsight
from app.models.user import User


class TestDatabaseUrl:
    """测试数据库 URL 解析"""

    def test_database_url_env_takes_precedence(self):
        """测试 DATABASE_URL 优先于 DATABASE_PATH"""
        env = {"DATABASE_URL": "postgresql://u:p@localhost/app", "DATABASE_PATH": "/tmp/x.db"}
        with patch.dict(os.environ, env):
            assert get_database_url() == "postgresql://u:p@localhost/app"

    def test_absolute_database_path(self, tmp_path):
        """测试绝对路径直接使用"""
        db_file = tmp_path / "app.db"
        with patch.dict(os.environ, {"DATABASE_PATH": str(db_file)}):
            os.environ.pop("DATABASE_URL", None)
            assert get_database_url() == f"sqlite:///{db_file}"

    def test_relative_database_path_resolves_to_backend(self):
        """测试相对路径从 backend 目录解析"""
        with patch.dict(os.environ, {"DATABASE_PATH": "relative.db"}):
            os.environ.pop("DATABASE_URL", None)
            url = get_database_url()

        assert url.startswith("sqlite:///")
        assert url.endswith(os.path.join("backend", "relative.db"))


class TestDatabaseInit:
    """测试数据库初始化"""

    def test_create_tables(self):
        """测试创建所有表"""
        engine = create_engine("sqlite:///:memory:", connect_args={"check_same_thread": False})

        create_tables(engine)

        with Session(engine) as session:
            assert session.exec(select(User)).all() == []
            assert session.exec(select(IndustryInsight)).all() == []

    def test_init_db_creates_sqlite_file(self, tmp_path):
        """测试完整初始化流程创建数据库文件"""
        db_file = tmp_path / "init.db"
        with patch.dict(os.environ, {"DATABASE_PATH": str(db_file)}):
            os.environ.pop("DATABASE_URL", None)
            init_db()
            engine = get_engine()

        assert db_file.exists()
        with Session(engine) as session:
            assert session.exec(select(User)).all() == []
        engine.dispose()
