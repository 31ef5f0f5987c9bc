"""
Repository (DAO) 模块
提供数据库操作的抽象层，封装 CRUD 逻辑
"""

from .user_repository import UserRepository
from .industry_insight_repository import IndustryInsightRepository
from .errors import UniqueConstraintViolation, parse_unique_violation

__all__ = [
    "UserRepository",
    "IndustryInsightRepository",
    "UniqueConstraintViolation",
    "parse_unique_violation"
]
