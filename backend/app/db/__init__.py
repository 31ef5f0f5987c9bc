"""
数据库模块
提供数据库连接、初始化和事务管理功能
"""

from .init_db import init_db, get_engine, get_database_url, create_tables
from .transaction import (
    atomic,
    TransactionDeadline,
    TransactionTimeoutError,
    TRANSACTION_TIMEOUT_SECONDS
)

__all__ = [
    "init_db",
    "get_engine",
    "get_database_url",
    "create_tables",
    "atomic",
    "TransactionDeadline",
    "TransactionTimeoutError",
    "TRANSACTION_TIMEOUT_SECONDS"
]
