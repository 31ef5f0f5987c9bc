"""
Repository 层错误类型
将数据库驱动的唯一约束错误转换为带字段信息的结构化异常
"""

import re
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError


# SQLite: "UNIQUE constraint failed: users.email"
_SQLITE_UNIQUE_PATTERN = re.compile(r"UNIQUE constraint failed: (\w+)\.(\w+)")
# PostgreSQL: 'Key (email)=(a@b.com) already exists.'
_POSTGRES_KEY_PATTERN = re.compile(r"Key \((\w+)\)=")
_POSTGRES_UNIQUE_MARKER = "violates unique constraint"


class UniqueConstraintViolation(Exception):
    """
    唯一约束冲突

    Attributes:
        field: 冲突的字段名（无法解析时为 None）
        table: 冲突的表名（无法解析时为 None）
        original_error: 原始 IntegrityError
    """

    def __init__(
        self,
        field: Optional[str],
        table: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.field = field
        self.table = table
        self.original_error = original_error
        self.message = f"Unique constraint violated on {table or '?'}.{field or '?'}"
        super().__init__(self.message)


def parse_unique_violation(error: IntegrityError) -> Optional[Tuple[Optional[str], Optional[str]]]:
    """
    解析 IntegrityError，判断是否为唯一约束冲突

    Args:
        error: SQLAlchemy 抛出的 IntegrityError

    Returns:
        (table, field) 元组；不是唯一约束冲突时返回 None
    """
    text = str(error.orig) if error.orig is not None else str(error)

    match = _SQLITE_UNIQUE_PATTERN.search(text)
    if match:
        return match.group(1), match.group(2)

    match = _POSTGRES_KEY_PATTERN.search(text)
    if match and "already exists" in text:
        return None, match.group(1)

    if _POSTGRES_UNIQUE_MARKER in text:
        # 缺少 DETAIL 行时无法确定字段
        return None, None

    return None


def to_unique_violation(error: IntegrityError) -> Optional[UniqueConstraintViolation]:
    """将 IntegrityError 转换为 UniqueConstraintViolation，非唯一约束错误返回 None"""
    parsed = parse_unique_violation(error)
    if parsed is None:
        return None
    table, field = parsed
    return UniqueConstraintViolation(field=field, table=table, original_error=error)
