"""
数据库模型模块
导出所有表模型
"""

# 用户域模型
from .user import User

# 行业洞察域模型
from .industry_insight import IndustryInsight

# 基础模型
from .base import TimestampModel, utc_now, ensure_utc

# 定义导出的内容
__all__ = [
    # 用户域
    "User",
    # 行业洞察域
    "IndustryInsight",
    # 基础模型
    "TimestampModel",
    "utc_now",
    "ensure_utc"
]
