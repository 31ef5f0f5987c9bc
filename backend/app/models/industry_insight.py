"""
行业洞察域模型 - 行业洞察缓存表
按行业名缓存 AI 生成的聚合数据，首次有用户选择该行业时懒加载生成
"""

from datetime import datetime
from typing import Optional, List
from sqlmodel import Field, Column, JSON

from .base import TimestampModel, utc_now, ensure_utc


class IndustryInsight(TimestampModel, table=True):
    """
    行业洞察表
    每个行业最多一行，由 industry 唯一约束保证
    """
    __tablename__ = "industry_insights"

    id: Optional[int] = Field(default=None, primary_key=True)

    industry: str = Field(unique=True, index=True, nullable=False)

    # 核心指标
    average_salary: float = Field(default=0.0, nullable=False)
    in_demand_skills: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    industry_growth: float = Field(default=0.0, nullable=False, description="Growth rate in percent")

    # 生成器的补充字段
    demand_level: Optional[str] = Field(default=None)
    market_outlook: Optional[str] = Field(default=None)
    key_trends: List[str] = Field(default_factory=list, sa_column=Column(JSON))

    last_updated: datetime = Field(default_factory=utc_now, nullable=False)
    # 下次刷新时间；刷新逻辑由外部任务负责
    next_update: datetime = Field(nullable=False)

    def is_stale(self, now: Optional[datetime] = None) -> bool:
        """
        判断洞察是否已过刷新时间

        Args:
            now: 参考时间，默认为当前 UTC 时间

        Returns:
            next_update 已到期返回 True
        """
        now = ensure_utc(now) if now is not None else utc_now()
        return ensure_utc(self.next_update) <= now
