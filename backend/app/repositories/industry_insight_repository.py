"""
行业洞察 Repository
提供 industry_insights 表的查询和创建操作
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.insights.schemas import IndustryInsightPayload
from app.models.base import utc_now
from app.models.industry_insight import IndustryInsight
from app.repositories.errors import to_unique_violation


class IndustryInsightRepository:
    """
    行业洞察数据访问对象
    封装所有与 industry_insights 表相关的数据库操作
    """

    def __init__(self, session: Session):
        """
        初始化 Repository

        Args:
            session: SQLModel 数据库会话
        """
        self.session = session

    def get_by_industry(self, industry: str) -> Optional[IndustryInsight]:
        """
        根据行业名获取洞察

        Args:
            industry: 行业名

        Returns:
            IndustryInsight 对象，不存在则返回 None
        """
        statement = select(IndustryInsight).where(IndustryInsight.industry == industry)
        return self.session.exec(statement).first()

    def create(
        self,
        industry: str,
        payload: IndustryInsightPayload,
        next_update: datetime,
        commit: bool = True
    ) -> IndustryInsight:
        """
        根据生成器结果创建行业洞察

        Args:
            industry: 行业名（必须唯一）
            payload: 洞察生成器的结构化输出
            next_update: 下次刷新时间
            commit: False 时只 flush，由外层事务提交

        Returns:
            创建的 IndustryInsight 对象

        Raises:
            UniqueConstraintViolation: 该行业已存在
        """
        insight = IndustryInsight(
            industry=industry,
            average_salary=payload.average_salary,
            in_demand_skills=list(payload.in_demand_skills),
            industry_growth=payload.industry_growth,
            demand_level=payload.demand_level,
            market_outlook=payload.market_outlook,
            key_trends=list(payload.key_trends),
            last_updated=utc_now(),
            next_update=next_update
        )
        self.session.add(insight)
        try:
            if commit:
                self.session.commit()
            else:
                self.session.flush()
        except IntegrityError as e:
            if commit:
                self.session.rollback()
            violation = to_unique_violation(e)
            if violation is not None:
                raise violation from e
            raise
        if commit:
            self.session.refresh(insight)
        return insight

    def list_stale(self, now: Optional[datetime] = None) -> List[IndustryInsight]:
        """
        获取已到刷新时间的洞察，供外部刷新任务使用

        Args:
            now: 参考时间，默认为当前 UTC 时间

        Returns:
            IndustryInsight 对象列表
        """
        now = now or utc_now()
        statement = select(IndustryInsight).where(
            IndustryInsight.next_update <= now
        ).order_by(IndustryInsight.next_update)
        return list(self.session.exec(statement).all())
