"""
行业洞察结构化输出模式

定义洞察生成器要求 LLM 返回的数据结构，
字段与 industry_insights 表一一对应。
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class IndustryInsightPayload(BaseModel):
    """
    行业洞察模型 - LLM 结构化输出模式

    用途：
    - 约束 LLM 输出，保证可直接写入 industry_insights 表
    - 作为洞察生成器的返回类型，便于测试替换
    """
    average_salary: float = Field(
        ge=0,
        description="该行业的平均年薪（美元）"
    )
    in_demand_skills: List[str] = Field(
        default_factory=list,
        description="当前需求最高的 5 项技能，例如 ['Python', 'SQL', 'Cloud']"
    )
    industry_growth: float = Field(
        description="行业年增长率（百分比），例如 6.5 表示 6.5%"
    )
    demand_level: Optional[Literal["High", "Medium", "Low"]] = Field(
        default=None,
        description="人才需求水平：High / Medium / Low"
    )
    market_outlook: Optional[Literal["Positive", "Neutral", "Negative"]] = Field(
        default=None,
        description="市场前景：Positive / Neutral / Negative"
    )
    key_trends: List[str] = Field(
        default_factory=list,
        description="3-5 条行业关键趋势"
    )
