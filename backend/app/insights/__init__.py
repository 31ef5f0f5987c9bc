"""
行业洞察模块
提供 LLM 工厂与行业洞察生成器
"""

from .schemas import IndustryInsightPayload
from .generator import IndustryInsightGenerator, InsightGenerationError
from .llm_factory import LLMFactory, get_llm

__all__ = [
    "IndustryInsightPayload",
    "IndustryInsightGenerator",
    "InsightGenerationError",
    "LLMFactory",
    "get_llm"
]
