"""
行业洞察生成器

同步调用 LLM，为一个行业生成结构化的聚合洞察。
在档案更新事务内被调用，失败会中止整个事务。
"""

from typing import Any, Optional

from langchain_core.messages import HumanMessage, SystemMessage

from app.insights.llm_factory import get_llm
from app.insights.prompts import INDUSTRY_INSIGHT_SYSTEM_PROMPT, INDUSTRY_INSIGHT_USER_TEMPLATE
from app.insights.schemas import IndustryInsightPayload


class InsightGenerationError(Exception):
    """洞察生成失败"""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class IndustryInsightGenerator:
    """
    行业洞察生成器

    使用示例：
        generator = IndustryInsightGenerator()
        payload = generator.generate("Software Engineering")
    """

    def __init__(self, llm: Any = None):
        """
        Args:
            llm: LangChain 聊天模型；为 None 时首次生成时通过 get_llm() 创建
        """
        self._llm = llm

    @property
    def llm(self) -> Any:
        if self._llm is None:
            self._llm = get_llm()
        return self._llm

    def generate(self, industry: str) -> IndustryInsightPayload:
        """
        生成行业洞察

        Args:
            industry: 行业名

        Returns:
            IndustryInsightPayload 结构化洞察

        Raises:
            ValueError: 行业名为空
            InsightGenerationError: LLM 调用失败或返回无效结果
        """
        if not industry or not industry.strip():
            raise ValueError("industry must be a non-empty string")

        print(f"[InsightGenerator] 正在为行业 '{industry}' 生成洞察...")

        messages = [
            SystemMessage(content=INDUSTRY_INSIGHT_SYSTEM_PROMPT),
            HumanMessage(content=INDUSTRY_INSIGHT_USER_TEMPLATE.format(industry=industry))
        ]

        try:
            structured_llm = self.llm.with_structured_output(IndustryInsightPayload)
            result = structured_llm.invoke(messages)
        except Exception as e:
            raise InsightGenerationError(
                f"Failed to generate insights for '{industry}': {e}",
                original_error=e
            ) from e

        if isinstance(result, dict):
            result = IndustryInsightPayload.model_validate(result)
        if not isinstance(result, IndustryInsightPayload):
            raise InsightGenerationError(
                f"Insight generator returned unexpected result for '{industry}': {type(result).__name__}"
            )

        print(f"[InsightGenerator] 行业 '{industry}' 洞察生成完成")
        return result
