"""LLM 工厂模块

根据配置文件创建洞察生成器使用的 LLM 实例。
遵循安全协议：从不读取 .env 文件，只从系统环境变量获取密钥。
"""

import json
import os
from pathlib import Path
from typing import Any, Dict

from langchain_openai import ChatOpenAI
from langchain_google_genai import ChatGoogleGenerativeAI


# 配置中 provider 字段与 LangChain 聊天模型的映射
SUPPORTED_PROVIDERS = ("openai", "gemini")

# 洞察生成在事务内同步执行，需低于事务超时上限
DEFAULT_LLM_TIMEOUT_SECONDS = 8.0


def get_default_config_path() -> str:
    """获取默认配置路径：LLM_CONFIG_PATH 环境变量，否则为 backend/llm_config.json"""
    env_path = os.environ.get("LLM_CONFIG_PATH")
    if env_path:
        return env_path
    return str(Path(__file__).parent.parent.parent / "llm_config.json")


class LLMFactory:
    """LLM 工厂类，负责创建和管理 LLM 实例"""

    def __init__(self, config_path: str = None):
        """初始化工厂

        Args:
            config_path: 配置文件路径，为 None 时在首次加载时解析默认路径
        """
        self.config_path = config_path
        self._loaded_config = None

    def _resolve_config_path(self) -> str:
        return self.config_path or get_default_config_path()

    def _load_config(self) -> Dict[str, Any]:
        """加载配置文件

        Returns:
            配置字典

        Raises:
            FileNotFoundError: 配置文件不存在
            json.JSONDecodeError: JSON 格式错误
        """
        if self._loaded_config is None:
            config_path = self._resolve_config_path()
            try:
                with open(config_path, "r", encoding="utf-8") as f:
                    self._loaded_config = json.load(f)
            except FileNotFoundError:
                raise FileNotFoundError(f"配置文件不存在: {config_path}")
            except json.JSONDecodeError as e:
                raise json.JSONDecodeError(f"JSON 格式错误: {e}", e.doc, e.pos)

        return self._loaded_config

    def get_active_model_config(self) -> Dict[str, Any]:
        """获取当前激活的模型配置

        Returns:
            当前激活模型的配置字典

        Raises:
            ValueError: active_model 不存在或对应的 provider 配置不存在
        """
        config = self._load_config()

        active_model = config.get("active_model")
        if not active_model:
            raise ValueError("配置文件中缺少 active_model 字段")

        providers = config.get("providers")
        if not providers:
            raise ValueError("配置文件中缺少 providers 字段")

        model_config = providers.get(active_model)
        if not model_config:
            raise ValueError(f"providers 中找不到 '{active_model}' 的配置")

        return model_config

    def _get_api_key(self, env_key: str) -> str:
        """从系统环境变量获取 API Key

        Raises:
            ValueError: 环境变量不存在或为空
        """
        api_key = os.getenv(env_key)
        if not api_key:
            raise ValueError(f"环境变量 '{env_key}' 未设置或为空，无法初始化 LLM")

        return api_key

    def create_llm(self) -> Any:
        """创建并返回 LLM 实例

        Returns:
            LangChain 聊天模型 (ChatOpenAI 或 ChatGoogleGenerativeAI)

        Raises:
            ValueError: 配置错误或环境变量缺失
            NotImplementedError: 不支持的 provider
        """
        model_config = self.get_active_model_config()

        provider = model_config.get("provider")
        if provider not in SUPPORTED_PROVIDERS:
            raise NotImplementedError(f"不支持的 provider: {provider}")

        env_key = model_config.get("env_key")
        if not env_key:
            raise ValueError("模型配置中缺少 env_key 字段")
        api_key = self._get_api_key(env_key)

        model_name = model_config.get("model_name")
        if not model_name:
            raise ValueError("模型配置中缺少 model_name 字段")

        temperature = model_config.get("temperature", 0.3)
        timeout = model_config.get("timeout", DEFAULT_LLM_TIMEOUT_SECONDS)

        if provider == "gemini":
            return ChatGoogleGenerativeAI(
                google_api_key=api_key,
                model=model_name,
                temperature=temperature,
                timeout=timeout
            )

        # OpenAI 官方及兼容接口（如 Moonshot）
        return ChatOpenAI(
            api_key=api_key,
            base_url=model_config.get("base_url"),
            model=model_name,
            temperature=temperature,
            timeout=timeout
        )


# 全局工厂实例
llm_factory = LLMFactory()


def get_llm():
    """获取 LLM 实例的便捷函数

    Returns:
        LangChain 聊天模型
    """
    return llm_factory.create_llm()
