"""LLM 接口 - Anthropic 封装"""

from dataclasses import dataclass
from typing import Any

from anthropic import AsyncAnthropic
from anthropic.types import Message, TextBlock

from pkm_mode.config import get_api_key, settings


@dataclass
class LLMResponse:
    """LLM 响应封装"""

    text: str = ""
    stop_reason: str | None = None
    raw: Message | None = None


class AnthropicClient:
    """Anthropic API 客户端"""

    def __init__(self) -> None:
        self.client = AsyncAnthropic(api_key=get_api_key())
        self.model = settings.anthropic_model
        self.max_tokens = settings.anthropic_max_tokens

    async def complete(
        self,
        messages: list[dict[str, Any]],
        system_prompt: str,
    ) -> LLMResponse:
        """调用 LLM 完成对话"""
        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system_prompt,
            messages=messages,  # type: ignore
        )

        text_parts = [block.text for block in response.content if isinstance(block, TextBlock)]

        return LLMResponse(
            text="\n".join(text_parts),
            stop_reason=response.stop_reason,
            raw=response,
        )


# 全局客户端实例
_llm_client: AnthropicClient | None = None


async def get_llm() -> AnthropicClient:
    """获取 LLM 客户端（单例）"""
    global _llm_client
    if _llm_client is None:
        _llm_client = AnthropicClient()
    return _llm_client
