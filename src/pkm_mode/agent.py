"""Agent - 简单对话循环

每一轮都通过宿主重新构建 system prompt，
这样 /pkm 切换后的下一条消息立即生效。
"""

from __future__ import annotations

from anthropic import APIError
from rich.console import Console
from rich.panel import Panel

from pkm_mode.core.message import Message
from pkm_mode.llm import get_llm
from pkm_mode.prompt.builder import PromptBuilder
from pkm_mode.runtime import LocalHost
from pkm_mode.session_logger import SessionLogger

console = Console()


class Agent:
    """对话 Agent

    Attributes:
        host: 宿主，负责派发 before_agent_start
        logger: 会话日志
        messages: 对话历史
    """

    def __init__(self, host: LocalHost, logger: SessionLogger):
        self.host = host
        self.logger = logger
        self.prompt_builder = PromptBuilder()
        self.messages: list[Message] = []

    async def run(self, user_input: str, forwarded: bool = False) -> str:
        """发送一条用户消息并返回回复文本

        Args:
            user_input: 用户输入
            forwarded: 是否由插件转发

        Returns:
            回复文本，LLM 调用失败时为空字符串
        """
        self.logger.start_turn()
        self.logger.log_user_input(user_input)
        self.messages.append(Message(role="user", content=user_input, forwarded=forwarded))

        base_prompt = await self.prompt_builder.build()
        system_prompt = await self.host.build_system_prompt(base_prompt)
        self.logger.log_system_prompt(system_prompt)

        try:
            llm = await get_llm()
            response = await llm.complete(
                [msg.to_anthropic_format() for msg in self.messages],
                system_prompt=system_prompt,
            )
        except APIError as e:
            # 丢弃未得到回复的消息，保持 user/assistant 交替
            self.messages.pop()
            self.logger.log_error(e)
            console.print(Panel(f"{type(e).__name__}: {e}", title="Error", border_style="red"))
            return ""

        self.logger.log_llm_response(response.text, response.stop_reason)
        self.messages.append(Message(role="assistant", content=response.text))
        console.print(Panel(response.text, title="Claude", border_style="green"))
        return response.text

    async def run_pending(self) -> None:
        """处理插件转发的消息"""
        for text in self.host.drain_messages():
            await self.run(text, forwarded=True)
