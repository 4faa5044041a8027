"""Message 模型 - Agent 对话历史"""

from dataclasses import dataclass, field
from typing import Literal, Any
from datetime import datetime
import uuid


@dataclass
class Message:
    """对话消息

    Attributes:
        role: 消息角色 ("user" | "assistant")
        content: 消息内容
        forwarded: 是否由插件转发（例如 /pkm 后跟的文本）
        id: 唯一标识符
        timestamp: 创建时间
    """

    role: Literal["user", "assistant"]
    content: str | list[dict[str, Any]]
    forwarded: bool = False
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)

    def to_anthropic_format(self) -> dict[str, Any]:
        """转换为 Anthropic API 格式"""
        return {
            "role": self.role,
            "content": self.content,
        }
