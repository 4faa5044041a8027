"""Session entry 模型 - 宿主的追加式事件日志

PKM 模式只用它保存一个 bool：每次切换追加一条
{"type": "custom", "customType": "pkm-mode", "data": {"enabled": ...}}。
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable
import uuid

# PKM 模式 entry 的 customType
PKM_MODE_ENTRY = "pkm-mode"


@dataclass
class SessionEntry:
    """会话日志中的一条记录

    Attributes:
        type: 记录类型 ("custom" | "message" | ...)
        custom_type: custom 记录的标签
        data: 记录内容
        id: 唯一标识符
        timestamp: 创建时间
    """

    type: str
    custom_type: str | None = None
    data: Any = None
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """转换为 JSONL 行格式"""
        record: dict[str, Any] = {
            "type": self.type,
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "data": self.data,
        }
        if self.custom_type is not None:
            record["customType"] = self.custom_type
        return record

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> "SessionEntry":
        """从 JSONL 行还原

        Raises:
            ValueError: 缺少 type 字段或时间戳格式错误
        """
        entry_type = record.get("type")
        if not isinstance(entry_type, str):
            raise ValueError(f"Invalid entry type: {entry_type!r}")

        kwargs: dict[str, Any] = {
            "type": entry_type,
            "custom_type": record.get("customType"),
            "data": record.get("data"),
        }
        if record.get("id"):
            kwargs["id"] = str(record["id"])
        if record.get("timestamp"):
            kwargs["timestamp"] = datetime.fromisoformat(record["timestamp"])
        return cls(**kwargs)

    @classmethod
    def custom(cls, custom_type: str, data: Any) -> "SessionEntry":
        return cls(type="custom", custom_type=custom_type, data=data)


def make_mode_entry(enabled: bool) -> SessionEntry:
    """创建 PKM 模式状态记录"""
    return SessionEntry.custom(PKM_MODE_ENTRY, {"enabled": enabled})


def latest_enabled(entries: Iterable[SessionEntry]) -> bool | None:
    """从日志中取最近一次记录的 enabled 值

    从最新的记录往回找第一条 pkm-mode 记录。这条记录格式不对时返回 None，
    不再继续查更早的记录。

    Args:
        entries: 会话日志（旧 -> 新）

    Returns:
        最近一次的 enabled，没有记录时为 None
    """
    for entry in reversed(list(entries)):
        if entry.type != "custom" or entry.custom_type != PKM_MODE_ENTRY:
            continue

        data = entry.data
        if not isinstance(data, dict):
            return None
        enabled = data.get("enabled")
        if isinstance(enabled, bool):
            return enabled
        return None

    return None
