"""共享 fixture: 隔离配置和内存宿主"""

import asyncio
from typing import Any

import pytest

from pkm_mode.config import Settings
from pkm_mode.core.entries import SessionEntry


class FakeHost:
    """内存宿主，记录插件的所有调用"""

    def __init__(self, flags: dict[str, Any] | None = None, entries: list[SessionEntry] | None = None, has_ui: bool = True):
        self.flag_values = dict(flags or {})
        self.flag_defaults: dict[str, Any] = {}
        self.commands: dict[str, Any] = {}
        self.handlers: dict[str, list] = {}
        self.entries: list[SessionEntry] = list(entries or [])
        self.sent: list[str] = []
        self.notifications: list[tuple[str, str]] = []
        self.statuses: dict[str, str] = {}
        self._has_ui = has_ui

    # HostAPI
    def register_flag(self, name, *, description, type, default=None):
        self.flag_defaults[name] = default

    def register_command(self, name, *, description, handler):
        self.commands[name] = handler

    def on(self, event, handler):
        self.handlers.setdefault(event, []).append(handler)

    def get_flag(self, name):
        return self.flag_values.get(name, self.flag_defaults.get(name))

    def append_entry(self, custom_type, data):
        self.entries.append(SessionEntry.custom(custom_type, data))

    def send_user_message(self, text):
        self.sent.append(text)

    # HostContext
    @property
    def has_ui(self):
        return self._has_ui

    def notify(self, message, level="info"):
        self.notifications.append((message, level))

    def set_status(self, key, value):
        if value is None:
            self.statuses.pop(key, None)
        else:
            self.statuses[key] = value

    def get_entries(self):
        return list(self.entries)

    # 测试辅助
    def run_command(self, args: str, name: str = "pkm") -> None:
        asyncio.run(self.commands[name](args, self))

    def emit(self, event: str, payload: Any = None) -> list[Any]:
        async def _emit():
            return [await handler(payload, self) for handler in self.handlers.get(event, [])]

        return asyncio.run(_emit())


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """工作目录和 home 都指向临时目录的配置"""
    monkeypatch.delenv("PKM_MODE_HOME", raising=False)
    project = tmp_path / "project"
    home = tmp_path / "home"
    project.mkdir()
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return Settings(
        working_dir=project,
        global_settings_file=home / ".pkm" / "settings.json",
    )


@pytest.fixture
def fake_host():
    return FakeHost()
