"""CLI 入口"""

import asyncio
from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel

from pkm_mode.agent import Agent
from pkm_mode.config import get_api_key, settings
from pkm_mode.controller import FLAG_NAME, PROMPT_FLAG_NAME, register
from pkm_mode.core.entries import latest_enabled
from pkm_mode.prompt.resolver import PromptResolver
from pkm_mode.prompt.settings_lookup import resolve_supplementary_path
from pkm_mode.runtime import LocalHost
from pkm_mode.session_logger import SessionLogger
from pkm_mode.session_store import SessionStore

app = typer.Typer(name="pkm-mode", help="pkm-mode - PKM mode for a terminal coding agent")
console = Console()


@app.callback()
def callback():
    """pkm-mode - 带 PKM 模式开关的对话 Agent"""
    pass


@app.command()
def run(
    prompt: Annotated[str | None, typer.Argument(help="初始提示，不提供则进入交互模式")] = None,
    pkm: Annotated[bool, typer.Option("--pkm", help="Start in PKM mode")] = False,
    pkm_prompt: Annotated[str | None, typer.Option("--pkm-prompt", help="Path to a PKM prompt file")] = None,
    resume: Annotated[bool, typer.Option("--continue", "-c", help="Continue the most recent session")] = False,
):
    """启动 Agent"""
    # 检查 API Key
    try:
        get_api_key()
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    store = (SessionStore.latest() if resume else None) or SessionStore.create()
    asyncio.run(_run(store, {FLAG_NAME: pkm, PROMPT_FLAG_NAME: pkm_prompt}, prompt))


@app.command()
def status(
    pkm_prompt: Annotated[str | None, typer.Option("--pkm-prompt", help="Path to a PKM prompt file")] = None,
):
    """显示 PKM prompt 来源、知识库位置和最近会话的状态"""
    resolved = PromptResolver().resolve(pkm_prompt)
    location = resolve_supplementary_path()
    latest = SessionStore.latest()
    persisted = latest_enabled(latest.get_entries()) if latest else None

    console.print(Panel(
        f"Prompt: {resolved.source}\n"
        f"Knowledge base: {location or '-'}\n"
        f"Latest session: {latest.session_id if latest else '-'}\n"
        f"Persisted state: {'-' if persisted is None else ('enabled' if persisted else 'disabled')}",
        title="PKM mode",
        border_style="blue",
    ))


async def _run(store: SessionStore, flags: dict, prompt: str | None) -> None:
    with SessionLogger(store.session_id) as logger:
        host = LocalHost(store, flags=flags, logger=logger)
        register(host)
        agent = Agent(host, logger)

        await host.start_session()

        console.print(Panel(
            "[bold]pkm-mode[/bold]\n"
            f"Model: {settings.anthropic_model}\n"
            f"Session: {store.session_id}\n"
            f"Commands: {', '.join('/' + c.name for c in host.list_commands())}",
            border_style="blue",
        ))

        if prompt:
            # 单次模式
            await _handle_input(host, agent, prompt)
        else:
            # 交互模式
            await _run_interactive(host, agent)


async def _handle_input(host: LocalHost, agent: Agent, user_input: str) -> None:
    """/命令交给宿主，其余发送给 Agent"""
    if user_input.startswith("/"):
        await host.dispatch(user_input)
        await agent.run_pending()
    else:
        await agent.run(user_input)


async def _run_interactive(host: LocalHost, agent: Agent) -> None:
    """交互模式"""
    console.print("\n[dim]Enter your request (/pkm to toggle PKM mode, q/exit to quit):[/dim]\n")

    while True:
        try:
            status_line = host.status_line()
            user_input = typer.prompt(f"You [{status_line}]" if status_line else "You")
            if not user_input.strip():
                continue

            # 检查退出命令
            if user_input.strip().lower() in ("q", "exit"):
                console.print("\n[dim]Goodbye![/dim]")
                break

            console.print()
            await _handle_input(host, agent, user_input.strip())
            console.print()

        except (KeyboardInterrupt, typer.Abort):
            console.print("\n\n[dim]Goodbye![/dim]")
            break


if __name__ == "__main__":
    app()
