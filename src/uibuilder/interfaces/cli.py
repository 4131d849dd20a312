"""
interfaces/cli.py — UIBuilder CLI Interface

Interactive REPL around the builder. Uses rich for terminal rendering and
aioconsole for async input.

Type a UI description to generate a component; once a component exists,
plain input modifies it. Progress events are rendered as they arrive.

Usage:
    python -m uibuilder
    python -m uibuilder --log-level DEBUG
"""

from __future__ import annotations

import json
import shlex
from datetime import datetime
from typing import Optional

import aioconsole
from rich import box
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from uibuilder.agent.orchestrator import Orchestrator
from uibuilder.agent.types import GenerationResult, ProgressEvent, Stage
from uibuilder.app.state import BuilderState
from uibuilder.brain import LLMClientFactory
from uibuilder.config.settings import Settings
from uibuilder.exceptions import AgentError, TransportError
from uibuilder.history.versions import VersionHistory
from uibuilder.observability.logger import get_logger

log = get_logger(__name__)

_BANNER = "AI UI Builder"

_HELP_TEXT = """
## UIBuilder Commands

| Command | Description |
|---------|-------------|
| `<description>` | Generate a UI (or modify the current one once it exists) |
| `/new <description>` | Start over with a fresh generation |
| `/code` | Show the current component source |
| `/plan` | Show the layout plan behind the current component |
| `/versions` | List saved versions |
| `/rollback <id>` | Restore a saved version |
| `/delete <id>` | Delete a saved version |
| `/export <path>` | Write the component to a `.tsx` file |
| `/status` | Show session stats |
| `/clear` | Clear the current component and the version history |
| `/help` | Show this help message |
| `exit` / `quit` / Ctrl+D | Exit |
"""

_STAGE_STYLES = {
    Stage.PLANNING: "cyan",
    Stage.GENERATING: "blue",
    Stage.EXPLAINING: "magenta",
    Stage.COMPLETE: "green",
    Stage.ERROR: "red",
}


class CLIInterface:
    """
    Interactive REPL.

    Wires together: Settings → LLM client → Orchestrator + VersionHistory →
    BuilderState, then runs a rich-rendered async input loop.
    """

    def __init__(self, settings: Settings, console: Optional[Console] = None):
        self.settings = settings
        self.console = console or Console()
        self._state: Optional[BuilderState] = None

    # ── Startup ───────────────────────────────────────────────────────────────

    async def start(self) -> None:
        self._init_components()
        self._print_banner()
        await self._repl_loop()

    def _init_components(self) -> None:
        try:
            llm_client = LLMClientFactory.from_settings(self.settings)
        except (TransportError, ValueError) as e:
            raise SystemExit(f"❌ Failed to create LLM client: {e}") from e

        orchestrator = Orchestrator.from_settings(self.settings, llm_client=llm_client)
        history = VersionHistory(
            store_path=self.settings.history.store_path,
            max_versions=self.settings.history.max_versions,
        )
        self._state = BuilderState(orchestrator, history)
        log.info("cli.initialized", session_id=orchestrator.id, versions=len(history))

    def _print_banner(self) -> None:
        llm = self.settings.llm
        history = self._state.history
        restored = ""
        if self._state.has_code:
            restored = f"\n[dim]Restored version {history.current_id} from history.[/]"
        self.console.print(
            Panel(
                f"[bold cyan]{_BANNER}[/]\n"
                f"LLM: [cyan]{llm.provider}[/]/[cyan]{llm.model}[/]  ·  "
                f"Versions: {len(history)}/{history.max_versions}\n\n"
                f"Describe a UI to build it, or [bold]/help[/] for commands. "
                f"[bold]exit[/] or Ctrl+D to quit."
                f"{restored}",
                border_style="cyan",
                padding=(0, 2),
            )
        )

    # ── REPL Loop ─────────────────────────────────────────────────────────────

    async def _repl_loop(self) -> None:
        while True:
            try:
                user_input = await aioconsole.ainput(self._build_prompt())
            except (EOFError, KeyboardInterrupt):
                self.console.print("\n[dim]Goodbye.[/]")
                break

            user_input = user_input.strip()
            if not user_input:
                continue
            if user_input.lower() in ("exit", "quit"):
                self.console.print("[dim]Goodbye.[/]")
                break

            await self.dispatch(user_input)

    def _build_prompt(self) -> str:
        mode = "modify" if self._state.has_code else "new"
        return f"ui[{mode}]> "

    async def dispatch(self, user_input: str) -> None:
        if not user_input.startswith("/"):
            await self._run_generation(user_input)
            return

        command, _, arg = user_input.partition(" ")
        arg = arg.strip()
        handlers = {
            "/new": self._cmd_new,
            "/code": self._cmd_code,
            "/plan": self._cmd_plan,
            "/versions": self._cmd_versions,
            "/rollback": self._cmd_rollback,
            "/delete": self._cmd_delete,
            "/export": self._cmd_export,
            "/status": self._cmd_status,
            "/clear": self._cmd_clear,
            "/help": self._cmd_help,
        }
        handler = handlers.get(command.lower())
        if handler is None:
            self.console.print(f"[yellow]Unknown command {command}. Try /help.[/]")
            return
        await handler(arg)

    # ── Generation ────────────────────────────────────────────────────────────

    async def _run_generation(self, prompt: str, fresh: bool = False) -> None:
        state = self._state
        if fresh or not state.has_code:
            result = await state.generate(prompt, on_progress=self._render_progress)
        else:
            result = await state.modify(prompt, on_progress=self._render_progress)
        self._render_result(result)

    def _render_progress(self, event: ProgressEvent) -> None:
        style = _STAGE_STYLES.get(event.stage, "white")
        if event.stage == Stage.ERROR:
            self.console.print(Text(f"❌ {event.message}", style=style))
        elif event.stage != Stage.COMPLETE:
            self.console.print(Text(event.message, style=style))

    def _render_result(self, result: GenerationResult) -> None:
        if not result.ok:
            return
        if result.explanation:
            self.console.print(Panel(Text(result.explanation.strip()), title="✨ Complete",
                                     border_style="green"))
        else:
            self.console.print("[green]✨ Code updated![/]")
        self._print_code()

    # ── Commands ──────────────────────────────────────────────────────────────

    async def _cmd_new(self, arg: str) -> None:
        if not arg:
            self.console.print("[yellow]Usage: /new <description>[/]")
            return
        await self._run_generation(arg, fresh=True)

    async def _cmd_code(self, _arg: str) -> None:
        if not self._state.has_code:
            self.console.print("[dim]No component yet.[/]")
            return
        self._print_code()

    async def _cmd_plan(self, _arg: str) -> None:
        if self._state.plan is None:
            self.console.print("[dim]No layout plan for the current component.[/]")
            return
        plan_json = json.dumps(self._state.plan, indent=2, ensure_ascii=False)
        self.console.print(Syntax(plan_json, "json", theme="monokai", word_wrap=True))

    async def _cmd_versions(self, _arg: str) -> None:
        history = self._state.history
        if not len(history):
            self.console.print("[dim]No saved versions.[/]")
            return
        table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
        table.add_column("ID")
        table.add_column("When")
        table.add_column("Prompt")
        table.add_column("", justify="center")
        for v in reversed(history.versions):
            when = datetime.fromtimestamp(v.timestamp / 1000).strftime("%H:%M:%S")
            marker = "●" if v.id == history.current_id else ""
            table.add_row(str(v.id), when, Text(v.prompt[:60]), marker)
        self.console.print(table)

    async def _cmd_rollback(self, arg: str) -> None:
        version_id = self._parse_id(arg, "/rollback <id>")
        if version_id is None:
            return
        version = self._state.rollback(version_id)
        if version is None:
            self.console.print(f"[yellow]No version {version_id}.[/]")
            return
        self.console.print(f"[green]Rolled back to version {version_id}.[/]")
        self._print_code()

    async def _cmd_delete(self, arg: str) -> None:
        version_id = self._parse_id(arg, "/delete <id>")
        if version_id is None:
            return
        if self._state.history.delete(version_id):
            self.console.print(f"[dim]Deleted version {version_id}.[/]")
        else:
            self.console.print(f"[yellow]No version {version_id}.[/]")

    async def _cmd_export(self, arg: str) -> None:
        if not arg:
            self.console.print("[yellow]Usage: /export <path>[/]")
            return
        try:
            target = self._state.export(shlex.split(arg)[0])
        except (AgentError, OSError) as e:
            self.console.print(Text(f"Export failed: {e}", style="red"))
            return
        self.console.print(f"[green]Saved {target}[/]")

    async def _cmd_status(self, _arg: str) -> None:
        summary = self._state.orchestrator.status_summary()
        table = Table(box=box.SIMPLE, show_header=False)
        for key, value in summary.items():
            table.add_row(key, str(value))
        table.add_row("versions", str(len(self._state.history)))
        self.console.print(table)

    async def _cmd_clear(self, _arg: str) -> None:
        self._state.clear()
        self.console.print("[dim]Cleared component and version history.[/]")

    async def _cmd_help(self, _arg: str) -> None:
        self.console.print(Markdown(_HELP_TEXT))

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _print_code(self) -> None:
        self.console.print(
            Syntax(self._state.code, "tsx", theme="monokai", line_numbers=True, word_wrap=True)
        )

    def _parse_id(self, arg: str, usage: str) -> Optional[int]:
        try:
            return int(arg)
        except ValueError:
            self.console.print(f"[yellow]Usage: {usage}[/]")
            return None


async def run_cli(settings: Settings, log) -> None:
    """
    Entry point called from main.py.

    Args:
        settings:  Loaded, validated settings.
        log:       Application-level logger.
    """
    cli = CLIInterface(settings=settings)

    log.info("cli.starting")
    try:
        await cli.start()
    except KeyboardInterrupt:
        log.info("cli.interrupted")
    finally:
        log.info("cli.stopped")
