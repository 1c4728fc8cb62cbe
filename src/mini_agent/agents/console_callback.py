"""Rich console callback for the ReAct loop."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from mini_agent.models.agent_schemas import Action, ActionKind, AgentResult, RunState, Step
from mini_agent.tools import ToolRegistry

MAX_RESULT_LINES = 30
MAX_RESULT_CHARS = 2000


def _truncate(text: str, max_lines: int = MAX_RESULT_LINES, max_chars: int = MAX_RESULT_CHARS) -> str:
    lines = text.splitlines()
    if len(lines) > max_lines or len(text) > max_chars:
        kept = lines[:max_lines]
        truncated = "\n".join(kept)
        if len(truncated) > max_chars:
            truncated = truncated[:max_chars]
        omitted = len(lines) - max_lines
        if omitted > 0:
            truncated += f"\n... ({omitted} more lines)"
        else:
            truncated += "..."
        return truncated
    return text


ACTION_ICONS = {
    ActionKind.SEARCH: "🔍",
    ActionKind.CALCULATE: "🧮",
    ActionKind.FINAL_ANSWER: "✅",
    ActionKind.NONE: "⏹ ",
}


class ConsoleCallback:
    def __init__(self, console: Console | None = None, observation_chars: int = 500) -> None:
        self.console = console or Console()
        self.observation_chars = observation_chars

    def print_tools(self, registry: ToolRegistry) -> None:
        table = Table(title="Available tools", border_style="dim", show_lines=False)
        table.add_column("Tool", style="bold cyan", no_wrap=True)
        table.add_column("Description", style="dim")
        for tool in registry.list_all():
            icon = ACTION_ICONS.get(tool.name, "🔧")
            table.add_row(f"{icon} {tool.name}({tool.parameter})", tool.description)
        self.console.print(table)
        self.console.print()

    def on_step_start(self, step: int, max_steps: int) -> None:
        self.console.rule(f"[bold blue]Step {step}/{max_steps}", style="blue")

    def on_thinking(self, text: str) -> None:
        self.console.print(
            Panel(
                Text(_truncate(text)),
                title="[bold yellow]Thought",
                border_style="yellow",
                padding=(0, 1),
            )
        )

    def on_action(self, action: Action) -> None:
        icon = ACTION_ICONS[action.kind]
        self.console.print(f"  {icon} [bold cyan]{action.kind.value}[/]")
        if action.argument is not None:
            self.console.print(f"      [dim]input:[/] {escape(_truncate(action.argument, 1, 120))}")
        if action.error is not None:
            self.console.print(f"      [red]{escape(action.error)}[/]")

    def on_observation(self, step: Step) -> None:
        self.console.print(
            Panel(
                Text(_truncate(step.observation, max_chars=self.observation_chars), style="dim"),
                title="[dim]observation",
                border_style="dim",
                padding=(0, 1),
            )
        )

    def on_finish(self, result: AgentResult) -> None:
        self.console.print()
        if result.state is RunState.FAILED:
            self.console.rule("[bold red]Agent failed, fallback answer", style="red")
            style = "red"
        else:
            self.console.rule("[bold green]Agent finished", style="green")
            style = "green"
        self.console.print(
            Panel(
                Text(result.output),
                title=f"[bold {style}]Final answer ({len(result.steps)} steps, {result.tool_calls} tool calls)",
                border_style=style,
                padding=(0, 1),
            )
        )
        if result.error:
            self.console.print(f"[dim]Error: {escape(result.error)}[/dim]")
