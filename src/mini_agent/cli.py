import asyncio
import logging

import typer
from rich.console import Console

app = typer.Typer(name="mini-agent", help="ReAct agent with web search and a calculator.")
console = Console()

EXAMPLES = [
    "Tell me about Albert Einstein and calculate 25 * 4",
    "What is the capital of France and what is 15 * 8?",
    "Search for information about quantum physics and calculate 100 / 4",
]


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s | %(levelname)s | %(message)s")


def _build_agent(max_steps: int = 0):
    """Create a ReactAgent with the default tools and one shared rate limiter."""
    from mini_agent.agents.console_callback import ConsoleCallback
    from mini_agent.agents.react_agent import ReactAgent
    from mini_agent.config import get_model_config, settings
    from mini_agent.models.agent_schemas import RunConfig
    from mini_agent.services.llm_service import LLMService
    from mini_agent.services.rate_limiter import RateLimitedCaller
    from mini_agent.tools import ToolRegistry, create_default_tools

    config = RunConfig.from_settings(settings, max_steps=max_steps)
    registry = ToolRegistry()
    registry.register_many(create_default_tools())

    caller = RateLimitedCaller(
        min_interval=config.min_call_interval,
        overload_delay=config.overload_retry_delay,
    )
    callback = ConsoleCallback(console)
    callback.print_tools(registry)

    llm = LLMService(get_model_config("react"))
    return ReactAgent(llm=llm, caller=caller, registry=registry, config=config, callback=callback)


@app.command()
def run(
    prompt: str = typer.Argument("", help="Request for the agent (defaults to a built-in example)"),
    example: int = typer.Option(0, "--example", "-e", help="Index of the built-in example to run"),
    max_steps: int = typer.Option(0, "--max-steps", min=0, help="Max agent steps (0 = use config)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable detailed logging"),
) -> None:
    """Answer a request with the ReAct loop."""
    _setup_logging(verbose)

    if not prompt:
        if not 0 <= example < len(EXAMPLES):
            console.print(f"[red]Example index must be between 0 and {len(EXAMPLES) - 1}.[/red]")
            raise typer.Exit(1)
        prompt = EXAMPLES[example]

    agent = _build_agent(max_steps=max_steps)
    console.print("🚀 Starting MiniAgent with ReAct Pattern...")
    console.print(f"[bold]Request:[/bold] {prompt}")
    console.print()

    result = asyncio.run(agent.run(prompt))
    if result.error:
        raise typer.Exit(1)


@app.command()
def examples() -> None:
    """List the built-in example requests."""
    for index, text in enumerate(EXAMPLES):
        console.print(f"[cyan]{index}[/cyan] {text}")


@app.command()
def tools() -> None:
    """Show the tools available to the agent."""
    from mini_agent.agents.console_callback import ConsoleCallback
    from mini_agent.tools import ToolRegistry, create_default_tools

    registry = ToolRegistry()
    registry.register_many(create_default_tools())
    ConsoleCallback(console).print_tools(registry)


@app.command()
def calc(expression: str = typer.Argument(..., help="Arithmetic expression")) -> None:
    """Run the calculator tool directly."""
    from mini_agent.tools.calculator import calculate

    result = calculate(expression)
    console.print(result, markup=False)
    if result.startswith("Error"):
        raise typer.Exit(1)


@app.command()
def search(
    query: str = typer.Argument(..., help="Search query"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable detailed logging"),
) -> None:
    """Run the search tool directly."""
    from mini_agent.tools.search import search as run_search

    _setup_logging(verbose)
    console.print(run_search(query), markup=False)


if __name__ == "__main__":
    app()
