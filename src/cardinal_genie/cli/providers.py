"""Provider factory functions for CLI.

Centralizes creation of the chat provider and logging setup from
environment variables. Hides configuration details from command
implementations.
"""

import logging
import os

import typer
from rich.console import Console
from rich.logging import RichHandler

from ..llm import ChatProvider, create_chat_provider

# Default console for output
_console = Console()

DEFAULT_GATEWAY_MODEL = "google/gemini-2.5-flash"


def setup_logging(level: str, console: Console | None = None) -> None:
    """Send log records to the console through Rich.

    Args:
        level: Level name (debug, info, warning, error)
        console: Optional Rich console for output
    """
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or Console(stderr=True), rich_tracebacks=False)],
        force=True,
    )
    # Keep transport chatter out unless explicitly debugging
    if level.lower() != "debug":
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("openai").setLevel(logging.WARNING)


def _float_env(name: str, default: float, console: Console) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        console.print(f"[red]Error: {name} must be a number, got {raw!r}[/red]")
        raise typer.Exit(code=1) from None


def get_provider(console: Console | None = None) -> ChatProvider:
    """Create the chat provider from environment variables.

    Args:
        console: Optional Rich console for output

    Returns:
        Chat provider instance

    Raises:
        typer.Exit: If required credentials are missing

    Environment variables:
        GENIE_PROVIDER: Provider type (hosted, openai; default: hosted)
        SUPABASE_URL: Base URL of the hosted functions (hosted provider)
        SUPABASE_PUBLISHABLE_KEY: Bearer key for the hosted functions
        AI_GATEWAY_URL: OpenAI-compatible gateway URL (openai provider)
        AI_GATEWAY_API_KEY: Gateway API key (openai provider)
        AI_GATEWAY_MODEL: Gateway model (default: google/gemini-2.5-flash)
        GENIE_READ_TIMEOUT: Seconds to wait for response data (default: 60)
        GENIE_CONNECT_TIMEOUT: Seconds to wait for a connection (default: 10)
    """
    con = console or _console
    provider_name = os.getenv("GENIE_PROVIDER", "hosted").lower()
    read_timeout = _float_env("GENIE_READ_TIMEOUT", 60.0, con)
    connect_timeout = _float_env("GENIE_CONNECT_TIMEOUT", 10.0, con)

    if provider_name in ("hosted", "genie", "supabase"):
        base_url = os.getenv("SUPABASE_URL")
        api_key = os.getenv("SUPABASE_PUBLISHABLE_KEY")
        if not base_url:
            con.print("[red]Error: SUPABASE_URL not set in environment[/red]")
            raise typer.Exit(code=1)
        if not api_key:
            con.print("[red]Error: SUPABASE_PUBLISHABLE_KEY not set in environment[/red]")
            raise typer.Exit(code=1)
        return create_chat_provider(
            "hosted",
            api_key=api_key,
            base_url=base_url,
            read_timeout=read_timeout,
            connect_timeout=connect_timeout,
        )

    if provider_name in ("openai", "gateway"):
        api_key = os.getenv("AI_GATEWAY_API_KEY")
        if not api_key:
            con.print("[red]Error: AI_GATEWAY_API_KEY not set in environment[/red]")
            raise typer.Exit(code=1)
        return create_chat_provider(
            "openai",
            api_key=api_key,
            base_url=os.getenv("AI_GATEWAY_URL") or None,
            model=os.getenv("AI_GATEWAY_MODEL", DEFAULT_GATEWAY_MODEL),
            timeout=read_timeout,
        )

    con.print(f"[red]Error: Unknown provider: {provider_name}[/red]")
    raise typer.Exit(code=1)


def describe_configuration() -> list[tuple[str, bool]]:
    """(variable, is set) pairs for the health report."""
    names = (
        "SUPABASE_URL",
        "SUPABASE_PUBLISHABLE_KEY",
        "AI_GATEWAY_URL",
        "AI_GATEWAY_API_KEY",
    )
    return [(name, bool(os.getenv(name))) for name in names]
