"""Main CLI application using Typer."""
import asyncio
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.rule import Rule
from rich.table import Table

from ..conversation import QUICK_ACTIONS, Conversation, quick_action_prompt
from ..errors import GenieError, RequestFailed
from ..prompts import load_prompt
from ..render import AssistantText, render_body, render_message
from ..workflows import (
    BrandWorkflow,
    BusinessPlanForm,
    BusinessPlanWorkflow,
    LLCForm,
    LLCWorkflow,
    NameIdeasForm,
    PitchDeckForm,
    PitchDeckWorkflow,
    logo_request,
    section_label,
    write_export,
)
from ..workflows.business_plan import SECTION_TITLES
from .providers import describe_configuration, get_provider, setup_logging

# Load environment variables
load_dotenv()

# Create Typer app
app = typer.Typer(
    name="cardinal",
    help="Cardinal Business Genie: an AI business consultant in your terminal",
    no_args_is_help=True,
    add_completion=True,
)
brand_app = typer.Typer(help="Brand identity: names and logos", no_args_is_help=True)
app.add_typer(brand_app, name="brand")

# Console for rich output
console = Console()

EXIT_WORDS = ("exit", "quit", "q")


def _fail(message: str) -> typer.Exit:
    console.print(f"[red]Error: {message}[/red]")
    return typer.Exit(code=1)


def _resolve_action(action: str) -> str:
    """Quick action by 1-based number or case-insensitive label."""
    if action.isdigit() and 1 <= int(action) <= len(QUICK_ACTIONS):
        return QUICK_ACTIONS[int(action) - 1]
    for label in QUICK_ACTIONS:
        if label.lower() == action.strip().lower():
            return label
    raise _fail(f"Unknown quick action: {action}. Choose one of: {', '.join(QUICK_ACTIONS)}")


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        "warning",
        "--log-level",
        help="Console log level: debug, info, warning or error"
    ),
):
    """Cardinal Business Genie."""
    setup_logging(log_level)


async def _stream_turn(conversation: Conversation, text: str) -> None:
    """Run one turn, re-rendering the reply live as it streams."""
    with Live(console=console, refresh_per_second=12, transient=False) as live:
        def _on_update(value: str) -> None:
            live.update(render_body(AssistantText(value, streaming=True)))

        try:
            reply = await conversation.send(text, on_update=_on_update)
        except RequestFailed as e:
            live.update(render_body(AssistantText(conversation.last_response() or "")))
            console.print(f"[red]{e.message}[/red]")
            return
        live.update(render_body(AssistantText(reply)))


@app.command()
def chat(
    action: str | None = typer.Option(
        None,
        "--action",
        "-a",
        help="Start with a quick action (number 1-8 or its label)"
    ),
    once: str | None = typer.Option(
        None,
        "--once",
        help="Send a single message, print the reply and exit"
    ),
):
    """Interactive streaming chat with Cardinal Genie."""
    async def _chat():
        provider = get_provider(console)
        async with provider:
            conversation = Conversation(provider)

            if once is not None:
                await _stream_turn(conversation, once)
                return

            console.print(Rule("[bold #c2001f]Cardinal Business Genie[/bold #c2001f]"))
            console.print(render_message(conversation.messages[0]))
            console.print("[dim]Type 'exit', 'quit', or 'q' to leave[/dim]\n")

            pending = quick_action_prompt(_resolve_action(action)) if action else None
            while True:
                try:
                    if pending is not None:
                        console.print("[bold]You:[/bold] ", end="")
                        console.print(pending, markup=False, highlight=False)
                        user_input, pending = pending, None
                    else:
                        user_input = console.input("[bold]You:[/bold] ")

                    if not user_input.strip():
                        continue
                    if user_input.strip().lower() in EXIT_WORDS:
                        console.print("[dim]Goodbye![/dim]")
                        break

                    console.print("[bold #c2001f]Genie:[/bold #c2001f]")
                    await _stream_turn(conversation, user_input)
                    console.print()

                except (KeyboardInterrupt, EOFError):
                    console.print("\n[dim]Goodbye![/dim]")
                    break

    try:
        asyncio.run(_chat())
    except ValueError as e:
        raise _fail(str(e)) from None
    except KeyboardInterrupt:
        pass


@app.command(name="tui")
def tui_command(
    log_panel: str | None = typer.Option(
        None,
        "--log-panel",
        "-l",
        help="Show log panel with level: debug (all), info, warning, or error"
    ),
):
    """Launch interactive TUI chat interface."""
    async def _tui():
        from ..ui import run_textual_tui

        provider = get_provider(console)
        # The log panel replaces console output while the TUI owns the terminal
        logging.getLogger().handlers.clear()
        logging.getLogger("cardinal_genie").setLevel(logging.DEBUG)
        try:
            await run_textual_tui(provider, log_level=log_panel)
        finally:
            await provider.close()
            console.print("\n[dim]Goodbye![/dim]")

    try:
        asyncio.run(_tui())
    except KeyboardInterrupt:
        pass


def _save(output: Path | None, filename: str, text: str) -> None:
    if output is None:
        return
    path = write_export(output, filename, text)
    console.print(f"[green]Saved {path}[/green]")


@app.command()
def llc(
    name: str = typer.Option(..., "--name", "-n", help="Company name (LLC is appended)"),
    state: str = typer.Option(..., "--state", "-s", help="U.S. state of formation"),
    business_type: str = typer.Option("", "--type", "-t", help="Type of business"),
    owners: str = typer.Option("1", "--owners", help="Number of owners/members"),
    registered_agent: str = typer.Option("", "--agent", help="Registered agent"),
    address: str = typer.Option("", "--address", help="Business address"),
    purpose: str = typer.Option("", "--purpose", help="Business purpose"),
    output: Path | None = typer.Option(
        None, "--output", "-o", file_okay=False, help="Directory to save the formation package"
    ),
):
    """Generate an LLC formation package."""
    form = LLCForm(
        company_name=name,
        state=state,
        business_type=business_type,
        owners=owners,
        registered_agent=registered_agent,
        address=address,
        purpose=purpose,
    )

    async def _llc():
        provider = get_provider(console)
        async with provider:
            workflow = LLCWorkflow(provider)
            with console.status(f"Generating documents for {form.display_name}...") as status:
                docs = await workflow.run(
                    form,
                    on_update=lambda value: status.update(f"Generating... {len(value):,} chars"),
                )
        console.print(Panel(
            render_body(AssistantText(docs.content)),
            title=f"{form.display_name} - Formation Package",
            border_style="#c2001f",
        ))
        _save(output, docs.filename, docs.export_text())

    try:
        asyncio.run(_llc())
    except (GenieError, ValueError) as e:
        raise _fail(str(e)) from None


@app.command()
def plan(
    name: str = typer.Option(..., "--name", "-n", help="Business name"),
    industry: str = typer.Option(..., "--industry", "-i", help="Industry"),
    business_model: str = typer.Option(..., "--model", "-m", help="Business model"),
    target_market: str = typer.Option("", "--market", help="Target market"),
    description: str = typer.Option("", "--description", "-d", help="Business description"),
    funding: str = typer.Option("", "--funding", help="Funding goal"),
    output: Path | None = typer.Option(
        None, "--output", "-o", file_okay=False, help="Directory to save the plan"
    ),
):
    """Generate a business plan."""
    form = BusinessPlanForm(
        business_name=name,
        industry=industry,
        business_model=business_model,
        target_market=target_market,
        description=description,
        funding=funding,
    )

    async def _plan():
        provider = get_provider(console)
        async with provider:
            workflow = BusinessPlanWorkflow(provider)
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                BarColumn(),
                console=console,
            ) as progress:
                task = progress.add_task(f"Writing {section_label(0)}", total=len(SECTION_TITLES))

                def _on_progress(index: int) -> None:
                    progress.update(task, completed=index, description=f"Writing {section_label(index)}")

                result = await workflow.run(form, on_progress=_on_progress)
                progress.update(task, completed=len(SECTION_TITLES), description="Done")

        for title, text in result.sections():
            console.print(Panel(render_body(AssistantText(text)), title=title, title_align="left"))
        _save(output, workflow.filename(form), result.export_text(form.business_name))

    try:
        asyncio.run(_plan())
    except GenieError as e:
        raise _fail(str(e)) from None


@app.command()
def pitch(
    name: str = typer.Option(..., "--name", "-n", help="Company name"),
    problem: str = typer.Option(..., "--problem", "-p", help="Problem being solved"),
    solution: str = typer.Option(..., "--solution", "-s", help="Your solution"),
    industry: str = typer.Option("", "--industry", "-i", help="Industry"),
    funding_goal: str = typer.Option("", "--funding", help="Funding goal"),
    stage: str = typer.Option("", "--stage", help="Company stage"),
    output: Path | None = typer.Option(
        None, "--output", "-o", file_okay=False, help="Directory to save the deck"
    ),
):
    """Generate an investor pitch deck."""
    form = PitchDeckForm(
        company_name=name,
        industry=industry,
        problem=problem,
        solution=solution,
        funding_goal=funding_goal,
        stage=stage,
    )

    async def _pitch():
        provider = get_provider(console)
        async with provider:
            workflow = PitchDeckWorkflow(provider)
            with console.status("Building your pitch deck...") as status:
                deck = await workflow.run(
                    form,
                    on_update=lambda value: status.update(f"Building... {len(value):,} chars"),
                )
        for number, slide in enumerate(deck.slides, start=1):
            console.print(Panel(
                render_body(AssistantText(slide.content)),
                title=f"{number}. {slide.title}",
                title_align="left",
                border_style="#c2001f",
            ))
        _save(output, deck.filename, deck.export_text())

    try:
        asyncio.run(_pitch())
    except GenieError as e:
        raise _fail(str(e)) from None


@brand_app.command("names")
def brand_names(
    industry: str = typer.Option(..., "--industry", "-i", help="Industry"),
    style: str = typer.Option("modern", "--style", help="Naming style"),
    keywords: str = typer.Option("", "--keywords", "-k", help="Keywords to draw from"),
    description: str = typer.Option("", "--description", "-d", help="Business description"),
    count: int = typer.Option(8, "--count", "-c", min=1, max=20, help="Number of names"),
):
    """Suggest brand names with taglines."""
    form = NameIdeasForm(
        industry=industry, style=style, keywords=keywords, description=description, count=count
    )

    async def _names():
        provider = get_provider(console)
        async with provider:
            with console.status("Brainstorming names..."):
                ideas = await BrandWorkflow(provider).suggest_names(form)
        table = Table(title="Brand name ideas", title_style="bold #c2001f")
        table.add_column("Name", style="bold")
        table.add_column("Tagline")
        for idea in ideas:
            table.add_row(idea.name, idea.tagline)
        console.print(table)

    try:
        asyncio.run(_names())
    except GenieError as e:
        raise _fail(str(e)) from None


@brand_app.command("logo")
def brand_logo(
    name: str = typer.Option(..., "--name", "-n", help="Business name"),
    industry: str = typer.Option(..., "--industry", "-i", help="Industry"),
    style: str = typer.Option("modern", "--style", help="modern, professional, creative, tech, elegant or playful"),
    colors: str = typer.Option("", "--colors", help="Preferred colors"),
    output: Path = typer.Option(
        Path("."), "--output", "-o", file_okay=False, help="Directory to save the logo"
    ),
):
    """Generate a logo and save it as PNG."""
    async def _logo():
        request = logo_request(name, industry, style=style, colors=colors)
        provider = get_provider(console)
        async with provider:
            with console.status(f"Generating {request.style} logo..."):
                _, path = await BrandWorkflow(provider).generate_logo(request, directory=output)
        console.print(f"[green]Logo saved to {path}[/green]")

    try:
        asyncio.run(_logo())
    except NotImplementedError:
        raise _fail("Logo generation requires the hosted provider (GENIE_PROVIDER=hosted)") from None
    except (GenieError, ValueError) as e:
        raise _fail(str(e)) from None


@app.command()
def render(
    file: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
        help="File with assistant-authored markdown"
    ),
):
    """Render assistant text from a file, including charts and metrics."""
    console.print(render_body(AssistantText(file.read_text(encoding="utf-8"))))


@app.command()
def health():
    """Check configuration and packaged prompts."""
    all_healthy = True

    for name, is_set in describe_configuration():
        if is_set:
            console.print(f"[green]+[/green] {name}: SET")
        else:
            console.print(f"[yellow]![/yellow] {name}: NOT SET")

    for prompt in ("system", "welcome", "llc", "business_plan", "pitch_deck", "brand_names"):
        try:
            load_prompt(prompt)
            console.print(f"[green]+[/green] Prompt {prompt}: OK")
        except FileNotFoundError:
            console.print(f"[red]x[/red] Prompt {prompt}: MISSING")
            all_healthy = False

    try:
        provider = get_provider(Console(stderr=True, quiet=True))
    except typer.Exit:
        console.print("[red]x[/red] Provider: NOT CONFIGURED")
        all_healthy = False
    else:
        console.print(f"[green]+[/green] Provider: {provider.model}")
        asyncio.run(provider.close())

    if not all_healthy:
        raise typer.Exit(code=1)


def main():
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
