"""Rich table formatter for CLI output."""

import sys
from typing import Any, Dict, List, Optional, TextIO

from rich.console import Console
from rich.table import Table

from ...types import ModelDisplayInfo


def create_console(output: Optional[TextIO] = None, no_color: bool = False) -> Console:
    """Create a Rich console instance.

    Args:
        output: Output stream (defaults to stdout)
        no_color: Disable color output

    Returns:
        Console instance
    """
    if output is None:
        output = sys.stdout

    # Let Rich use the actual terminal width to avoid truncating headers
    return Console(file=output, no_color=no_color)


def _format_context_length(tokens: int) -> str:
    # Thousands (K) and millions (M) of tokens for readability
    if tokens >= 1_000_000:
        return f"{tokens/1_000_000:.1f}M"
    if tokens >= 1_000:
        return f"{tokens/1_000:.0f}K"
    return str(tokens)


def format_models_table(
    models: List[ModelDisplayInfo],
    console: Optional[Console] = None,
    show_pricing: bool = True,
    cache_age_seconds: Optional[int] = None,
) -> None:
    """Format models as a Rich table.

    Args:
        models: Display entries to render
        console: Rich console (will create if None)
        show_pricing: Include pricing columns
        cache_age_seconds: Age of the cached list, shown in the caption
    """
    if console is None:
        console = create_console()

    table = Table(title=f"Chutes Models ({len(models)})", show_header=True, header_style="bold magenta")
    table.add_column("Model", style="cyan", no_wrap=True)
    table.add_column("Owner")
    table.add_column("Context\nLength", justify="right")
    if show_pricing:
        table.add_column("Input\n$/1M", justify="right")
        table.add_column("Output\n$/1M", justify="right")
    table.add_column("Features")
    table.add_column("TEE", justify="center")

    for model in models:
        row = [model.id, model.owned_by, _format_context_length(model.context_length)]
        if show_pricing:
            row.append(f"${model.pricing.prompt_per_1m:.2f}")
            row.append(f"${model.pricing.completion_per_1m:.2f}")
        row.append(", ".join(model.features) or "-")
        row.append("✓" if model.supports_confidential_compute else "✗")
        table.add_row(*row)

    if cache_age_seconds is not None:
        table.caption = f"Cache age: {cache_age_seconds}s"

    console.print(table)


def format_status_table(status: Dict[str, Any], console: Optional[Console] = None) -> None:
    """Format plugin status as Rich output."""
    if console is None:
        console = create_console()

    if status.get("plugin_installed"):
        console.print("Plugin installed: [green]✅ Yes[/green]")
        for location in status.get("plugin_locations", []):
            console.print(f"Location: {location}")
    else:
        console.print("Plugin installed: [red]❌ No[/red]")
        console.print("\nTo install:\n  chutes-plugin install\n")

    if status.get("api_token_connected"):
        console.print(f"API Token: [green]✅ Connected[/green] ({status.get('api_token_source')})")
    else:
        console.print("API Token: [yellow]⚠️  Not connected[/yellow]")
        console.print("\nTo connect your token:\n  1. Run: opencode\n  2. Type: /connect chutes\n")


def format_doctor_table(checks: List[Dict[str, Any]], console: Optional[Console] = None) -> None:
    """Format doctor results grouped by section."""
    if console is None:
        console = create_console()

    section = None
    for check in checks:
        if check["section"] != section:
            section = check["section"]
            console.print(f"\n[bold]{section} Checks:[/bold]\n")
        if check["passed"]:
            console.print(f"✅ {check['name']}")
        else:
            console.print(f"❌ {check['name']}")
        if check.get("message"):
            console.print(f"   {check['message']}")

    passed = sum(1 for check in checks if check["passed"])
    console.print(f"\nResults: {passed}/{len(checks)} checks passed\n")
    if passed == len(checks):
        console.print("[green]Everything looks good! You're ready to use chutes-plugin.[/green]")
    else:
        console.print("[yellow]Some checks failed. Please address the issues above.[/yellow]")
