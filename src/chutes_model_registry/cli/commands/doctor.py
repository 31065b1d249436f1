"""Environment diagnostics for the chutes-plugin CLI."""

import sys
from typing import Any, Dict, List

import click

from ...errors import ModelFetchError
from ..formatters import create_console, format_doctor_json, format_doctor_table, format_json
from ..utils import ExitCode, create_fetcher
from .status import find_installed_plugins, get_token_source


def _check(section: str, name: str, passed: bool, message: str = "") -> Dict[str, Any]:
    return {"section": section, "name": name, "passed": passed, "message": message}


def run_checks(ctx_obj: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Run installation, API and network checks.

    Args:
        ctx_obj: Click context object populated by the root group

    Returns:
        Check results in display order
    """
    checks: List[Dict[str, Any]] = []

    locations = find_installed_plugins()
    checks.append(
        _check(
            "Installation",
            "Plugin installed",
            bool(locations),
            f"Location: {locations[0]}" if locations else "Run: chutes-plugin install",
        )
    )

    token_source = get_token_source(ctx_obj.get("config"))
    checks.append(
        _check(
            "API",
            "API token connected",
            token_source is not None,
            f"Source: {token_source}" if token_source else "Run: opencode, then type: /connect chutes",
        )
    )

    try:
        with create_fetcher(ctx_obj) as fetcher:
            models = fetcher.fetch_models()
        checks.append(_check("Network", "Can reach Chutes API", True, f"Found {len(models)} models available"))
    except ModelFetchError as e:
        checks.append(_check("Network", "Can reach Chutes API", False, f"Connection failed: {e}"))

    return checks


@click.command()
@click.pass_context
def doctor(ctx: click.Context) -> None:
    """Verify that everything is configured correctly."""
    checks = run_checks(ctx.obj)

    if ctx.obj["format"] == "json":
        format_json(format_doctor_json(checks))
    else:
        console = create_console(no_color=ctx.obj["no_color"])
        format_doctor_table(checks, console)

    if not all(check["passed"] for check in checks):
        sys.exit(ExitCode.GENERIC_ERROR)
