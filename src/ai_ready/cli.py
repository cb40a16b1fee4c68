"""CLI interface for ai-ready."""

import json
import logging
import sys
from typing import Optional

import click
from rich import box
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import __version__
from .auditor import audit_url
from .badge import format_badge
from .config import AuditOptions
from .errors import AuditError, BlockedHostError
from .fixes import get_fix_suggestion
from .models import AuditResult, Category, Grade, RuleResult, RuleStatus


console = Console()
err_console = Console(stderr=True)

EXIT_ERROR = 1
EXIT_BELOW_THRESHOLD = 2


def setup_logging(debug: bool) -> None:
    """Route library logs through rich on stderr."""
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=debug)],
        force=True,
    )
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.DEBUG if debug else logging.WARNING)


def status_style(status: RuleStatus) -> str:
    """Get Rich style for a rule status."""
    return {
        RuleStatus.PASS: "green",
        RuleStatus.WARN: "yellow",
        RuleStatus.FAIL: "red",
        RuleStatus.SKIP: "dim",
    }.get(status, "white")


def status_icon(status: RuleStatus) -> str:
    """Get icon for a rule status."""
    return {
        RuleStatus.PASS: "✓",
        RuleStatus.WARN: "⚠",
        RuleStatus.FAIL: "✗",
        RuleStatus.SKIP: "–",
    }.get(status, "•")


def grade_color(grade: Grade) -> str:
    return {
        Grade.A: "green",
        Grade.B: "bright_green",
        Grade.C: "yellow",
        Grade.D: "orange1",
        Grade.F: "red",
    }[grade]


def score_color(pct: int) -> str:
    """Get color for a percentage."""
    if pct >= 80:
        return "green"
    elif pct >= 50:
        return "yellow"
    else:
        return "red"


def print_score_bar(score: int, grade: Grade, width: int = 20) -> Text:
    """Create a visual score bar."""
    filled = int((score / 100) * width)
    empty = width - filled
    color = grade_color(grade)

    bar = Text()
    bar.append("█" * filled, style=color)
    bar.append("░" * empty, style="dim")
    bar.append(f" {score}/100 ({grade.value})", style=f"bold {color}")
    return bar


def print_rule(rule: RuleResult) -> None:
    style = status_style(rule.status)
    console.print(
        f"  [{style}]{status_icon(rule.status)}[/] {rule.name}  [dim]{rule.score:g}/{rule.max_score:g}[/dim]"
    )
    if rule.status in (RuleStatus.WARN, RuleStatus.FAIL):
        console.print(f"    [dim]{escape(rule.message)}[/dim]")


def print_category(category: Category, verbose: bool) -> None:
    color = score_color(category.percentage)
    console.print(
        f"\n[bold]{category.name}[/bold]  [{color}]{category.score:g}/{category.max_points:g}[/]"
    )
    for rule in category.rules:
        if not verbose and rule.status == RuleStatus.PASS:
            continue
        print_rule(rule)


def print_result(
    result: AuditResult,
    verbose: bool = False,
    quiet: bool = False,
    show_recommendations: bool = True,
) -> None:
    """Print audit result to console."""
    console.print()
    console.print(Panel(
        f"[bold]{escape(result.url)}[/bold]\n"
        f"[dim]Audited in {result.duration}ms[/dim]",
        title="🔍 AI-Readiness Audit",
        border_style="blue"
    ))

    console.print()
    console.print("  AI-Ready Score: ", end="")
    console.print(print_score_bar(result.score, result.grade, width=25))

    if quiet:
        return

    # Category summary
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Category", style="cyan")
    table.add_column("Score", justify="right")
    table.add_column("Status")

    for category in result.categories:
        fails = sum(1 for r in category.rules if r.status == RuleStatus.FAIL)
        warns = sum(1 for r in category.rules if r.status == RuleStatus.WARN)
        status_parts = []
        if fails:
            status_parts.append(f"[red]{fails} failed[/red]")
        if warns:
            status_parts.append(f"[yellow]{warns} warning{'s' if warns > 1 else ''}[/yellow]")
        if not fails and not warns:
            status_parts.append("[green]OK[/green]")

        table.add_row(
            category.name,
            f"[{score_color(category.percentage)}]{category.score:g}/{category.max_points:g}[/]",
            ", ".join(status_parts),
        )

    console.print()
    console.print(table)

    for category in result.categories:
        print_category(category, verbose)

    if show_recommendations and result.recommendations:
        console.print("\n[bold]🎯 Top Recommendations:[/bold]\n")
        for i, rec in enumerate(result.quick_wins, 1):
            console.print(f"  {i}. [bold]{escape(rec.message)}[/bold] [dim](+{rec.impact:g} points)[/dim]")
            if rec.fix:
                console.print(f"     [cyan]→ {escape(rec.fix)}[/cyan]")
        console.print()

    # Footer
    console.print("[dim]" + "─" * 50 + "[/dim]")
    console.print(f"[dim]ai-ready v{__version__}[/dim]")
    console.print()


def print_badge(result: AuditResult) -> None:
    badge = format_badge(result)
    console.print("\n[bold]🏷  Badge:[/bold]\n")
    console.print(f"  [dim]Static:[/dim]   {escape(badge.static)}", soft_wrap=True)
    console.print(f"  [dim]Dynamic:[/dim]  {escape(badge.dynamic)}", soft_wrap=True)
    console.print(f"  [dim]Markdown:[/dim] {escape(badge.markdown)}", soft_wrap=True)
    console.print(f"  [dim]HTML:[/dim]     {escape(badge.html)}", soft_wrap=True)
    console.print()


def read_url(url: Optional[str]) -> str:
    """Use the argument, or the first non-empty line piped on stdin."""
    if url:
        return url
    stdin = click.get_text_stream("stdin")
    if not stdin.isatty():
        for line in stdin:
            if line.strip():
                return line.strip()
    raise click.UsageError("Missing URL. Pass it as an argument or pipe it on stdin.")


def run_audit(url: str, options: AuditOptions, show_status: bool) -> AuditResult:
    """Run the audit, exiting with EXIT_ERROR on fetch failures."""
    try:
        if show_status:
            with console.status(f"[bold blue]Auditing {escape(url)}...[/bold blue]"):
                return audit_url(url, options)
        return audit_url(url, options)
    except BlockedHostError as e:
        err_console.print(f"[red]Blocked:[/red] refusing to audit private or internal host {escape(e.hostname)}")
        sys.exit(EXIT_ERROR)
    except AuditError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(EXIT_ERROR)


def build_options(timeout: Optional[int], user_agent: Optional[str], insecure: bool) -> AuditOptions:
    try:
        return AuditOptions.from_env(timeout_ms=timeout, user_agent=user_agent, insecure=insecure or None)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e


@click.group(invoke_without_command=True)
@click.pass_context
@click.version_option(version=__version__)
def cli(ctx):
    """ai-ready - audit any website's AI-readiness.

    \b
    Quick start:
        ai-ready scan example.com
        ai-ready fixes example.com

    \b
    Commands:
        scan    Audit a URL for AI crawler and answer-engine readiness
        fixes   List fix commands for the audit's recommendations
    """
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.argument("url", required=False)
@click.option("-j", "--json", "json_output", is_flag=True, help="Output as JSON")
@click.option("--verbose", is_flag=True, help="Show all rules, including passed ones")
@click.option("-q", "--quiet", is_flag=True, help="Only show score and grade")
@click.option("--no-recommendations", "--no-recs", "no_recommendations", is_flag=True,
              help="Skip the recommendations section")
@click.option("--fail-under", type=click.IntRange(0, 100), help="Exit with code 2 if the score is below N")
@click.option("-t", "--timeout", type=click.IntRange(min=1), help="Per-request timeout in milliseconds")
@click.option("--user-agent", help="User-Agent header to send")
@click.option("--insecure", is_flag=True, help="Skip TLS certificate verification")
@click.option("--badge", is_flag=True, help="Print badge snippets for the score")
@click.option("--debug", is_flag=True, help="Show debug logging")
def scan(url: Optional[str], json_output: bool, verbose: bool, quiet: bool, no_recommendations: bool,
         fail_under: Optional[int], timeout: Optional[int], user_agent: Optional[str], insecure: bool,
         badge: bool, debug: bool):
    """Audit a URL for AI-readiness.

    \b
    Examples:
        ai-ready scan stripe.com
        ai-ready scan example.com --verbose
        ai-ready scan example.com --json --fail-under 80
        echo example.com | ai-ready scan --quiet
    """
    setup_logging(debug)
    url = read_url(url)
    options = build_options(timeout, user_agent, insecure)

    result = run_audit(url, options, show_status=not json_output)

    if json_output:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        print_result(result, verbose=verbose, quiet=quiet, show_recommendations=not no_recommendations)
        if badge:
            print_badge(result)

    if fail_under is not None and result.score < fail_under:
        if not json_output:
            err_console.print(f"[red]Score {result.score} is below --fail-under {fail_under}[/red]")
        sys.exit(EXIT_BELOW_THRESHOLD)


@cli.command()
@click.argument("url", required=False)
@click.option("-j", "--json", "json_output", is_flag=True, help="Output as JSON")
@click.option("-t", "--timeout", type=click.IntRange(min=1), help="Per-request timeout in milliseconds")
@click.option("--insecure", is_flag=True, help="Skip TLS certificate verification")
@click.option("--debug", is_flag=True, help="Show debug logging")
def fixes(url: Optional[str], json_output: bool, timeout: Optional[int], insecure: bool, debug: bool):
    """List fix commands for a URL's failing rules.

    \b
    Examples:
        ai-ready fixes example.com
        ai-ready fixes example.com --json
    """
    setup_logging(debug)
    url = read_url(url)
    options = build_options(timeout, None, insecure)

    result = run_audit(url, options, show_status=not json_output)

    items = []
    for rec in result.recommendations:
        suggestion = get_fix_suggestion(rec.rule)
        if suggestion is None:
            continue
        items.append({
            "rule": rec.rule,
            "message": rec.message,
            "impact": rec.impact,
            "command": suggestion.command,
            "automatic": suggestion.automatic,
        })

    if json_output:
        click.echo(json.dumps({"url": result.url, "score": result.score, "fixes": items}, indent=2))
        return

    console.print()
    if not items:
        console.print("[green]✓[/green] No automated fixes suggested")
        console.print()
        return

    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    table.add_column("Rule", style="cyan")
    table.add_column("Command")
    table.add_column("Mode")
    table.add_column("Impact", justify="right")
    for item in items:
        mode = "[green]automatic[/green]" if item["automatic"] else "[yellow]needs input[/yellow]"
        table.add_row(item["rule"], item["command"], mode, f"+{item['impact']:g}")
    console.print(table)

    commands = list(dict.fromkeys(i["command"] for i in items if i["automatic"]))
    if commands:
        console.print("[bold]📋 Run to regenerate missing files:[/bold]\n")
        for command in commands:
            console.print(f"  [cyan]{command}[/cyan]")
        console.print()


# Convenience: allow `ai-ready URL` as shortcut for `ai-ready scan URL`
def main():
    """Entry point that handles both `ai-ready URL` and `ai-ready scan URL`."""
    args = sys.argv[1:]

    # If first arg looks like a URL (not a command), insert 'scan'
    if args and not args[0].startswith('-') and args[0] not in ['scan', 'fixes', '--help', '--version']:
        if '.' in args[0] or '://' in args[0]:
            sys.argv.insert(1, 'scan')

    cli()


if __name__ == "__main__":
    main()
