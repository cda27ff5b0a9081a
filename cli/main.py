"""
VW-AUDIT Command-Line Interface

Provides CLI commands for exercising the message protocol, browsing the
trust boundaries and findings, running audit scenarios and writing reports.
"""

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from vwaudit import __version__
from vwaudit.boundaries import list_boundaries
from vwaudit.core import AuditEngine
from vwaudit.diagnostics import find_exposed_secrets, inspect_serialized_state
from vwaudit.errors import EnvelopeValidationError, ReportWriteError, UnknownScenarioError
from vwaudit.findings import DEFAULT_LEDGER, Severity
from vwaudit.protocol import MessageFlowSimulator, VWRequest, decode_request, encode_response, new_message_id
from vwaudit.reporting import REPORT_FORMATS, ReportGenerator
from vwaudit.scenarios import ScenarioRegistry, ScenarioStatus
from vwaudit.utils.config import get_config
from vwaudit.utils.logger import get_logger, set_level, setup_file_logging

logger = get_logger(__name__)
console = Console()
app = typer.Typer(
    name="vwaudit",
    help="VW-AUDIT - Verified Wallet extension security audit harness",
    add_completion=False
)

STATUS_STYLES = {
    ScenarioStatus.VULNERABLE: "bold red",
    ScenarioStatus.NOT_VULNERABLE: "green",
    ScenarioStatus.INCONCLUSIVE: "yellow",
    ScenarioStatus.ERROR: "magenta",
}


def print_banner():
    """Print VW-AUDIT banner"""
    console.print(Panel(
        f"[bold]VW-AUDIT[/] v{__version__}\n"
        "Verified Wallet extension message-flow audit\n"
        "[dim]Simulation only. No browser, network or SDK is touched.[/]",
        border_style="cyan"
    ))


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")
):
    """VW-AUDIT command-line interface"""
    if verbose:
        set_level("DEBUG")
    config = get_config()
    if config.log_file:
        setup_file_logging(config.log_file)


def _make_simulator(extension: bool, allowed_origins: Optional[List[str]]) -> MessageFlowSimulator:
    return MessageFlowSimulator(
        allowed_origins=allowed_origins or None,
        include_extension_methods=extension
    )


def _print_json(data) -> None:
    typer.echo(json.dumps(data, indent=2))


# ========== Protocol ==========

@app.command()
def dispatch(
    method: str = typer.Argument(..., help="Method name, e.g. eth_requestAccounts"),
    request_id: Optional[str] = typer.Option(None, "--id", help="Correlation id (random if omitted)"),
    args: Optional[List[str]] = typer.Option(None, "--arg", "-a", help="JSON-encoded argument (repeatable)"),
    origin: Optional[str] = typer.Option(None, "--origin", help="Deliver from this page origin through the full path"),
    extension: bool = typer.Option(False, "--extension", "-x", help="Register requestPk, signRecovery, ..."),
    allow: Optional[List[str]] = typer.Option(None, "--allow", help="Allowed origin (repeatable)")
):
    """
    Send one request to the simulated background and print the response.
    
    Example:
        vwaudit dispatch eth_requestAccounts --id t1
        vwaudit dispatch requestPk -x --origin https://malicious-site.com
    """
    try:
        parsed_args = [json.loads(arg) for arg in args or []]
    except json.JSONDecodeError as e:
        console.print(f"[red]Invalid --arg JSON: {e}[/]")
        raise typer.Exit(code=2)
    
    simulator = _make_simulator(extension, allow)
    request = VWRequest(id=request_id or new_message_id(), method=method, args=parsed_args)
    
    if origin:
        trace = asyncio.run(simulator.deliver(request, origin))
        logger.debug(f"Stages crossed: {' -> '.join(trace.stages)}")
        response = trace.response
    else:
        response = asyncio.run(simulator.handle_message(request))
    
    _print_json(encode_response(response))


@app.command()
def send(
    payload: Optional[str] = typer.Argument(None, help="VW_REQ wire message as JSON"),
    file: Optional[Path] = typer.Option(None, "--file", "-f", help="Read the wire message from a file"),
    extension: bool = typer.Option(False, "--extension", "-x", help="Register requestPk, signRecovery, ...")
):
    """
    Decode a wire message, dispatch it and print the wire response.
    
    Example:
        vwaudit send '{"type": "VW_REQ", "id": "t1", "params": {"method": "eth_requestAccounts"}}'
    """
    if file is not None:
        payload = file.read_text(encoding="utf-8")
    if payload is None:
        console.print("[red]Provide a payload or --file[/]")
        raise typer.Exit(code=2)
    
    try:
        request = decode_request(json.loads(payload))
    except json.JSONDecodeError as e:
        console.print(f"[red]Payload is not JSON: {e}[/]")
        raise typer.Exit(code=2)
    except EnvelopeValidationError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(code=2)
    
    response = asyncio.run(_make_simulator(extension, None).handle_message(request))
    _print_json(encode_response(response))


# ========== Catalogs ==========

@app.command()
def boundaries(
    markdown: bool = typer.Option(False, "--markdown", "-m", help="Print as Markdown")
):
    """
    List the five trust boundaries of the message path.
    """
    if markdown:
        typer.echo(ReportGenerator().render_boundaries(), nl=False)
        return
    
    table = Table(title="Trust Boundaries")
    table.add_column("Stage", style="cyan")
    table.add_column("Boundary")
    table.add_column("Risk")
    table.add_column("Required Validation")
    
    for boundary in list_boundaries():
        table.add_row(
            str(boundary.stage),
            boundary.name,
            f"[{Severity[boundary.risk.name].color}]{boundary.risk.value}[/]",
            boundary.required_validation
        )
    
    console.print(table)


@app.command()
def findings(
    finding_id: Optional[str] = typer.Argument(None, help="Show one finding in detail"),
    severity: Optional[str] = typer.Option(None, "--severity", "-s", help="Filter by severity")
):
    """
    List the vulnerability ledger.
    
    Example:
        vwaudit findings
        vwaudit findings VW-001
        vwaudit findings -s critical
    """
    if finding_id:
        finding = DEFAULT_LEDGER.get(finding_id.upper())
        if not finding:
            console.print(f"[red]Finding {finding_id} not found[/]")
            raise typer.Exit(code=1)
        display_finding(finding)
        return
    
    items = list(DEFAULT_LEDGER)
    if severity:
        try:
            wanted = Severity[severity.upper()]
        except KeyError:
            console.print(f"[red]Unknown severity: {severity}[/]")
            raise typer.Exit(code=2)
        items = DEFAULT_LEDGER.by_severity(wanted)
    
    table = Table(title="Vulnerability Ledger")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Severity")
    table.add_column("CVSS")
    
    for finding in items:
        table.add_row(
            finding.id,
            finding.title,
            f"[{finding.severity.color}]{finding.severity.value}[/]",
            f"{finding.cvss_score:.1f}"
        )
    
    console.print(table)


@app.command()
def report(
    format: str = typer.Option("markdown", "--format", "-f", help="Report format (markdown/json)"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="Output path, '-' for stdout")
):
    """
    Render the vulnerability report.
    
    Example:
        vwaudit report
        vwaudit report -f json -o ./report.json
        vwaudit report -o -
    """
    if format not in REPORT_FORMATS:
        console.print(f"[red]Unsupported format: {format}[/] (expected {', '.join(REPORT_FORMATS)})")
        raise typer.Exit(code=2)
    
    generator = ReportGenerator()
    try:
        if output == "-":
            generator.write(DEFAULT_LEDGER, sys.stdout, fmt=format)
            return
        report_path = generator.generate(DEFAULT_LEDGER, fmt=format, output=Path(output) if output else None)
    except ReportWriteError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(code=1)
    
    console.print(f"[green]Report saved to: {report_path}[/]")


# ========== Scenarios ==========

@app.command()
def scenarios():
    """
    List all available audit scenarios.
    """
    registry = ScenarioRegistry()
    
    by_category = {}
    for meta in registry.get_all_metadata():
        by_category.setdefault(meta["category"], []).append(meta)
    
    for category, items in by_category.items():
        console.print(f"\n[bold cyan]{category}[/]")
        
        table = Table(show_header=True)
        table.add_column("ID")
        table.add_column("Name")
        table.add_column("Severity")
        table.add_column("Finding")
        
        for meta in items:
            color = Severity(meta["severity"]).color
            table.add_row(
                meta["id"],
                meta["name"],
                f"[{color}]{meta['severity']}[/]",
                meta.get("finding_id") or "N/A"
            )
        
        console.print(table)


@app.command()
def run(
    scenario: Optional[List[str]] = typer.Option(None, "--scenario", "-s", help="Scenario id (repeatable, default all)"),
    source: Optional[Path] = typer.Option(None, "--source", help="Client-side source file to scan for secrets"),
    origin: Optional[str] = typer.Option(None, "--origin", help="Hostile page origin"),
    allow: Optional[List[str]] = typer.Option(None, "--allow", help="Allowed origin (repeatable)"),
    write_report: bool = typer.Option(False, "--report", "-r", help="Write a report for confirmed findings"),
    format: str = typer.Option("markdown", "--format", "-f", help="Report format (markdown/json)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Report path")
):
    """
    Run audit scenarios against the simulated extension.
    
    Example:
        vwaudit run
        vwaudit run -s private_key_request -s storage_exposure
        vwaudit run --source ./constants.ts --report
    """
    print_banner()
    
    context = {}
    if source:
        context["source_path"] = str(source)
    if origin:
        context["hostile_origin"] = origin
    
    engine = AuditEngine(simulator=MessageFlowSimulator(
        allowed_origins=allow or None,
        include_extension_methods=True
    ))
    
    try:
        summary = asyncio.run(engine.run(scenario or None, context))
    except UnknownScenarioError as e:
        console.print(f"[red]{e}[/]")
        raise typer.Exit(code=2)
    
    display_results(summary.results)
    
    counts = summary.status_counts
    console.print(
        f"\n[bold]{counts['vulnerable']} vulnerable[/], {counts['not_vulnerable']} not vulnerable, "
        f"{counts['inconclusive']} inconclusive, {counts['error']} errors"
    )
    if summary.confirmed_finding_ids:
        console.print(f"[bold red]Confirmed findings:[/] {', '.join(summary.confirmed_finding_ids)}")
    if summary.debug_flags.found:
        console.print(f"[yellow]Debug flags set:[/] {', '.join(summary.debug_flags.found)}")
    
    if write_report:
        try:
            report_path = engine.generate_report(fmt=format, output=output, confirmed_only=True)
        except (ReportWriteError, ValueError) as e:
            console.print(f"[red]{e}[/]")
            raise typer.Exit(code=1)
        console.print(f"[green]Report saved to: {report_path}[/]")


@app.command()
def inspect(
    path: Path = typer.Argument(..., help="Serialized state or client-side source file")
):
    """
    Inspect a file for key material and embedded credentials.
    
    Example:
        vwaudit inspect ./vault.json
    """
    try:
        text = path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        console.print(f"[red]Cannot read {path}: {e}[/]")
        raise typer.Exit(code=1)
    
    state = inspect_serialized_state(text, label=path.name)
    console.print(Panel(
        f"[dim]Length:[/] {state.length}\n"
        f"[dim]JSON:[/] {state.is_json}\n"
        f"[dim]Base64:[/] {state.looks_base64}\n"
        f"[dim]Keys:[/] {', '.join(state.keys) or 'none'}\n"
        f"[dim]Sensitive keys:[/] {', '.join(state.sensitive_keys) or 'none'}",
        title=f"[cyan]{path.name}[/]",
        border_style="red" if state.is_critical else "cyan"
    ))
    
    secrets = find_exposed_secrets(text)
    if not secrets:
        console.print("[green]No embedded credentials found[/]")
        return
    
    table = Table(title="Embedded Credentials")
    table.add_column("Line", style="cyan")
    table.add_column("Kind")
    table.add_column("Preview")
    for match in secrets:
        table.add_row(str(match.line), match.kind, match.preview)
    console.print(table)


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port")
):
    """
    Start the HTTP API.
    """
    import uvicorn
    
    config = get_config()
    uvicorn.run("api.main:app", host=host or config.api_host, port=port or config.api_port)


# Helper functions

def display_finding(finding):
    """Display one ledger finding"""
    color = finding.severity.color
    steps = "\n".join(f"  {i}. {step}" for i, step in enumerate(finding.remediation_steps, 1))
    locations = "\n".join(f"  - {loc}" for loc in finding.affected_locations)
    
    panel = Panel(
        f"[bold]{finding.title}[/]\n\n"
        f"[dim]CVSS:[/] {finding.cvss_score:.1f}\n"
        f"[dim]Impact:[/] {finding.impact}\n\n"
        f"[dim]Description:[/] {finding.description}\n\n"
        f"[dim]Proof of concept:[/] {finding.proof_of_concept}\n\n"
        f"[dim]Remediation:[/]\n{steps}\n\n"
        f"[dim]Affected:[/]\n{locations}",
        title=f"[{color}]{finding.id} - {finding.severity.value}[/]",
        border_style=color
    )
    console.print(panel)


def display_results(results: list):
    """Display scenario results"""
    console.print("\n[bold cyan]=== Scenario Results ===[/]\n")
    
    table = Table()
    table.add_column("Scenario", style="cyan")
    table.add_column("Status")
    table.add_column("Finding")
    table.add_column("Time")
    
    for result in results:
        style = STATUS_STYLES[result.status]
        table.add_row(
            result.scenario_id,
            f"[{style}]{result.status.value.upper()}[/]",
            result.finding_id or "N/A",
            f"{result.execution_time * 1000:.1f}ms"
        )
    
    console.print(table)
    
    for result in results:
        if not result.is_vulnerable:
            continue
        evidence = "\n".join(f"  - {line}" for line in result.evidence[:5])
        console.print(Panel(
            f"[bold]{result.title or result.scenario_name}[/]\n\n"
            f"[dim]Description:[/] {result.description}\n\n"
            f"[dim]Evidence:[/]\n{evidence or '  N/A'}\n\n"
            f"[dim]Remediation:[/] {result.remediation or 'N/A'}",
            title=f"[{result.severity.color}]{result.scenario_name} - {result.severity.value}[/]",
            border_style=result.severity.color
        ))


if __name__ == "__main__":
    app()
