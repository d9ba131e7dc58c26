"""Main CLI entry point for the glasswallet-route command."""

import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..core.config import RoutingConfigManager, build_router, WORKING_HOURS_MODES
from ..routing.errors import RoutingError, AgentSourceError
from ..routing.models import AgentStatus, RoutingContext, UrgencyLevel
from ..routing.router import IntelligentRouter
from ..routing.sources import JsonAgentSource, MockAgentSource, save_roster
from ..routing.strategy import generate_action_items

console = Console()

URGENCY_COLORS = {"urgent": "red", "high": "yellow", "medium": "blue", "low": "dim"}
STATUS_COLORS = {"available": "green", "busy": "yellow", "offline": "dim", "break": "blue"}


def get_manager(config_path: Optional[str] = None) -> RoutingConfigManager:
    """Get config manager instance."""
    return RoutingConfigManager(Path(config_path) if config_path else None)


def get_router(
    config_path: Optional[str] = None,
    roster: Optional[str] = None,
    ignore_hours: bool = False
) -> IntelligentRouter:
    """Build a router from config, optionally overriding roster and hours."""
    config = get_manager(config_path).config
    if roster:
        config = replace(config, agent_source="json", roster_path=roster)
    if ignore_hours:
        config = replace(config, working_hours_mode="always")
    return build_router(config)


@click.group()
@click.version_option(version="1.0.0", prog_name="glasswallet-route")
def cli():
    """GlassWallet lead routing - match leads to the right agent.

    \b
    Quick Start:
      glasswallet-route init-roster agents.json          # Write demo roster
      glasswallet-route agents -r agents.json            # List agents
      glasswallet-route route -l lead-1 --credit-score 780 --income 120000
      glasswallet-route status agent-2 offline -r agents.json
    """
    pass


@cli.command("init-roster")
@click.argument("path", type=click.Path())
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_roster(path: str, force: bool):
    """Write the demo agent roster to a JSON file."""
    roster_path = Path(path)
    if roster_path.exists() and not force:
        console.print(f"[yellow]{roster_path} already exists (use --force to overwrite)[/yellow]")
        return

    agents = MockAgentSource().load_agents()
    save_roster(roster_path, agents)
    console.print(f"[green]✓ Wrote {len(agents)} agents to {roster_path}[/green]")


@cli.command()
@click.option("--status", "-s", type=click.Choice([s.value for s in AgentStatus]), help="Filter by status")
@click.option("--roster", "-r", type=click.Path(), help="Agent roster JSON file")
@click.option("--config", "config_path", help="Custom routing config path")
def agents(status: Optional[str], roster: Optional[str], config_path: Optional[str]):
    """List agents with workload and skills."""
    try:
        router = get_router(config_path, roster)
    except AgentSourceError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    agent_list = router.get_all_agents()
    if status:
        agent_list = [a for a in agent_list if a.status.value == status]

    if not agent_list:
        console.print("[yellow]No agents found matching criteria.[/yellow]")
        return

    table = Table(title=f"Agents ({len(agent_list)})" + (f" - {status}" if status else ""))
    table.add_column("ID", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Load", justify="right")
    table.add_column("Conv.", justify="right")
    table.add_column("Resp.", justify="right")
    table.add_column("Skills", max_width=40)

    for agent in agent_list:
        skills = [name for name, enabled in vars(agent.skills).items() if enabled]
        color = STATUS_COLORS.get(agent.status.value, "")
        table.add_row(
            agent.id,
            agent.name,
            f"[{color}]{agent.status.value}[/{color}]",
            f"{agent.performance.active_leads}/{agent.performance.max_leads}",
            f"{agent.performance.conversion_rate:.0%}",
            f"{agent.performance.avg_response_time:g}m",
            ", ".join(skills),
        )

    console.print(table)

    stats = router.get_agent_statistics(status=status)
    console.print(
        f"[dim]Capacity {stats['current_load']}/{stats['total_capacity']} "
        f"(average workload {stats['average_workload']}%)[/dim]"
    )


@cli.command()
@click.option("--lead-id", "-l", required=True, help="Lead identifier")
@click.option("--credit-score", type=int, help="Lead credit score")
@click.option("--income", type=float, help="Lead annual income")
@click.option("--device", type=click.Choice(["mobile", "desktop", "tablet"]), help="Lead device type")
@click.option("--previous-applications", type=int, default=0, help="Number of earlier applications")
@click.option("--conversion-probability", type=float, help="AI conversion probability (0-1)")
@click.option("--priority", "-p", type=click.Choice([u.value for u in UrgencyLevel]), help="Explicit priority")
@click.option("--tag", "-t", "tags", multiple=True, help="Lead tag (repeatable)")
@click.option("--anomaly", is_flag=True, help="Lead was flagged by anomaly detection")
@click.option("--contact-method", type=click.Choice(["phone", "email", "sms", "video_call"]),
              help="Preferred contact method")
@click.option("--roster", "-r", type=click.Path(), help="Agent roster JSON file")
@click.option("--ignore-hours", is_flag=True, help="Skip the working-hours check")
@click.option("--json", "as_json", is_flag=True, help="Print the decision as JSON")
@click.option("--config", "config_path", help="Custom routing config path")
def route(
    lead_id: str,
    credit_score: Optional[int],
    income: Optional[float],
    device: Optional[str],
    previous_applications: int,
    conversion_probability: Optional[float],
    priority: Optional[str],
    tags: Tuple[str, ...],
    anomaly: bool,
    contact_method: Optional[str],
    roster: Optional[str],
    ignore_hours: bool,
    as_json: bool,
    config_path: Optional[str],
):
    """Route a lead and show the recommended agent."""
    features = {"previousApplications": previous_applications}
    if credit_score is not None:
        features["creditScore"] = credit_score
    if income is not None:
        features["income"] = income
    if device:
        features["deviceType"] = device

    context = RoutingContext(
        lead_id=lead_id,
        features=features,
        ai_score={"conversionProbability": conversion_probability} if conversion_probability is not None else None,
        tags=list(tags) or None,
        anomaly_detection={"flagged": True, "explanation": "flagged via CLI"} if anomaly else None,
        priority=UrgencyLevel(priority) if priority else None,
        preferred_contact_method=contact_method,
    )

    try:
        router = get_router(config_path, roster, ignore_hours)
        decision = router.route_lead(context)
    except (RoutingError, AgentSourceError) as e:
        console.print(f"[red]Failed to route lead {lead_id}:[/red] {e}")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps({
            "leadId": lead_id,
            "recommendedAgent": decision.recommended_agent.id,
            "confidence": decision.confidence,
            "reasoning": decision.reasoning,
            "urgencyLevel": decision.urgency_level.value,
            "estimatedResponseTime": decision.estimated_response_time,
            "primaryChannel": decision.follow_up_strategy.primary_channel,
            "alternatives": [alt.agent.id for alt in decision.alternative_options],
        }, indent=2))
        return

    urgency = decision.urgency_level.value
    color = URGENCY_COLORS[urgency]
    reasoning = "\n".join(f"  • {point}" for point in decision.reasoning)
    console.print(Panel.fit(
        f"[bold cyan]{decision.recommended_agent.name}[/bold cyan] ({decision.recommended_agent.id})\n"
        f"Confidence: [bold]{decision.confidence:.0%}[/bold]\n"
        f"Urgency: [{color}]{urgency}[/{color}]\n"
        f"Expected response: {decision.estimated_response_time} min via "
        f"{decision.follow_up_strategy.primary_channel} ({decision.follow_up_strategy.timing})\n\n"
        f"[bold]Reasoning:[/bold]\n{reasoning}",
        title=f"Routing for lead {lead_id}"
    ))

    if decision.alternative_options:
        table = Table(title="Alternatives")
        table.add_column("Agent", style="cyan")
        table.add_column("Confidence", justify="right")
        table.add_column("Reasoning", max_width=60)
        for alt in decision.alternative_options:
            table.add_row(alt.agent.name, f"{alt.confidence:.0%}", alt.reasoning)
        console.print(table)

    console.print("[bold]Next steps:[/bold]")
    for item in generate_action_items(decision, context):
        console.print(f"  [{URGENCY_COLORS[item.priority.value]}]{item.priority.value}[/] {item.action} "
                      f"[dim]({item.deadline})[/dim]")


@cli.command()
@click.argument("agent_id")
@click.argument("new_status", type=click.Choice([s.value for s in AgentStatus]))
@click.option("--roster", "-r", type=click.Path(exists=True), required=True, help="Agent roster JSON file")
def status(agent_id: str, new_status: str, roster: str):
    """Change an agent's availability in a roster file."""
    source = JsonAgentSource(Path(roster))
    try:
        router = build_router(source=source)
    except AgentSourceError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if not router.update_agent_availability(agent_id, new_status):
        console.print(f"[red]Agent {agent_id} not found[/red]")
        sys.exit(1)

    save_roster(Path(roster), router.get_all_agents())
    console.print(f"[green]✓ {agent_id} is now {new_status}[/green]")


@cli.group()
def config():
    """View and change routing configuration."""
    pass


@config.command("show")
@click.option("--config", "config_path", help="Custom routing config path")
def config_show(config_path: Optional[str]):
    """Show current routing configuration."""
    manager = get_manager(config_path)
    cfg = manager.config
    console.print(Panel.fit(
        f"Working hours: [cyan]{cfg.working_hours_mode}[/cyan] "
        f"({cfg.working_hours_start}:00-{cfg.working_hours_end}:59)\n"
        f"Alternatives: {cfg.max_alternatives}\n"
        f"Agent source: [cyan]{cfg.agent_source}[/cyan]"
        + (f" ({cfg.roster_path})" if cfg.roster_path else "")
        + f"\n\n[dim]{manager.config_path}[/dim]",
        title="Routing Config"
    ))


@config.command("hours")
@click.argument("mode", type=click.Choice(list(WORKING_HOURS_MODES)))
@click.option("--start", type=int, help="First working hour (fixed mode)")
@click.option("--end", type=int, help="Last working hour, inclusive (fixed mode)")
@click.option("--config", "config_path", help="Custom routing config path")
def config_hours(mode: str, start: Optional[int], end: Optional[int], config_path: Optional[str]):
    """Set how working hours are checked."""
    manager = get_manager(config_path)
    try:
        manager.update_working_hours(mode, start, end)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    console.print(f"[green]✓ Working hours mode set to {mode}[/green]")


@config.command("source")
@click.argument("source", type=click.Choice(["mock", "json"]))
@click.option("--roster", "-r", type=click.Path(), help="Agent roster JSON file (json source)")
@click.option("--config", "config_path", help="Custom routing config path")
def config_source(source: str, roster: Optional[str], config_path: Optional[str]):
    """Set where agents are loaded from."""
    manager = get_manager(config_path)
    try:
        manager.set_agent_source(source, roster)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)
    console.print(f"[green]✓ Agent source set to {source}[/green]")


def main():
    cli()


if __name__ == "__main__":
    main()
