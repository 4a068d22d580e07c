"""SimAgent command-line interface."""

from __future__ import annotations

import time
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from simagent import __version__
from simagent.config import SimAgentConfig
from simagent.constants import WorkerRole
from simagent.exceptions import SimAgentError
from simagent.launcher import WorkerLauncher
from simagent.logging import get_logger, setup_logging
from simagent.types import AgentContext
from simagent.worker_registry import WorkerRegistry

console = Console()
logger = get_logger("cli")


@click.group()
@click.version_option(version=__version__, prog_name="simagent")
def cli() -> None:
    """SimAgent - host-local worker launcher for benchmark runs.

    Starts member and client workers and waits until they are ready.
    """


@cli.command()
@click.option("--config", "-c", "config_path", type=click.Path(path_type=Path), help="YAML config file")
@click.option("--test-suite-id", help="Test suite the workers belong to")
@click.option("--public-address", help="Public address of this host")
@click.option("--agent-index", type=int, help="Index of this agent")
@click.option("--simulator-home", type=click.Path(path_type=Path), help="Installation directory")
@click.option("--members", type=int, help="Number of member workers")
@click.option("--clients", type=int, help="Number of client workers")
@click.option("--timeout", type=int, help="Worker startup timeout (seconds)")
@click.option("--log-level", type=click.Choice(["debug", "info", "warn", "error"]), help="Log level")
@click.option("--log-dir", type=click.Path(path_type=Path), help="Directory for JSON logs")
@click.option("--wait/--no-wait", default=True, help="Keep running until the workers exit")
def launch(
    config_path: Path | None,
    test_suite_id: str | None,
    public_address: str | None,
    agent_index: int | None,
    simulator_home: Path | None,
    members: int | None,
    clients: int | None,
    timeout: int | None,
    log_level: str | None,
    log_dir: Path | None,
    wait: bool,
) -> None:
    """Launch workers and wait for them to start.

    Examples:

        simagent launch --config simagent.yaml

        simagent launch --members 2 --clients 1 --timeout 120
    """
    try:
        config = SimAgentConfig.load(config_path)
        config = _apply_overrides(
            config,
            agent={
                "test_suite_id": test_suite_id,
                "public_address": public_address,
                "address_index": agent_index,
                "simulator_home": str(simulator_home) if simulator_home else None,
            },
            launch={
                "member_worker_count": members,
                "client_worker_count": clients,
                "worker_startup_timeout": timeout,
            },
            logging={
                "level": log_level,
                "directory": str(log_dir) if log_dir else None,
            },
        )

        setup_logging(
            level=config.logging.level,
            log_dir=config.logging.directory,
            json_output=config.logging.json_output,
        )

        context = AgentContext(
            public_address=config.agent.public_address,
            address_index=config.agent.address_index,
            test_suite_id=config.agent.test_suite_id,
            simulator_home=Path(config.agent.simulator_home),
        )
        registry = WorkerRegistry()
        launcher = WorkerLauncher(context, registry)

        console.print(f"\n[bold cyan]SimAgent Launch[/bold cyan] - {context.test_suite_id}\n")
        launcher.launch(config.launch)

        console.print(_workers_table(registry))
        members = len(registry.by_role(WorkerRole.MEMBER))
        clients = len(registry.by_role(WorkerRole.CLIENT))
        console.print(f"\n[green]✓[/green] Started {len(registry)} workers ({members} members, {clients} clients)")

        if wait and len(registry):
            _wait_for_exit(launcher, registry)

    except SimAgentError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1) from e


def _apply_overrides(config: SimAgentConfig, **sections: dict[str, object]) -> SimAgentConfig:
    """Return a validated copy of *config* with non-None option values applied."""
    data = config.to_dict()
    for section, values in sections.items():
        data[section].update({k: v for k, v in values.items() if v is not None})
    return SimAgentConfig.from_dict(data)


def _workers_table(registry: WorkerRegistry) -> Table:
    table = Table(title="Workers")
    table.add_column("Worker", style="cyan")
    table.add_column("Role")
    table.add_column("Port", justify="right")
    table.add_column("PID", justify="right")
    table.add_column("Address")

    for worker in registry.ready().values():
        row = worker.to_dict()
        table.add_row(
            row["id"],
            row["role"],
            str(row["port"]),
            str(row["pid"] or "-"),
            row["address"] or "-",
        )
    return table


def _wait_for_exit(launcher: WorkerLauncher, registry: WorkerRegistry) -> None:
    console.print("[dim]Press Ctrl+C to stop the workers[/dim]")
    try:
        while any(not w.handle.has_exited() for w in registry.all().values()):
            time.sleep(1)
        console.print("[yellow]All workers exited[/yellow]")
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopping workers...[/yellow]")
        launcher.terminate_all()


if __name__ == "__main__":
    cli()
