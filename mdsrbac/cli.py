"""CLI entry point for mdsrbac."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

import typer
import yaml
from rich import print as rprint
from rich.syntax import Syntax
from rich.table import Table

from mdsrbac.api.errors import AuthenticationError, MdsError, TransportError
from mdsrbac.api.gateway import API_PREFIX
from mdsrbac.client import MdsApiClient
from mdsrbac.config import MdsConfig, load_config
from mdsrbac.config.loader import DEFAULT_CONFIG_TEMPLATE
from mdsrbac.roles.builder import ClusterLevelRoleBuilder
from mdsrbac.roles.models import BindingDescriptor, RoleBindingRequest
from mdsrbac.scope.request import RequestScope

app = typer.Typer(
    name="mdsrbac",
    help="Grant, revoke and inspect RBAC role bindings on a Confluent Metadata Service.",
)

config_app = typer.Typer(help="Manage mdsrbac configuration.")
app.add_typer(config_app, name="config")

lookup_app = typer.Typer(help="Reverse lookups (empty output means unknown, not none).")
app.add_typer(lookup_app, name="lookup")

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}

_COMPONENTS = ("kafka", "connect", "schema-registry", "ksql", "control-center")

# Global state
_config: MdsConfig | None = None


def _get_config() -> MdsConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to mdsrbac.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    logging.basicConfig(
        level=_LOG_LEVELS[_config.log_level],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _client() -> MdsApiClient:
    try:
        return MdsApiClient.from_config(_get_config())
    except ValueError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


def _narrow(
    builder: ClusterLevelRoleBuilder,
    component: str,
    subject: str | None,
    connector: str | None,
    connect_cluster_id: str | None,
) -> ClusterLevelRoleBuilder:
    if subject:
        return builder.for_schema_subject(subject)
    if connector:
        return builder.for_connector(connector, connect_cluster_id)
    if component == "kafka":
        return builder.for_kafka()
    if component == "connect":
        return builder.for_connect(connect_cluster_id)
    if component == "schema-registry":
        return builder.for_schema_registry()
    if component == "ksql":
        return builder.for_ksql()
    if component == "control-center":
        return builder.for_control_center()
    raise ValueError(f"Unknown component {component!r} (valid: {', '.join(_COMPONENTS)})")


def _print_request(client: MdsApiClient, request: RoleBindingRequest) -> None:
    rprint("[yellow](dry run, nothing sent)[/yellow]")
    rprint(f"[bold]{request.method}[/bold] {API_PREFIX}{request.path}")
    rprint(f"[dim]server:[/dim] {client.gateway.server}")
    rprint(Syntax(request.body, "json"))


def _submit(client: MdsApiClient, binding: BindingDescriptor, dry_run: bool) -> None:
    request = client.resolver.request_for(binding)
    if dry_run:
        _print_request(client, request)
        return
    client.bind_request(binding)
    kind = "cluster-level" if binding.is_cluster_level else "resource"
    rprint(f"[green]Bound[/green] {binding.role} to {binding.principal} ({kind})")


@app.command()
def auth() -> None:
    """Log in and run the authenticate handshake."""
    client = _client()
    try:
        token = client.authenticate()
    except AuthenticationError as e:
        rprint(f"[red]Authentication failed:[/red] {e}")
        raise typer.Exit(1)
    rprint(f"[green]Authenticated[/green] ({token.kind} token, expires in {token.expires_in}s)")


@app.command()
def bind(
    principal: str = typer.Argument(..., help="Principal, e.g. User:alice"),
    role: str = typer.Argument(..., help="Role name, e.g. DeveloperRead"),
    resource: str = typer.Argument(..., help="Resource name"),
    resource_type: str = typer.Option("Topic", "--resource-type", "-t"),
    pattern: str = typer.Option("LITERAL", "--pattern", "-p", help="LITERAL or PREFIXED"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the request without sending"),
) -> None:
    """Grant a role on a single resource of the Kafka cluster."""
    client = _client()
    try:
        binding = client.bind(principal, role, resource, resource_type, pattern)
        _submit(client, binding, dry_run)
    except MdsError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command(name="bind-cluster")
def bind_cluster(
    principal: str = typer.Argument(..., help="Principal, e.g. User:alice"),
    role: str = typer.Argument(..., help="Role name, e.g. SystemAdmin"),
    component: str = typer.Option("kafka", "--component", help=" | ".join(_COMPONENTS)),
    subject: str | None = typer.Option(None, "--subject", help="Narrow to a schema subject"),
    connector: str | None = typer.Option(None, "--connector", help="Narrow to a connector"),
    connect_cluster_id: str | None = typer.Option(
        None, "--connect-cluster-id", help="Override the configured Connect cluster id"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the request without sending"),
) -> None:
    """Grant a cluster-level role."""
    client = _client()
    try:
        builder = _narrow(
            client.cluster_role(principal, role), component, subject, connector, connect_cluster_id
        )
        _submit(client, builder.apply(), dry_run)
    except (MdsError, ValueError) as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def unbind(
    principal: str = typer.Argument(..., help="Principal, e.g. User:alice"),
    role: str = typer.Argument(..., help="Role name"),
    component: str = typer.Option("kafka", "--component", help=" | ".join(_COMPONENTS[:4])),
    connect_cluster_id: str | None = typer.Option(None, "--connect-cluster-id"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the request without sending"),
) -> None:
    """Remove a role from a principal at a cluster scope."""
    client = _client()
    try:
        builder = _narrow(
            client.cluster_role(principal, role), component, None, None, connect_cluster_id
        )
        scope: RequestScope = builder.scope
        if dry_run:
            request = client.resolver.delete_request(principal, role, scope)
            _print_request(client, request)
            return
        client.delete_role(principal, role, scope, strict=True)
    except TransportError as e:
        rprint(f"[red]Unbind failed:[/red] {e}")
        raise typer.Exit(1)
    except (MdsError, ValueError) as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    rprint(f"[green]Removed[/green] {role} from {principal}")


def _print_names(title: str, names: list[str]) -> None:
    if not names:
        rprint(f"[yellow]No {title.lower()} found (or the lookup failed).[/yellow]")
        return
    table = Table(title=f"{title} ({len(names)})")
    table.add_column("Name", style="cyan")
    for name in names:
        table.add_row(name)
    rprint(table)


@lookup_app.command("principals")
def lookup_principals(
    role: str = typer.Argument(..., help="Role name"),
    component: str = typer.Option("kafka", "--component", help="kafka | connect | schema-registry"),
) -> None:
    """Principals holding a role."""
    try:
        names = _client().lookup_principals_by_role(role, component)  # type: ignore[arg-type]
    except (MdsError, ValueError) as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _print_names("Principals", names)


@lookup_app.command("roles")
def lookup_roles(
    principal: str = typer.Argument(..., help="Principal, e.g. User:alice"),
    component: str = typer.Option("kafka", "--component", help="kafka | connect | schema-registry"),
) -> None:
    """Roles held by a principal."""
    try:
        names = _client().lookup_roles(principal, component)  # type: ignore[arg-type]
    except (MdsError, ValueError) as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _print_names("Roles", names)


@lookup_app.command("resources")
def lookup_resources(
    principal: str = typer.Argument(..., help="Principal, e.g. User:alice"),
    role: str = typer.Argument(..., help="Role name"),
    component: str = typer.Option("kafka", "--component", help="kafka | connect | schema-registry"),
) -> None:
    """Resources a principal holds a role on."""
    try:
        resources = _client().lookup_resources(principal, role, component)  # type: ignore[arg-type]
    except (MdsError, ValueError) as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    if not resources:
        rprint("[yellow]No resources found (or the lookup failed).[/yellow]")
        return
    table = Table(title=f"Resources ({len(resources)})")
    table.add_column("Type", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Pattern")
    for r in resources:
        table.add_row(r.resource_type, r.name, r.pattern_type)
    rprint(table)


@app.command()
def roles() -> None:
    """List every role name the service knows."""
    try:
        names = _client().role_names()
    except MdsError as e:
        rprint(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    _print_names("Role names", names)


@config_app.command("show")
def config_show() -> None:
    """Print the effective configuration."""
    cfg = _get_config()
    text = yaml.safe_dump(cfg.model_dump(), sort_keys=False)
    rprint(Syntax(text, "yaml"))


@config_app.command("init")
def config_init(
    path: str = typer.Option("mdsrbac.yaml", "--path", help="Where to write the template"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a starter mdsrbac.yaml."""
    target = Path(path)
    if target.exists() and not force:
        rprint(f"[yellow]{target} already exists (use --force to overwrite)[/yellow]")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Wrote[/green] {target}")


if __name__ == "__main__":
    app()
