"""Command line front end for the Ambari client."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ambari_client.client import ClusterStateClient
from ambari_client.exceptions import (
    AmbariClientError,
    ConfigurationError,
    NotFoundError,
    ProvisioningError,
    RemoteError,
    TransportError,
)
from ambari_client.logging_config import get_logger, setup_logging
from ambari_client.models.config import ClientConfig, ServiceComponentsTable
from ambari_client.models.request import RequestReceipt
from ambari_client.models.resource import Result

app = typer.Typer(
    name="ambari-client",
    help="Enumerate and drive the lifecycle of Ambari-managed clusters",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)

DEFAULT_COMPONENTS_FILE = Path("components.yml")


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: str | None = typer.Option(None, "--log-file", help="Path to log file"),
    config_path: str | None = typer.Option(
        None, "--config", "-c", envvar="AMBARI_CONFIG", help="YAML file with connection settings"
    ),
    host: str | None = typer.Option(None, "--host", envvar="AMBARI_HOST", help="Ambari server"),
    port: int | None = typer.Option(None, "--port", envvar="AMBARI_PORT", help="Ambari port"),
    user: str | None = typer.Option(None, "--user", "-u", envvar="AMBARI_USER", help="User"),
    password: str | None = typer.Option(
        None, "--password", envvar="AMBARI_PASSWORD", help="Password"
    ),
    timeout: float | None = typer.Option(
        None, "--timeout", envvar="AMBARI_TIMEOUT", help="Per-request timeout in seconds"
    ),
):
    """Global options for all commands."""
    log_path = Path(log_file) if log_file else None
    setup_logging(verbose=verbose, log_file=log_path)
    logger.debug("Logging initialized")

    overrides = {"host": host, "port": port, "user": user, "password": password, "timeout": timeout}
    ctx.obj = {
        "config_path": config_path,
        "overrides": {k: v for k, v in overrides.items() if v is not None},
    }


def _fail(label: str, error: AmbariClientError) -> None:
    console.print(f"[red]{label}:[/red] {error.message}")
    if error.details:
        console.print(f"\n{error.details}")
    raise typer.Exit(code=1)


def _load_config(ctx: typer.Context) -> ClientConfig:
    options = ctx.obj or {}
    overrides = options.get("overrides", {})
    try:
        if options.get("config_path"):
            base = ClientConfig.load(options["config_path"]).model_dump()
            return ClientConfig(**{**base, **overrides})
        if "host" not in overrides:
            raise ConfigurationError(
                "No Ambari server given",
                "Pass --host (or set AMBARI_HOST), or point --config at a settings file",
            )
        return ClientConfig(**overrides)
    except ConfigurationError as e:
        _fail("Configuration Error", e)
    except ValueError as e:
        _fail("Configuration Error", ConfigurationError("Invalid connection settings", str(e)))


def _client(
    ctx: typer.Context, components: ServiceComponentsTable | None = None
) -> ClusterStateClient:
    config = _load_config(ctx)
    logger.debug(f"Connecting to {config.base_url} as {config.user}")
    return ClusterStateClient(config, components=components)


def _load_components(path: Path) -> ServiceComponentsTable | None:
    """Load the service components table, or None when the file is absent.

    A missing file only matters once a service actually has to be created,
    so the decision is left to the client.
    """
    if not path.exists():
        logger.debug(f"No service components file at {path}")
        return None
    try:
        return ServiceComponentsTable.load(path)
    except ConfigurationError as e:
        _fail("Configuration Error", e)


def _unwrap(result: Result, action: str):
    """Return the value of a successful result or report the error and exit."""
    if result.ok:
        return result.value

    error = result.error
    logger.error(f"{action} failed: {error.message}")
    if isinstance(error, NotFoundError):
        label = "Not Found"
    elif isinstance(error, ProvisioningError):
        label = "Provisioning Error"
    elif isinstance(error, RemoteError):
        label = "Ambari Error"
    elif isinstance(error, TransportError):
        label = "Connection Error"
    elif isinstance(error, ConfigurationError):
        label = "Configuration Error"
    else:
        label = "Error"
    _fail(label, error)


def _print_names(title: str, column: str, names: list[str]) -> None:
    if not names:
        console.print(f"[yellow]No {column.lower()}s found[/yellow]")
        return
    table = Table(title=title)
    table.add_column(column, style="cyan")
    for name in names:
        table.add_row(name)
    console.print(table)
    console.print(f"\n[bold]Total:[/bold] {len(names)}")


def _print_receipt(message: str, receipt: RequestReceipt) -> None:
    console.print(f"[green]✓[/green] {message}")
    if receipt.accepted:
        console.print(f"  Request: {receipt.request_id} ({receipt.status or 'Accepted'})")
        if receipt.href:
            console.print(f"  Track at: {receipt.href}")


@app.command()
def version() -> None:
    """Show version information."""
    from ambari_client import __version__

    typer.echo(f"ambari-client version {__version__}")


@app.command()
def clusters(ctx: typer.Context) -> None:
    """List the clusters managed by the Ambari server."""
    with _client(ctx) as client:
        names = _unwrap(client.clusters(), "Listing clusters")
    _print_names("Clusters", "Cluster", names)


@app.command()
def hosts(ctx: typer.Context, cluster: str = typer.Argument(..., help="Cluster name")) -> None:
    """List the hosts of a cluster."""
    with _client(ctx) as client:
        names = _unwrap(client.hosts(cluster), "Listing hosts")
    _print_names(f"Hosts in {cluster}", "Host", names)


@app.command()
def services(
    ctx: typer.Context,
    cluster: str = typer.Argument(..., help="Cluster name"),
    show_state: bool = typer.Option(False, "--state", "-s", help="Also show each service state"),
) -> None:
    """List the services of a cluster."""
    with _client(ctx) as client:
        names = _unwrap(client.services(cluster), "Listing services")
        if not show_state or not names:
            _print_names(f"Services in {cluster}", "Service", names)
            return

        table = Table(title=f"Services in {cluster}")
        table.add_column("Service", style="cyan")
        table.add_column("State", style="green")
        for name in names:
            state = _unwrap(client.service_state(cluster, name), f"Reading state of {name}")
            table.add_row(name, state.value)
    console.print(table)


@app.command()
def components(
    ctx: typer.Context,
    cluster: str = typer.Argument(..., help="Cluster name"),
    service: str = typer.Argument(..., help="Service name"),
) -> None:
    """List the components of a service."""
    with _client(ctx) as client:
        names = _unwrap(client.service_components(cluster, service), "Listing components")
    _print_names(f"Components of {service}", "Component", names)


@app.command()
def host_components(
    ctx: typer.Context,
    cluster: str = typer.Argument(..., help="Cluster name"),
    host: str = typer.Argument(..., help="Host name"),
) -> None:
    """List the components placed on a host."""
    with _client(ctx) as client:
        names = _unwrap(client.host_components(cluster, host), "Listing host components")
    _print_names(f"Components on {host}", "Component", names)


@app.command()
def start_service(
    ctx: typer.Context,
    cluster: str = typer.Argument(..., help="Cluster name"),
    service: str = typer.Argument(..., help="Service name"),
) -> None:
    """Start a service."""
    with _client(ctx) as client:
        receipt = _unwrap(client.start_service(cluster, service), f"Starting {service}")
    _print_receipt(f"Start of service '{service}' requested", receipt)


@app.command()
def stop_service(
    ctx: typer.Context,
    cluster: str = typer.Argument(..., help="Cluster name"),
    service: str = typer.Argument(..., help="Service name"),
) -> None:
    """Stop a service (returns it to INSTALLED)."""
    with _client(ctx) as client:
        receipt = _unwrap(client.stop_service(cluster, service), f"Stopping {service}")
    _print_receipt(f"Stop of service '{service}' requested", receipt)


@app.command()
def start_component(
    ctx: typer.Context,
    cluster: str = typer.Argument(..., help="Cluster name"),
    host: str = typer.Argument(..., help="Host name"),
    component: str = typer.Argument(..., help="Component name"),
) -> None:
    """Start a component on a host."""
    with _client(ctx) as client:
        receipt = _unwrap(
            client.start_component(cluster, host, component), f"Starting {component}"
        )
    _print_receipt(f"Start of '{component}' on {host} requested", receipt)


@app.command()
def stop_component(
    ctx: typer.Context,
    cluster: str = typer.Argument(..., help="Cluster name"),
    host: str = typer.Argument(..., help="Host name"),
    component: str = typer.Argument(..., help="Component name"),
) -> None:
    """Stop a component on a host (returns it to INSTALLED)."""
    with _client(ctx) as client:
        receipt = _unwrap(
            client.stop_component(cluster, host, component), f"Stopping {component}"
        )
    _print_receipt(f"Stop of '{component}' on {host} requested", receipt)


@app.command()
def add_service(
    ctx: typer.Context,
    cluster: str = typer.Argument(..., help="Cluster name"),
    service: str = typer.Argument(..., help="Service name"),
    components_file: Path = typer.Option(
        DEFAULT_COMPONENTS_FILE,
        "--components",
        "-f",
        help="YAML file mapping each service to the components it needs",
    ),
) -> None:
    """
    Add a service and its components to a cluster.

    The components to create are read from the service components file, which
    is only required when the service does not exist yet. The steps are not
    atomic: if a component cannot be created, the service and the components
    created before it are left in place.
    """
    components = _load_components(components_file)
    with _client(ctx, components) as client:
        result = client.add_service(cluster, service)
        if components is None and isinstance(result.error, ConfigurationError):
            _fail(
                "Configuration Error",
                ConfigurationError(
                    f"Service components file not found: {components_file}",
                    "Pass the table with --components",
                ),
            )
        if not result.ok and isinstance(result.error, ProvisioningError):
            created = result.error.created_components
            console.print(
                f"[yellow]Left in place:[/yellow] service '{service}'"
                + (f" and components {', '.join(created)}" if created else "")
            )
        outcome = _unwrap(result, f"Adding {service}")

    if outcome.already_present:
        console.print(f"[yellow]Service '{service}' is already installed in {cluster}[/yellow]")
        return
    console.print(f"[green]✓[/green] Added service '{service}' to {cluster}")
    for component in outcome.created_components:
        console.print(f"  - {component}")


@app.command()
def remove_service(
    ctx: typer.Context,
    cluster: str = typer.Argument(..., help="Cluster name"),
    service: str = typer.Argument(..., help="Service name"),
) -> None:
    """Remove a service from a cluster. Stop it first."""
    with _client(ctx) as client:
        _unwrap(client.remove_service(cluster, service), f"Removing {service}")
    console.print(f"[green]✓[/green] Removed service '{service}' from {cluster}")


@app.command()
def add_component(
    ctx: typer.Context,
    cluster: str = typer.Argument(..., help="Cluster name"),
    host: str = typer.Argument(..., help="Host name"),
    component: str = typer.Argument(..., help="Component name"),
) -> None:
    """Place a component on a host and install it."""
    with _client(ctx) as client:
        receipt = _unwrap(client.add_component(cluster, host, component), f"Adding {component}")
    _print_receipt(f"Added '{component}' to {host}; install requested", receipt)


@app.command()
def remove_component(
    ctx: typer.Context,
    cluster: str = typer.Argument(..., help="Cluster name"),
    host: str = typer.Argument(..., help="Host name"),
    component: str = typer.Argument(..., help="Component name"),
) -> None:
    """Remove a component from a host."""
    with _client(ctx) as client:
        _unwrap(client.remove_component(cluster, host, component), f"Removing {component}")
    console.print(f"[green]✓[/green] Removed '{component}' from {host}")


@app.command()
def add_host(
    ctx: typer.Context,
    cluster: str = typer.Argument(..., help="Cluster name"),
    host: str = typer.Argument(..., help="Host name"),
) -> None:
    """Register a host with a cluster."""
    with _client(ctx) as client:
        receipt = _unwrap(client.add_host(cluster, host), f"Adding host {host}")
    if receipt is None:
        console.print(f"[yellow]Host '{host}' is already part of {cluster}[/yellow]")
        return
    console.print(f"[green]✓[/green] Added host '{host}' to {cluster}")


@app.command()
def remove_host(
    ctx: typer.Context,
    cluster: str = typer.Argument(..., help="Cluster name"),
    host: str = typer.Argument(..., help="Host name"),
) -> None:
    """Remove a host from a cluster."""
    with _client(ctx) as client:
        _unwrap(client.remove_host(cluster, host), f"Removing host {host}")
    console.print(f"[green]✓[/green] Removed host '{host}' from {cluster}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
