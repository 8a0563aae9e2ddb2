"""
CLI entry point for ack-api-extractor.
"""

import logging
from functools import wraps
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from ack_api_extractor.classify import OperationClassifier
from ack_api_extractor.exceptions import (
    ExtractorError,
    PolicyError,
    format_error_for_cli,
)
from ack_api_extractor.export import write_policy, write_service_operations
from ack_api_extractor.extract import extract_service_operations, get_control_plane_policy
from ack_api_extractor.llm import get_provider
from ack_api_extractor.policy import generate_policy
from ack_api_extractor.util.files import ensure_dir
from ack_api_extractor.workspace import Workspace

app = typer.Typer(
    name="ack-api-extractor",
    help="Extract AWS API operations and their ACK controller implementation status",
    add_completion=False,
)
console = Console()
logger = logging.getLogger(__name__)


def handle_errors(func):
    """Decorator to handle exceptions in CLI commands with nice formatting."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ExtractorError as e:
            console.print(format_error_for_cli(e))
            raise typer.Exit(1)
        except (ValueError, ImportError) as e:
            console.print(f"[red]Error:[/red] {str(e)}")
            raise typer.Exit(1)

    return wrapper


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def parse_services(services: str) -> list[str]:
    """Split a comma-separated service list, dropping blanks."""
    return [service.strip() for service in services.split(",") if service.strip()]


@app.command()
def init(
    workspace_dir: str = typer.Argument(".", help="Directory to write the configuration to"),
):
    """Write a default ack-api-extractor.yaml."""
    workspace = Workspace(Path(workspace_dir))
    if workspace.config_file.exists():
        console.print(f"[yellow]Configuration already exists: {workspace.config_file}[/yellow]")
        raise typer.Exit(1)

    workspace.initialize()
    console.print(f"[green]✓ Wrote configuration to {workspace.config_file}[/green]")


@app.command()
@handle_errors
def extract(
    service: str = typer.Option(
        ..., "--service", help="AWS service name(s), comma-separated (e.g. acm,dynamodb,lambda)"
    ),
    output: str = typer.Option(
        ..., "--output", help="Output directory (creates <service>-operations.json)"
    ),
    classify: bool = typer.Option(
        False, "--classify", help="Classify unimplemented operations as control/data plane"
    ),
    policy: bool = typer.Option(
        False, "--policy", help="Generate an IAM policy for implemented operations"
    ),
    config_file: str = typer.Option(
        None, "--config", help="Configuration file (default: ./ack-api-extractor.yaml)"
    ),
    controllers_root: str = typer.Option(
        None, "--controllers-root", help="Directory holding the <service>-controller checkouts"
    ),
    models_root: str = typer.Option(
        None, "--models-root", help="api-models-aws models directory"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Extract operations for one or more services."""
    configure_logging(verbose)

    services = parse_services(service)
    if not services:
        console.print("[red]Error: --service must name at least one service[/red]")
        raise typer.Exit(1)

    workspace = Workspace(Path.cwd(), Path(config_file) if config_file else None)
    config = workspace.load_config()
    paths = workspace.paths(controllers_root, models_root)
    cp_policy = get_control_plane_policy(config["classification"]["mode"])

    classifier = None
    if classify:
        classifier = OperationClassifier(
            get_provider(config),
            batch_size=config["classification"]["batch_size"],
            rate_limit_delay=float(config["llm"].get("rate_limit_delay", 0.0)),
        )
        console.print(
            f"[bold blue]Extracting operations with classification for "
            f"{len(services)} service(s)[/bold blue]\n"
        )
    else:
        console.print(
            f"[bold blue]Extracting operations for {len(services)} service(s)[/bold blue]\n"
        )

    try:
        output_dir = ensure_dir(output)
    except OSError as e:
        console.print(
            f"[red]✗ Cannot create output directory {escape(output)}: {escape(str(e))}[/red]"
        )
        raise typer.Exit(1)

    total_operations = 0
    successful_services = 0

    for service_name in services:
        try:
            service_ops = extract_service_operations(
                service_name,
                classify,
                paths=paths,
                classifier=classifier,
                policy=cp_policy,
            )
        except ExtractorError as e:
            console.print(f"[red]✗ {service_name}:[/red] {escape(e.message)}")
            logger.debug(f"Extraction failed for {service_name}", exc_info=True)
            continue

        try:
            output_file = write_service_operations(service_ops, output_dir)
        except OSError as e:
            console.print(
                f"[red]✗ Error writing JSON file for {service_name}: {escape(str(e))}[/red]"
            )
            continue

        console.print(
            f"[green]✓ {service_name}: {service_ops.total_operations} operations "
            f"({service_ops.supported_operations} supported) → {output_file}[/green]"
        )
        total_operations += service_ops.total_operations
        successful_services += 1

        if policy:
            try:
                iam_policy = generate_policy(
                    service_name, service_ops.operations, paths.controllers_root
                )
                policy_file = write_policy(iam_policy, service_name, output_dir)
                console.print(f"[green]  ✓ IAM policy → {policy_file}[/green]")
            except PolicyError as e:
                console.print(
                    f"[yellow]  ⚠ Policy not generated for {service_name}: "
                    f"{escape(e.message)}[/yellow]"
                )
                logger.warning(f"Policy generation failed for {service_name}: {e.message}")
            except OSError as e:
                console.print(
                    f"[yellow]  ⚠ Error writing policy for {service_name}: "
                    f"{escape(str(e))}[/yellow]"
                )

    console.print(
        f"\nSuccessfully generated JSON files for {successful_services}/{len(services)} services"
    )
    console.print(f"Total operations extracted: {total_operations}")

    if successful_services == 0:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
