"""
kusionkit CLI entry point.
"""
import os
import sys
from typing import Dict, List, Optional, Tuple

import click
import yaml
from rich.console import Console
from rich.table import Table

from kusionkit import __version__
from kusionkit.config import load_provider_configs
from kusionkit.detect import detect_format
from kusionkit.errors import ConfigError, DuplicateResourceError
from kusionkit.models.provider import ProviderConfig
from kusionkit.models.resource import RESOURCE_EXTENSION_GVK, Resource, ResourceType
from kusionkit.models.spec import Spec
from kusionkit.module.app import unique_app_labels, unique_app_name
from kusionkit.module.terraform import EXTENSION_PROVIDER
from kusionkit.parsers import kubernetes, terraform
from kusionkit.writers import json_writer, yaml_writer

console = Console(stderr=True)

_TYPE_COLORS = {
    ResourceType.KUBERNETES: "cyan",
    ResourceType.TERRAFORM: "magenta",
}


def _collect_files(paths: Tuple[str, ...]) -> List[str]:
    """Expand directories into file paths."""
    files = []
    for p in paths:
        if os.path.isfile(p):
            files.append(p)
        elif os.path.isdir(p):
            for root, _, fnames in os.walk(p):
                for fname in sorted(fnames):
                    files.append(os.path.join(root, fname))
        else:
            console.print(f"[yellow]Warning:[/yellow] '{p}' does not exist, skipping.")
    return files


def _parse_files(
    file_paths: List[str], provider_configs: Dict[str, ProviderConfig]
) -> List[Resource]:
    resources: List[Resource] = []
    # .tf files of one directory form one module
    tf_modules: Dict[str, List[str]] = {}
    for fp in file_paths:
        fmt = detect_format(fp)
        if fmt == "terraform":
            tf_modules.setdefault(os.path.dirname(os.path.abspath(fp)), []).append(fp)
        elif fmt == "kubernetes":
            resources.extend(kubernetes.parse_file(fp))
        else:
            console.print(f"[dim]Skipping unsupported file:[/dim] {fp}")
    for module in tf_modules.values():
        resources.extend(terraform.parse_files(module, provider_configs))
    return resources


def _print_summary_table(spec: Spec, no_color: bool) -> None:
    """Print a rich summary table to stderr."""
    tbl = Table(title="Resources", show_header=True, header_style="bold")
    tbl.add_column("Type", width=12)
    tbl.add_column("ID")
    tbl.add_column("Origin")

    for r in spec:
        color = _TYPE_COLORS.get(r.type, "") if not no_color else ""
        if r.type == ResourceType.KUBERNETES:
            origin = r.extensions.get(RESOURCE_EXTENSION_GVK, "")
        else:
            origin = r.extensions.get(EXTENSION_PROVIDER, "")
        tbl.add_row(
            f"[{color}]{r.type.value}[/{color}]" if color else r.type.value,
            r.id,
            origin,
        )

    Console(stderr=True, no_color=no_color).print(tbl)


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.version_option(__version__)
@click.pass_context
def cli(ctx):
    """Wrap Kubernetes and Terraform resources into kusion resources."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())
        ctx.exit()


@cli.command()
@click.argument("paths", nargs=-1, required=True, type=click.Path())
@click.option(
    "--format", "output_format",
    type=click.Choice(["yaml", "json"], case_sensitive=False),
    default="yaml",
    show_default=True,
    help="Output format.",
)
@click.option(
    "--output", "-o",
    type=click.Path(),
    default=None,
    help="Write the spec to this file (default: stdout).",
)
@click.option(
    "--provider-config",
    type=click.Path(),
    default=None,
    help="YAML file with Terraform provider source, version and providerMeta, by local name.",
)
@click.option(
    "--no-color",
    is_flag=True,
    default=False,
    help="Disable rich terminal color output.",
)
def wrap(
    paths: Tuple[str, ...],
    output_format: str,
    output: Optional[str],
    provider_config: Optional[str],
    no_color: bool,
) -> None:
    """
    Wrap Kubernetes manifests and Terraform files into one resource spec.

    PATHS can be files or directories; multiple values accepted.
    """
    stderr = Console(stderr=True, no_color=no_color)
    source_label = ", ".join(paths)

    provider_configs: Dict[str, ProviderConfig] = {}
    if provider_config:
        try:
            provider_configs = load_provider_configs(provider_config)
        except ConfigError as exc:
            stderr.print(f"[red]Config error:[/red] {exc}")
            sys.exit(2)

    # 1. Collect and parse
    with stderr.status("[bold]Collecting files…"):
        file_paths = _collect_files(paths)

    if not file_paths:
        stderr.print("[red]No files found.[/red]")
        sys.exit(2)

    with stderr.status(f"[bold]Parsing {len(file_paths)} file(s)…"):
        resources = _parse_files(file_paths, provider_configs)

    # 2. Assemble
    try:
        spec = Spec(resources)
    except DuplicateResourceError as exc:
        stderr.print(f"[red]Spec error:[/red] {exc}")
        sys.exit(2)

    if not spec:
        stderr.print("[yellow]No resources found in the provided paths.[/yellow]")
        sys.exit(0)

    stderr.print(f"Wrapped [bold]{len(spec)}[/bold] resources.")

    # 3. Write
    if output_format.lower() == "json":
        content = json_writer.build_document(spec, source_label)
    else:
        content = yaml_writer.build_document(spec)

    if output:
        _print_summary_table(spec, no_color)
        with open(output, "w", encoding="utf-8", newline="\n") as fh:
            fh.write(content)
        stderr.print(f"Spec written to [bold]{output}[/bold]")
    else:
        click.echo(content)

    sys.exit(0)


@cli.command()
@click.argument("project")
@click.argument("stack")
@click.argument("app_name", metavar="APP")
def app(project: str, stack: str, app_name: str) -> None:
    """Print the unique workload name and labels of an app."""
    click.echo(yaml.safe_dump(
        {
            "name": unique_app_name(project, stack, app_name),
            "labels": unique_app_labels(project, app_name),
        },
        sort_keys=False,
        default_flow_style=False,
    ), nl=False)


def main():
    cli(obj={})


if __name__ == "__main__":
    main()
