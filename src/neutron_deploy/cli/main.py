"""Main CLI entry point."""

import sys
from pathlib import Path
from typing import List, Tuple

import click
from rich.panel import Panel

from neutron_deploy.utils.logging import setup_logging, get_logger
from neutron_deploy.cli.output import console, print_attributes, print_diagnostics, print_plan
from neutron_deploy.config.parser import Config, ConfigValidationError
from neutron_deploy.provider import Provider, from_state_resource, to_state_resource
from neutron_deploy.provisioners.base import ChangeType, ProvisionPlan
from neutron_deploy.state.manager import StateManager, state_path_for
from neutron_deploy.state.models import Resource as StateResource, State
from neutron_deploy.utils.errors import ProviderError

logger = get_logger(__name__)


@click.group()
@click.option('--cloud', help='clouds.yaml entry to use')
@click.option('--region', help='OpenStack region')
@click.option('--log-level', default='info', type=click.Choice(['debug', 'info', 'warning', 'error']))
@click.option('--config', default='neutron.yaml', help='Path to configuration file')
@click.pass_context
def cli(ctx, cloud, region, log_level, config):
    """OpenStack Networking provisioning."""
    ctx.ensure_object(dict)
    ctx.obj['cloud'] = cloud
    ctx.obj['region'] = region
    ctx.obj['log_level'] = log_level
    ctx.obj['config'] = config

    # Setup logging
    setup_logging(log_level)


def load_config(config_path: str) -> Config:
    """Load and validate configuration file."""
    try:
        config = Config(config_path)
        config.load()
        return config
    except FileNotFoundError:
        console.print(f"[red]Error:[/red] Configuration file not found: {config_path}")
        sys.exit(1)
    except ConfigValidationError as e:
        console.print("[red]Configuration validation failed:[/red]\n")
        console.print(str(e), markup=False)
        sys.exit(1)


def create_provider(ctx, cfg: Config) -> Provider:
    """Build the provider, applying command-line overrides."""
    overrides = {}
    if ctx.obj.get('cloud'):
        overrides['cloud'] = ctx.obj['cloud']
    if ctx.obj.get('region'):
        overrides['region'] = ctx.obj['region']

    provider_config = cfg.provider.model_copy(update=overrides)
    provider = Provider(provider_config)
    ctx.call_on_close(provider.close)
    return provider


def get_state_manager(cfg: Config) -> StateManager:
    """State manager for the configured workspace."""
    return StateManager(str(Path.cwd() / state_path_for(cfg.workspace)))


def _load_state(state_manager: StateManager, cfg: Config) -> State:
    return state_manager.load_or_initialize(
        cfg.workspace, cloud=cfg.provider.cloud, region=cfg.provider.region
    )


def build_plans(
    provider: Provider, cfg: Config, state: State
) -> Tuple[List[Tuple[str, ProvisionPlan]], List]:
    """Refresh managed resources and plan every configured one.

    Resources in state that are no longer configured are planned for deletion.

    Returns:
        (plans, diagnostics)
    """
    plans = []
    diagnostics = []

    for block in cfg.resources:
        prior = None
        recorded = state.get_resource(block.address)
        if recorded is not None:
            refreshed = provider.refresh(from_state_resource(recorded))
            diagnostics.extend(refreshed.diagnostics)
            if not refreshed.ok:
                continue
            prior = refreshed.resource

        result = provider.plan_resource(block.type, block.address, block.args, prior)
        diagnostics.extend(result.diagnostics)
        if result.plan is not None:
            plans.append((block.address, result.plan))

    configured = {block.address for block in cfg.resources}
    for recorded in state.list_resources():
        if recorded.id in configured:
            continue
        orphan = from_state_resource(recorded)
        plans.append((recorded.id, ProvisionPlan(
            resource=orphan,
            change_type=ChangeType.DELETE,
            current_state=orphan
        )))

    return plans, diagnostics


@cli.command()
@click.argument('address', required=False)
@click.option('--format', type=click.Choice(['table', 'json']), default='table', help='Output format')
@click.pass_context
def read(ctx, address, format):
    """Run data source lookups and record the results."""
    cfg = load_config(ctx.obj['config'])

    blocks = cfg.data_sources
    if address:
        block = cfg.get_data_source(address)
        if block is None:
            console.print(f"[red]Error:[/red] No data source named {address}")
            sys.exit(1)
        blocks = [block]

    provider = create_provider(ctx, cfg)
    failed = False

    try:
        with get_state_manager(cfg) as state_manager:
            state = _load_state(state_manager, cfg)

            for block in blocks:
                result = provider.read_data_source(block.type, block.args, address=block.address)
                print_diagnostics(result.diagnostics)
                if not result.ok:
                    failed = True
                    continue

                state.set_data(StateResource(
                    id=block.address,
                    type=block.type,
                    physical_id=result.physical_id,
                    region=result.attributes.get('region'),
                    attributes=result.attributes,
                    tags=result.attributes.get('all_tags') or [],
                ))
                print_attributes(block.address, result.attributes, format)

            state_manager.save(state)
    except ProviderError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if failed:
        sys.exit(1)


@cli.command()
@click.pass_context
def plan(ctx):
    """Show the changes apply would make."""
    cfg = load_config(ctx.obj['config'])
    provider = create_provider(ctx, cfg)

    try:
        with get_state_manager(cfg) as state_manager:
            state = _load_state(state_manager, cfg)
            plans, diagnostics = build_plans(provider, cfg, state)
    except ProviderError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    print_diagnostics(diagnostics)
    print_plan(plans)

    if any(d.is_error for d in diagnostics):
        sys.exit(1)


@cli.command()
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation prompt')
@click.pass_context
def apply(ctx, yes):
    """Create, update, replace, or delete resources to match the configuration."""
    cfg = load_config(ctx.obj['config'])
    provider = create_provider(ctx, cfg)
    failed = False

    try:
        with get_state_manager(cfg) as state_manager:
            state = _load_state(state_manager, cfg)
            plans, diagnostics = build_plans(provider, cfg, state)

            print_diagnostics(diagnostics)
            if any(d.is_error for d in diagnostics):
                sys.exit(1)

            pending = [(a, p) for a, p in plans if p.change_type != ChangeType.NO_CHANGE]
            print_plan(plans)
            if not pending:
                console.print("[green]No changes.[/green]")
                return

            if not yes and not click.confirm("Apply these changes?", default=False):
                console.print("[yellow]Apply cancelled[/yellow]")
                return

            for address, resource_plan in pending:
                if resource_plan.change_type == ChangeType.DELETE:
                    result = provider.destroy(resource_plan.current_state)
                else:
                    result = provider.apply(resource_plan)

                print_diagnostics(result.diagnostics)
                if not result.ok:
                    console.print(f"  [red]✗[/red] {address}")
                    failed = True
                    continue

                if resource_plan.change_type == ChangeType.DELETE:
                    state.remove_resource(address)
                else:
                    state.add_resource(to_state_resource(result.resource))
                state_manager.save(state)
                console.print(f"  [green]✓[/green] {address} ({resource_plan.change_type.value})")
    except ProviderError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if failed:
        console.print("\n[red]Apply finished with errors[/red]")
        sys.exit(1)

    console.print(Panel.fit("[green]✓ Apply complete[/green]", border_style="green"))


@cli.command()
@click.argument('address', required=False)
@click.option('--yes', '-y', is_flag=True, help='Skip confirmation prompt')
@click.pass_context
def destroy(ctx, address, yes):
    """Delete managed resources recorded in state."""
    cfg = load_config(ctx.obj['config'])
    state_manager = get_state_manager(cfg)

    if not state_manager.exists():
        console.print(f"[yellow]No state found for workspace:[/yellow] {cfg.workspace}")
        return

    provider = create_provider(ctx, cfg)
    failed = False

    try:
        with state_manager:
            state = state_manager.get_state()
            targets = state.list_resources()
            if address:
                targets = [r for r in targets if r.id == address]
                if not targets:
                    console.print(f"[red]Error:[/red] {address} is not in state")
                    sys.exit(1)

            if not targets:
                console.print("[dim]Nothing to destroy[/dim]")
                return

            console.print(Panel.fit(
                "[bold red]⚠ WARNING: This will destroy resources[/bold red]\n\n"
                + "\n".join(r.id for r in targets),
                title="Destruction Plan",
                border_style="red"
            ))

            if not yes and not click.confirm(
                "Are you sure you want to destroy these resources?", default=False
            ):
                console.print("[yellow]Destruction cancelled[/yellow]")
                return

            for recorded in reversed(targets):
                result = provider.destroy(from_state_resource(recorded))
                print_diagnostics(result.diagnostics)
                if not result.ok:
                    console.print(f"  [red]✗[/red] {recorded.id}")
                    failed = True
                    continue

                state.remove_resource(recorded.id)
                state_manager.save(state)
                console.print(f"  [green]✓[/green] {recorded.id} destroyed")
    except ProviderError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if failed:
        console.print("\n[red]Resources may need manual cleanup[/red]")
        sys.exit(1)


@cli.command()
@click.argument('address', required=False)
@click.option('--format', type=click.Choice(['table', 'json']), default='table', help='Output format')
@click.pass_context
def show(ctx, address, format):
    """Show recorded attributes from state."""
    cfg = load_config(ctx.obj['config'])
    state_manager = get_state_manager(cfg)

    if not state_manager.exists():
        console.print(f"[yellow]No state found for workspace:[/yellow] {cfg.workspace}")
        return

    try:
        state = state_manager.load()
    except ProviderError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    entries = {f"data.{k}": v for k, v in state.data.items()}
    entries.update(state.resources)

    if address:
        entry = state.get_resource(address) or state.get_data(address) or entries.get(address)
        if entry is None:
            console.print(f"[red]Error:[/red] {address} is not in state")
            sys.exit(1)
        entries = {address: entry}

    if not entries:
        console.print("[dim]State is empty[/dim]")
        return

    for name in sorted(entries):
        print_attributes(name, entries[name].attributes, format)


if __name__ == '__main__':
    cli()
