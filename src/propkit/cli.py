"""Command-line interface for propkit.

\b
Commands:
    proxies       Create entry-point proxy folders
    gitignore     Write .gitignore with build folders
    clean         Remove build folders
    playground    Write the playground dependency map
    props         Inject prop tables into module READMEs
    keys          Generate key-list modules
    all           Run proxies, gitignore, playground, props and keys
    build-types   Run a type build with the production tsconfig
    config        Show or create propkit.toml
"""

import logging
import sys
from collections.abc import Callable
from pathlib import Path

import click

from propkit import __version__
from propkit.builder import (
    GENERATE_STEPS,
    clean_build,
    inject_prop_types,
    make_gitignore,
    make_keys,
    make_playground_deps,
    make_proxies,
    run_with_prod_tsconfig,
)
from propkit.config import ConfigManager, PropkitConfig
from propkit.exceptions import PropkitError
from propkit.reporter import Reporter, StepResult
from propkit.shutdown import CleanupRegistry

logger = logging.getLogger(__name__)


class CLIContext:
    """State shared by all commands of one invocation."""

    def __init__(self, root: Path, config_path: str | None, reporter: Reporter):
        self.root = root
        self.config_path = config_path
        self.reporter = reporter
        self._config: PropkitConfig | None = None

    @property
    def config(self) -> PropkitConfig:
        if self._config is None:
            self._config = ConfigManager.load_config(self.root, self.config_path)
        return self._config


def _run_steps(ctx: click.Context, *steps: Callable[..., StepResult]) -> None:
    state: CLIContext = ctx.obj
    try:
        for step in steps:
            state.reporter.report(step(state.root, state.config))
    except PropkitError as e:
        state.reporter.error(str(e))
        ctx.exit(1)


@click.group(context_settings={"help_option_names": ["--help", "-h"]})
@click.option(
    "--root",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Package root (directory holding package.json)",
)
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Config file path")
@click.option("--verbose", "-v", is_flag=True, help="Show debug output")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, root: Path, config_path: str | None, verbose: bool) -> None:
    """propkit - build tooling for TypeScript component packages.

    \b
    CONFIGURATION:
        Config file: <root>/propkit.toml (optional)
        Create one with: propkit config init
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")
    ctx.obj = CLIContext(root, config_path, Reporter())


@main.command()
@click.pass_context
def proxies(ctx: click.Context) -> None:
    """Create proxy folders with a package.json for each public module."""
    _run_steps(ctx, make_proxies)


@main.command()
@click.pass_context
def gitignore(ctx: click.Context) -> None:
    """Write .gitignore listing every build output folder."""
    _run_steps(ctx, make_gitignore)


@main.command()
@click.pass_context
def clean(ctx: click.Context) -> None:
    """Remove build output and proxy folders."""
    _run_steps(ctx, clean_build)


@main.command()
@click.pass_context
def playground(ctx: click.Context) -> None:
    """Write the dependency map of the configured playground package."""
    _run_steps(ctx, make_playground_deps)


@main.command()
@click.pass_context
def props(ctx: click.Context) -> None:
    """Inject prop tables under the props heading of module READMEs."""
    _run_steps(ctx, inject_prop_types)


@main.command()
@click.pass_context
def keys(ctx: click.Context) -> None:
    """Generate a deduplicated key-list module per module directory."""
    _run_steps(ctx, make_keys)


@main.command(name="all")
@click.pass_context
def all_command(ctx: click.Context) -> None:
    """Run proxies, gitignore, playground, props and keys in order."""
    _run_steps(ctx, *GENERATE_STEPS)


@main.command(name="build-types", context_settings={"ignore_unknown_options": True})
@click.argument("command", nargs=-1, required=True, type=click.UNPROCESSED)
@click.pass_context
def build_types(ctx: click.Context, command: tuple[str, ...]) -> None:
    """Run COMMAND with the production tsconfig in place.

    The original tsconfig is restored when the command finishes, fails or
    is interrupted.

    \b
    Examples:
        propkit build-types -- tsc --emitDeclarationOnly
    """
    state: CLIContext = ctx.obj
    registry = CleanupRegistry()
    registry.install()
    try:
        returncode = run_with_prod_tsconfig(state.root, list(command), registry, state.config)
    except PropkitError as e:
        state.reporter.error(str(e))
        ctx.exit(1)
    except FileNotFoundError as e:
        state.reporter.error(f"Command not found: {e.filename or command[0]}")
        ctx.exit(127)
    finally:
        registry.run()
        registry.uninstall()
    ctx.exit(returncode)


@main.group(name="config")
def config_group() -> None:
    """Show or create the propkit configuration file."""
    pass


@config_group.command(name="show")
@click.pass_context
def config_show(ctx: click.Context) -> None:
    """Print the effective configuration as TOML."""
    state: CLIContext = ctx.obj
    try:
        click.echo(ConfigManager.dumps(state.config), nl=False)
    except PropkitError as e:
        state.reporter.error(str(e))
        ctx.exit(1)


@config_group.command(name="init")
@click.option("--force", is_flag=True, help="Overwrite an existing config file")
@click.pass_context
def config_init(ctx: click.Context, force: bool) -> None:
    """Write a propkit.toml with the default settings."""
    state: CLIContext = ctx.obj
    path = ConfigManager.get_config_path(state.root, state.config_path)
    if path.exists() and not force:
        state.reporter.error(f"{path} already exists (use --force to overwrite)")
        ctx.exit(1)
    try:
        saved = ConfigManager.save_config(PropkitConfig(), state.root, state.config_path)
    except PropkitError as e:
        state.reporter.error(str(e))
        ctx.exit(1)
    state.reporter.info(f"[bold green]Created[/bold green] {saved}")


if __name__ == "__main__":
    sys.exit(main())
