"""Command-line interface for clarvis.

Running ``clarvis`` with no subcommand processes one Claude Code hook
event from stdin; that is the command the Stop hook invokes. The
subcommands ``install-hooks``, ``uninstall``, ``check-config`` and
``say`` are for the person setting clarvis up. The entry point is
registered in ``pyproject.toml`` as ``clarvis = "clarvis.cli:cli"``.
"""

import asyncio

import click

from clarvis.config import get_config_path, load_config
from clarvis.errors import ClarvisError
from clarvis.events.types import Style
from clarvis.pipeline import require_voice, run_hook
from clarvis.tts.speaker import Speaker


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """clarvis -- speaks Claude Code's replies aloud.

    Without a subcommand, reads a hook event from stdin and speaks it.
    Always exits 0 so a failure never breaks the Claude Code session.
    """
    if ctx.invoked_subcommand is None:
        asyncio.run(run_hook())


# ---------------------------------------------------------------------------
# install-hooks / uninstall
# ---------------------------------------------------------------------------


@cli.command("install-hooks")
def install_hooks_cmd() -> None:
    """Add the clarvis Stop hook to ~/.claude/settings.json."""
    from clarvis.interceptors.hook_installer import install_hooks

    try:
        install_hooks()
    except OSError as exc:
        click.echo(click.style(f"Failed to install hooks: {exc}", fg="red"))
        raise SystemExit(1)
    click.echo(click.style("Hooks installed successfully.", fg="green"))


@cli.command()
def uninstall() -> None:
    """Remove the clarvis Stop hook, leaving other hooks untouched."""
    from clarvis.interceptors.hook_installer import uninstall_hooks

    try:
        uninstall_hooks()
    except OSError as exc:
        click.echo(click.style(f"Failed to uninstall hooks: {exc}", fg="red"))
        raise SystemExit(1)
    click.echo(click.style("Hooks uninstalled.", fg="green"))


# ---------------------------------------------------------------------------
# check-config
# ---------------------------------------------------------------------------


@cli.command("check-config")
def check_config() -> None:
    """Validate config.toml, show the style per context and the hook state."""
    from clarvis.interceptors.hook_installer import are_hooks_installed

    path = get_config_path()
    try:
        config = load_config(path)
        require_voice(config)
    except ClarvisError as exc:
        click.echo(click.style(str(exc), fg="red"))
        raise SystemExit(1)

    click.echo(click.style(f"Config OK: {path}", fg="green"))
    click.echo(f"  LLM provider: {config.llm.provider} ({config.llm.model})")
    click.echo(f"  Voice:        {config.voice.provider or 'lspeak default'}")
    for name, style in sorted(config.contexts.items()):
        cache = "default" if style.cache is None else ("on" if style.cache else "off")
        click.echo(f"  {name:<12}  style={style.style.value:<7} cache={cache}")

    if are_hooks_installed():
        click.echo(click.style("Stop hook installed.", fg="green"))
    else:
        click.echo(
            click.style(
                "Stop hook not installed. Run `clarvis install-hooks`.", fg="yellow"
            )
        )


# ---------------------------------------------------------------------------
# say
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("text", nargs=-1, required=True)
@click.option("--no-cache", is_flag=True, help="Bypass the lspeak phrase cache")
def say(text: tuple[str, ...], no_cache: bool) -> None:
    """Speak TEXT through the configured voice."""
    try:
        config = load_config()
        speaker = Speaker(require_voice(config))
        asyncio.run(
            speaker.speak([" ".join(text)], Style.FULL, False if no_cache else None)
        )
    except ClarvisError as exc:
        click.echo(click.style(str(exc), fg="red"))
        raise SystemExit(1)
