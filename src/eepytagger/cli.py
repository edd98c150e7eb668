"""Command-line interface: the interactive tagging loop and config setup."""

import os
from pathlib import Path

import click
import questionary
from click_default_group import DefaultGroup
from prompt_toolkit import PromptSession
from prompt_toolkit.history import FileHistory, InMemoryHistory

from eepytagger.config import (
    DEFAULT_OUTPUT_FILE,
    default_temp_file,
    global_config_path,
    load_config,
    local_config_path,
    render_config_toml,
    resolve_history_path,
    resolve_output_path,
    resolve_temp_path,
)
from eepytagger.errors import PersistenceError
from eepytagger.interpreter import CommandInterpreter, Outcome
from eepytagger.persistence import load_tags
from eepytagger.store import MAX_TEXT_LENGTH

PROMPT = "> "


def _make_prompt_session(history_path: Path | None) -> PromptSession:
    if history_path is None:
        return PromptSession(history=InMemoryHistory())
    history_path.parent.mkdir(parents=True, exist_ok=True)
    return PromptSession(history=FileHistory(str(history_path)))


def _ensure_writable_dir(path: Path) -> None:
    directory = path.parent
    if not os.access(directory, os.W_OK):
        raise click.ClickException(f"Cannot write to temporary directory {directory}")


def echo_outcome(outcome: Outcome) -> None:
    for warning in outcome.warnings:
        click.echo(warning, err=True)
    if outcome.lines:
        click.echo(outcome.text, err=outcome.error)


def run_session(interpreter: CommandInterpreter, prompt_session) -> None:
    """Feed input lines to ``interpreter`` until !end, EOF, or a full store."""
    while True:
        try:
            line = prompt_session.prompt(PROMPT)
        except KeyboardInterrupt:
            # Ctrl+C discards the current line
            continue
        except EOFError:
            click.echo("EOF received", err=True)
            break

        outcome = interpreter.execute(line[:MAX_TEXT_LENGTH])
        echo_outcome(outcome)
        if outcome.terminate:
            break


@click.group(cls=DefaultGroup, default="tag", default_if_no_args=True)
@click.version_option(None, "-v", "--version", package_name="eepytagger")
def cli():
    """Tag a live or replayed timeline with elapsed-time stamps."""
    pass


@cli.command("tag")
@click.option(
    "-f",
    "--output",
    type=click.Path(dir_okay=False),
    help=f"Output file written when the session ends (default: {DEFAULT_OUTPUT_FILE}).",
)
@click.option(
    "-t",
    "--temp",
    type=click.Path(dir_okay=False),
    help="Temporary file autosaved after every change (default: timestamps.txt in the system temp dir).",
)
@click.option(
    "--resume",
    "resume_file",
    type=click.Path(dir_okay=False),
    help="Resume tagging from an existing file; it also becomes the output file.",
)
def tag_cmd(output, temp, resume_file):
    """Run an interactive tagging session."""
    if resume_file and output:
        raise click.UsageError("--resume already sets the output file; do not combine it with -f/--output.")

    cfg = load_config()
    destination = Path(resume_file) if resume_file else resolve_output_path(output, cfg)
    scratch = resolve_temp_path(temp, cfg)

    store = load_tags(destination) if resume_file else None
    _ensure_writable_dir(scratch)

    interpreter = CommandInterpreter(destination, scratch, store=store)

    click.echo("eepytagger ready. Use !start [HH:MM:SS] to begin.")
    click.echo(f"Output file: {destination}")
    click.echo(f"Temporary file: {scratch}")
    if resume_file:
        click.echo(f"Loaded {len(interpreter.store)} tags from {destination}")

    run_session(interpreter, _make_prompt_session(resolve_history_path(cfg)))

    try:
        saved = interpreter.save_final()
    except PersistenceError as e:
        raise click.ClickException(f"{e} (latest autosave is in {scratch})")
    if saved is not None:
        click.echo(f"Saved final timestamps to {saved}")


def _write_config_file(path: Path, toml_text: str, *, label: str, force: bool) -> None:
    if path.exists() and not force:
        overwrite = questionary.confirm(
            f"{label.capitalize()} config already exists at {path}. Overwrite?",
            default=False,
        ).ask()
        if not overwrite:
            click.echo(f"Skipped {label} config.")
            return
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(toml_text, encoding="utf-8")
    click.echo(f"Wrote {label} config.")


@cli.command("setup")
@click.option(
    "--global/--no-global",
    "write_global",
    default=True,
    help="Write a global config file for this user.",
)
@click.option(
    "--local/--no-local",
    "write_local",
    default=False,
    help="Write a .eepytagger.toml in the current directory.",
)
@click.option("--force", is_flag=True, help="Overwrite existing config files.")
def setup_cmd(write_global, write_local, force):
    """Interactive setup wizard for default file locations."""
    global_path = global_config_path()
    local_path = local_config_path()

    existing = load_config()
    default_output = existing.get("output") or DEFAULT_OUTPUT_FILE
    default_temp = existing.get("temp") or str(default_temp_file())
    default_history = existing.get("history") or ""

    if write_global:
        click.echo(f"Global config: {global_path}")
    if write_local:
        click.echo(f"Local config:  {local_path}")

    output = questionary.text("Output file for finished sessions:", default=str(default_output)).ask()
    if output is None:
        raise click.ClickException("Setup aborted.")

    temp = questionary.text("Temporary autosave file:", default=str(default_temp)).ask()
    if temp is None:
        raise click.ClickException("Setup aborted.")

    history = questionary.text(
        "Prompt history file (blank keeps history in memory only):",
        default=str(default_history),
    ).ask()
    if history is None:
        raise click.ClickException("Setup aborted.")

    toml_text = render_config_toml({"output": output, "temp": temp, "history": history})
    if not toml_text.strip():
        raise click.ClickException("Refusing to write empty config.")

    if write_global:
        _write_config_file(global_path, toml_text, label="global", force=force)
    if write_local:
        _write_config_file(local_path, toml_text, label="local", force=force)


def main():
    cli()
