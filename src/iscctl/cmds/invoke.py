"""``iscctl cmd``: list the command catalogue and run single commands."""

from __future__ import annotations

import json
from dataclasses import fields
from typing import Dict, List, Optional

import typer
from serial import SerialException

from ..common.config import SessionConfig
from ..common.errors import UnknownCommandError, UnsupportedCommandError
from .base import Command
from .codec import encode
from .registry import CommandSpec, all_specs, cli_name, find

app = typer.Typer(help="Low-level command utilities (one protocol command per call)")


def _arg_names(spec: CommandSpec) -> List[str]:
    return [f.name for f in fields(spec.kind) if f.name != "channel"]


def build_command(spec: CommandSpec, args: List[str], channel: Optional[int] = None) -> Command:
    """Make a Command from ``value`` (positional) and ``name=value`` arguments."""
    names = _arg_names(spec)
    kwargs: Dict[str, str] = {}
    positional = [a for a in args if "=" not in a]
    if len(positional) > len(names):
        raise ValueError(f"{cli_name(spec)} takes at most {len(names)} argument(s): {', '.join(names) or 'none'}")
    kwargs.update(zip(names, positional))
    for a in args:
        if "=" in a:
            key, val = a.split("=", 1)
            key = key.strip().replace("-", "_")
            if key not in names:
                raise ValueError(f"{cli_name(spec)} has no argument {key!r}")
            kwargs[key] = val
    return spec.kind(channel=channel, **kwargs)


@app.command("list")
def list_commands(
    family: Optional[str] = typer.Option(None, "--family", help="Only one family (basic, dll, soa, ...)"),
):
    for spec in all_specs():
        if family and spec.family != family:
            continue
        notes = []
        if spec.no_reply:
            notes.append("no reply")
        if spec.unsupported_on:
            notes.append("not on " + ", ".join(spec.unsupported_on))
        args = " ".join(f"<{n}>" for n in _arg_names(spec))
        line = f"{spec.family:<12} {spec.token:<10} {cli_name(spec)} {args}".rstrip()
        typer.echo(line)
        if spec.summary or notes:
            typer.echo(f"{'':<24}{spec.summary}" + (f" [{'; '.join(notes)}]" if notes else ""))


@app.command("run")
def run(
    kind: str = typer.Argument(..., help="Command name (set-frequency), class name or token ($FCS)"),
    args: Optional[List[str]] = typer.Argument(None, help="Arguments, positional or name=value"),
    channel: Optional[int] = typer.Option(None, "--channel", "-c", help="Channel id (default from config)"),
    port: Optional[str] = typer.Option(None, help="Explicit serial port path"),
    baud: Optional[int] = typer.Option(None, help="Baud rate"),
    timeout: Optional[float] = typer.Option(None, help="Transaction timeout (s)"),
    hardware: Optional[str] = typer.Option(None, help="Hardware model, e.g. ISC-2425-25+"),
    as_json: bool = typer.Option(False, "--json", help="Print the response as JSON"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Only print the request line"),
):
    from ..scheduler import Session

    try:
        spec = find(kind)
        command = build_command(spec, args or [], channel)
    except (UnknownCommandError, ValueError) as e:
        typer.secho(str(e).strip("'\""), fg="red")
        raise typer.Exit(code=2)

    config = SessionConfig.from_file(port=port, baud=baud, timeout_s=timeout, hardware=hardware)
    if dry_run:
        from ..common.types import Channel
        typer.echo(encode(command, Channel(config.channel)))
        return

    try:
        with Session.open(config) as session:
            response = session.send(command)
    except (SerialException, FileNotFoundError) as e:
        typer.secho(f"Serial error: {e}", fg="red")
        raise typer.Exit(code=1)
    except UnsupportedCommandError as e:
        typer.secho(str(e), fg="red")
        raise typer.Exit(code=2)

    if as_json:
        typer.echo(json.dumps(response.as_dict()))
    else:
        typer.secho(response.describe(), fg=None if response.ok else "red")
    if not response.ok:
        raise typer.Exit(code=1)
