from __future__ import annotations

import typer
from ..common.config import set_default_port, get_default_port, clear_default_port, load_config, CONFIG_FILE

app = typer.Typer(help="Configure iscctl defaults (saved in ~/.iscctl/config.toml).")

@app.command("set-port")
def set_port(
    port: str = typer.Argument(..., help="Serial port path, e.g. /dev/ttyUSB0 or COM5"),
):
    set_default_port(port)
    typer.secho(f"Saved default port: {port}\nConfig file: {CONFIG_FILE}", fg="green")

@app.command("show")
def show():
    cfg = load_config()
    if not cfg:
        typer.secho(f"No settings saved ({CONFIG_FILE}).", fg="yellow")
        return
    for section, values in cfg.items():
        typer.echo(f"[{section}]")
        for key, val in values.items():
            typer.echo(f"{key} = {val}")
    typer.echo(f"config file: {CONFIG_FILE}")

@app.command("clear-port")
def clear():
    if get_default_port() is None:
        typer.secho("No default port to clear.", fg="yellow")
        raise typer.Exit(code=0)
    clear_default_port()
    typer.secho("Cleared default port.", fg="green")
