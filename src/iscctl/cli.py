from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from .cmds import config as config_cmd
from .cmds import invoke as invoke_cmd
from . import monitor as monitor_app
from .common.config import FTDI_PID, FTDI_VID
from .common.log import configure_logging
from .transport.serial_link import list_devices

app = typer.Typer(help="Mini-Circuits ISC signal generator utilities")

app.add_typer(invoke_cmd.app, name="cmd")
app.add_typer(config_cmd.app, name="config")
app.add_typer(monitor_app.app, name="monitor")


@app.callback()
def main(
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="-v for INFO, -vv for DEBUG (TX/RX lines)"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also log to this file (rotated)"),
):
    level = {0: "WARNING", 1: "INFO"}.get(verbose, "DEBUG")
    configure_logging(level, log_file=log_file)


@app.command("ports")
def ports():
    """List serial ports; the FTDI bridge used by the ISC boards is marked with *."""
    devices = list_devices()
    if not devices:
        typer.secho("No serial ports found.", fg="yellow")
        raise typer.Exit(code=1)
    for d in devices:
        mark = "*" if (d["vid"], d["pid"]) == (FTDI_VID, FTDI_PID) else " "
        ident = f"{d['vid']:04x}:{d['pid']:04x}" if d["vid"] is not None and d["pid"] is not None else "----:----"
        typer.echo(f"{mark} {d['device']:<20} {ident}  {d['description']}")


if __name__ == "__main__":
    app()
