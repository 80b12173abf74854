"""``iscctl monitor``: keep the link open and poll the generator every tick."""

from __future__ import annotations

import json
import logging
import signal
import threading
from typing import List, Optional

import typer
from serial import SerialException

from .cmds.base import Command, Priority
from .cmds.basic import GetFrequency, GetPAPowerWatt, GetPATemp
from .cmds.faults import GetStatus
from .common.config import SessionConfig
from .scheduler import Session

logger = logging.getLogger(__name__)

app = typer.Typer(help="Poll status, power and temperature through the priority queue.")

'''
How to use
iscctl monitor start --port /dev/ttyUSB0 --interval 1 --count 10
'''

POLL: List[type] = [GetStatus, GetPAPowerWatt, GetPATemp, GetFrequency]


def poll_commands(channel: Optional[int] = None) -> List[Command]:
    return [kind(channel=channel) for kind in POLL]


def run_monitor(session: Session, polls: int, stop_evt: threading.Event, as_json: bool = False) -> int:
    """Enqueue one round of polls per tick and print whatever is published.

    Stops after *polls* rounds (0 = until *stop_evt*). Returns the number of
    error Responses seen.
    """
    errors = 0
    rounds = 0
    with session.subscribe() as stream:
        session.start()
        while not stop_evt.is_set() and (polls == 0 or rounds < polls):
            for cmd in poll_commands():
                session.enqueue(Priority.LOW, cmd)
            rounds += 1
            for _ in POLL:
                response = stream.get(timeout=session.config.tick_interval_s + session.config.timeout_s * len(POLL))
                if response is None:
                    break
                if not response.ok:
                    errors += 1
                if as_json:
                    typer.echo(json.dumps(response.as_dict()))
                else:
                    typer.echo(response.describe())
        if stream.dropped:
            logger.warning("Dropped %d response(s) while printing", stream.dropped)
    session.stop()
    return errors


@app.command("start")
def start(
    port: Optional[str] = typer.Option(None, "--port", help="Serial port"),
    baud: Optional[int] = typer.Option(None, "--baud", help="Baud rate"),
    interval: Optional[float] = typer.Option(None, "--interval", help="Tick interval (s)"),
    count: int = typer.Option(0, "--count", help="Number of poll rounds (0 = until Ctrl-C)"),
    as_json: bool = typer.Option(False, "--json", help="One JSON object per response"),
):
    config = SessionConfig.from_file(port=port, baud=baud, tick_interval_s=interval)
    stop_evt = threading.Event()
    # Ctrl-C finishes the current round, then the session closes cleanly
    previous = signal.signal(signal.SIGINT, lambda signum, frame: stop_evt.set())
    try:
        with Session.open(config) as session:
            errors = run_monitor(session, count, stop_evt, as_json=as_json)
    except (SerialException, FileNotFoundError) as e:
        typer.secho(f"Serial error: {e}", fg="red")
        raise typer.Exit(code=1)
    finally:
        signal.signal(signal.SIGINT, previous)
    if stop_evt.is_set():
        typer.echo("\n[monitor] stopped")
    if errors:
        raise typer.Exit(code=1)
