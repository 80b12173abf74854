import threading

import pytest

from iscctl.cmds.base import Acknowledgement, DeviceFailure, Priority, TransportFailure
from iscctl.cmds.basic import GetFrequency, GetPATemp, GetPAVoltage, GetPhase, SetFrequency
from iscctl.cmds.system import SetUartBaudRate
from iscctl.common.config import SessionConfig
from iscctl.common.errors import SessionClosedError, TransportErrorKind, UnsupportedCommandError
from iscctl.scheduler import Session

REPLIES = {
    "$FCS": "OK,1",
    "$FCG": "OK,1,2450.0",
    "$PCG": "OK,1,90",
    "$PTG": "OK,1,31.0",
    "$PVG": "OK,1,28.0",
}


def _session(fake_serial, replies=REPLIES, **cfg):
    cfg.setdefault("timeout_s", 0.05)
    cfg.setdefault("tick_interval_s", 0.01)
    ser = fake_serial(replies)
    return Session(ser, SessionConfig(**cfg)), ser


def test_dispatch_order_is_priority_descending(fake_serial):
    session, ser = _session(fake_serial)
    session.enqueue(Priority.LOW, GetPATemp())
    session.enqueue(Priority.HIGH, SetFrequency(frequency=2500))
    session.enqueue(Priority.STANDARD, GetPhase())
    session.run_once()
    assert ser.lines == ["$FCS,1,2500", "$PCG,1", "$PTG,1"]


def test_equal_priorities_keep_arrival_order(fake_serial):
    session, ser = _session(fake_serial)
    for ch in (1, 2, 3):
        session.enqueue(Priority.STANDARD, GetFrequency(channel=ch))
    session.enqueue(Priority.TERMINATION, GetPhase())
    for ch in (4, 5):
        session.enqueue(Priority.STANDARD, GetFrequency(channel=ch))
    session.run_once()
    assert ser.lines == ["$PCG,1", "$FCG,1", "$FCG,2", "$FCG,3", "$FCG,4", "$FCG,5"]


def test_one_response_per_message_and_published(fake_serial):
    session, _ = _session(fake_serial)
    stream = session.subscribe()
    session.enqueue(Priority.STANDARD, GetFrequency())
    session.enqueue(Priority.STANDARD, SetFrequency())
    published = session.run_once()
    assert len(published) == 2
    assert stream.drain() == published
    assert session.run_once() == []


def test_failures_do_not_stop_the_batch(fake_serial):
    replies = dict(REPLIES, **{"$FCG": None, "$PCG": "ERR06"})
    session, ser = _session(fake_serial, replies)
    session.enqueue(Priority.HIGH, GetFrequency())
    session.enqueue(Priority.STANDARD, GetPhase())
    session.enqueue(Priority.LOW, GetPATemp())
    first, second, third = session.run_once()
    assert isinstance(first, TransportFailure)
    assert first.error is TransportErrorKind.TIMEOUT
    assert isinstance(first.command, GetFrequency)
    assert isinstance(second, DeviceFailure)
    assert third.ok and int(third.temperature) == 31


def test_no_reply_command_is_not_read(fake_serial):
    session, ser = _session(fake_serial)
    session.enqueue(Priority.STANDARD, SetUartBaudRate(baud_rate=9600))
    (resp,) = session.run_once()
    assert isinstance(resp, Acknowledgement)
    assert ser.lines == ["$UARTS,1,9600"]


def test_default_channel_from_config(fake_serial):
    session, ser = _session(fake_serial, channel=3)
    session.send(GetFrequency())
    assert ser.lines == ["$FCG,3"]


def test_busy_link_carries_batch_over(fake_serial):
    session, ser = _session(fake_serial, lock_timeout_s=0.01)
    session.enqueue(Priority.LOW, GetPATemp())
    session.enqueue(Priority.HIGH, GetPhase())
    with session._lock:
        assert session.run_once() == []
    assert session.pending == 2
    session.enqueue(Priority.HIGH, GetFrequency())
    session.run_once()
    assert ser.lines == ["$PCG,1", "$FCG,1", "$PTG,1"]
    assert session.pending == 0


def test_send_is_direct_and_not_published(fake_serial):
    session, ser = _session(fake_serial)
    stream = session.subscribe()
    resp = session.send(GetFrequency())
    assert int(resp.frequency) == 2450
    assert stream.get_nowait() is None


def test_background_loop_publishes(fake_serial):
    session, _ = _session(fake_serial)
    with session:
        stream = session.subscribe()
        session.start()
        assert session.running
        session.enqueue(Priority.STANDARD, GetFrequency())
        resp = stream.get(timeout=2)
        assert resp is not None and int(resp.frequency) == 2450
    assert not session.running


def test_send_from_dispatch_thread_is_refused(fake_serial):
    session, _ = _session(fake_serial)
    session._thread = threading.current_thread()
    with pytest.raises(RuntimeError):
        session.send(GetFrequency())


def test_closed_session_rejects_work(fake_serial):
    session, ser = _session(fake_serial)
    session.close()
    assert not ser.is_open
    with pytest.raises(SessionClosedError):
        session.enqueue(Priority.LOW, GetFrequency())
    with pytest.raises(SessionClosedError):
        session.send(GetFrequency())


def test_unsupported_command_policy(fake_serial, caplog):
    strict, _ = _session(fake_serial, hardware="ISC-2425-25+", unsupported_policy="reject")
    with pytest.raises(UnsupportedCommandError):
        strict.enqueue(Priority.STANDARD, GetPAVoltage())
    strict.enqueue(Priority.STANDARD, GetFrequency())

    lenient, ser = _session(fake_serial, hardware="ISC-2425-25+")
    lenient.enqueue(Priority.STANDARD, GetPAVoltage())
    assert "not implemented on ISC-2425-25+" in caplog.text
    (resp,) = lenient.run_once()
    assert resp.ok


def test_malformed_reply_mid_batch_keeps_dispatching(fake_serial):
    from iscctl.cmds.base import DecodeFailure
    from iscctl.cmds.manual import GetAttenuation

    session, ser = _session(fake_serial, dict(REPLIES, **{"$GCG": "OK,1,inf"}))
    stream = session.subscribe()
    session.enqueue(Priority.HIGH, GetFrequency())
    session.enqueue(Priority.STANDARD, GetAttenuation())
    session.enqueue(Priority.LOW, GetPATemp())
    first, second, third = session.run_once()
    assert first.ok
    assert isinstance(second, DecodeFailure)
    assert third.ok
    assert ser.lines == ["$FCG,1", "$GCG,1", "$PTG,1"]
    assert len(stream.drain()) == 3
    assert session.pending == 0


def test_unexpected_error_becomes_failure_response(fake_serial, monkeypatch):
    from iscctl import scheduler
    from iscctl.cmds.base import DecodeFailure

    real_execute = scheduler.execute

    def flaky_execute(ser, command, config):
        if isinstance(command, GetPhase):
            raise OverflowError("boom")
        return real_execute(ser, command, config)

    monkeypatch.setattr(scheduler, "execute", flaky_execute)
    session, ser = _session(fake_serial)
    session.enqueue(Priority.HIGH, GetFrequency())
    session.enqueue(Priority.STANDARD, GetPhase())
    session.enqueue(Priority.LOW, GetPATemp())
    first, second, third = session.run_once()
    assert isinstance(second, DecodeFailure)
    assert second.command == GetPhase()
    assert "boom" in second.reason
    assert third.ok
    assert ser.lines == ["$FCG,1", "$PTG,1"]

    sent = session.send(GetPhase())
    assert isinstance(sent, DecodeFailure)
