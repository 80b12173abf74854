from iscctl.cmds.base import Acknowledgement, DecodeFailure, DeviceFailure
from iscctl.cmds.basic import (
    FrequencyReading,
    GetFrequency,
    GetPAPowerWatt,
    GetRFOutput,
    SetFrequency,
    SetPAPowerSetpointWatt,
    SetRFOutput,
)
from iscctl.cmds.codec import decode, encode
from iscctl.cmds.dll import GetDLLConfig, PerformSweepDBM, SetDLLConfig
from iscctl.cmds.faults import GetStatus
from iscctl.cmds.information import GetIdentity, GetVersion
from iscctl.cmds.manual import SetAttenuation
from iscctl.cmds.pwm import GetPWMDutyCycle, SetPWMFrequency, SetTimedRFEnable
from iscctl.cmds.soa import GetSOAConfig, SetSOAConfig
from iscctl.cmds.system import GetChannelID, GetClockSource, SetUartBaudRate
from iscctl.common.errors import DeviceErrorKind
from iscctl.common.status import StatusCode
from iscctl.common.types import Channel, ClockSource, Frequency, SOAType, Watt


def test_encode_set_frequency():
    assert encode(SetFrequency(channel=1, frequency=2500)) == "$FCS,1,2500"


def test_encode_uses_default_channel():
    assert encode(GetFrequency()) == "$FCG,1"
    assert encode(GetFrequency(), Channel(4)) == "$FCG,4"
    assert encode(GetFrequency(channel=2), Channel(4)) == "$FCG,2"


def test_encode_argument_formatting():
    assert encode(SetPAPowerSetpointWatt()) == "$PWRS,1,250.0"
    assert encode(SetRFOutput(enabled=True)) == "$ECS,1,1"
    assert encode(SetAttenuation()) == "$GCS,1,7.0"
    assert encode(SetDLLConfig()) == "$DLCS,1,2400,2500,2410,5,0.5,25"
    assert encode(SetSOAConfig(soa_type=SOAType.REFLECTION, enabled=False)) == "$SOA,1,2,0"
    assert encode(SetUartBaudRate(baud_rate=9600)) == "$UARTS,1,9600"


def test_encode_fixed_extra_fields():
    assert encode(PerformSweepDBM()) == "$SWPD,1,2400,2500,10,10.0,1"
    assert encode(SetPWMFrequency()) == "$DCFS,1,1200,0"
    assert encode(SetTimedRFEnable(duration=500)) == "$ECST,1,1,500"


def test_encode_unaddressed_command():
    assert encode(GetChannelID(channel=5)) == "$CHANG"


def test_decode_get_frequency():
    cmd = GetFrequency(channel=1)
    resp = decode("OK,1,2450.0", cmd)
    assert isinstance(resp, FrequencyReading)
    assert resp.ok
    assert resp.frequency == Frequency(2450)
    assert resp.command is cmd


def test_decode_err01_is_reserved():
    resp = decode("ERR01", GetFrequency())
    assert isinstance(resp, DeviceFailure)
    assert resp.error.kind is DeviceErrorKind.RESERVED
    assert not resp.ok


def test_device_error_takes_precedence():
    resp = decode("OK,1,2450,ERR06", GetFrequency())
    assert isinstance(resp, DeviceFailure)
    assert resp.error.kind is DeviceErrorKind.SYSTEM_BUSY


def test_device_error_invalid_argument_position():
    resp = decode("ERR13", SetFrequency())
    assert resp.error.kind is DeviceErrorKind.INVALID_ARG
    assert resp.error.argument == 3


def test_device_error_failed_execution_and_unknown():
    assert decode("ERR7E", SetFrequency()).error.kind is DeviceErrorKind.FAILED_EXECUTION
    unknown = decode("ERR99", SetFrequency()).error
    assert unknown.kind is DeviceErrorKind.UNKNOWN
    assert unknown.code == "99"


def test_wrong_field_count_is_decode_error():
    resp = decode("OK,1", GetFrequency())
    assert isinstance(resp, DecodeFailure)
    assert "expected 3" in resp.reason


def test_malformed_replies_never_raise():
    for raw in ("", "   ", "OK,1,abc", "OK,1,2,3,4,5", "garbage", None):
        resp = decode(raw, GetPAPowerWatt())
        assert isinstance(resp, DecodeFailure)
    assert isinstance(decode("OK,1,7", GetRFOutput()), DecodeFailure)


def test_set_commands_acknowledge():
    resp = decode("OK,1", SetFrequency())
    assert isinstance(resp, Acknowledgement)
    assert resp.raw == "OK,1"
    assert isinstance(decode("", SetFrequency()), DecodeFailure)


def test_no_reply_command_acknowledges_empty():
    resp = decode("", SetUartBaudRate())
    assert isinstance(resp, Acknowledgement)
    assert resp.ok


def test_decode_power_pair():
    resp = decode("OK,1,250.4,3.1", GetPAPowerWatt())
    assert resp.forward == Watt(250.4)
    assert resp.reflected == Watt(3.1)


def test_decode_status_hex():
    resp = decode("OK,1,0,24", GetStatus())
    assert resp.code == 0x24
    assert resp.flags == (StatusCode.SHUTDOWN_PA_TEMPERATURE, StatusCode.RESET_DETECTED)
    assert not resp.healthy
    assert decode("OK,1,0,0", GetStatus()).describe() == "No errors or warning"
    assert isinstance(decode("OK,1,0,zz", GetStatus()), DecodeFailure)


def test_decode_identity():
    resp = decode("OK,1,Mini-Circuits ISC-2425-25+,100012345", GetIdentity())
    assert (resp.manufacturer, resp.board, resp.serial_number) == ("Mini-Circuits", "ISC-2425-25+", "100012345")
    assert isinstance(decode("OK,1,MiniCircuits,1", GetIdentity()), DecodeFailure)


def test_decode_version_with_and_without_hotfix():
    plain = decode("OK,1,1,2,3,4,2023-01-10,12:00:00", GetVersion())
    assert (plain.manufacturer_id, plain.major, plain.minor, plain.build, plain.hotfix) == (1, 2, 3, 4, None)
    assert plain.date == "2023-01-10"
    fixed = decode("OK,1,1,2,3,4,5,2023-01-10,12:00:00", GetVersion())
    assert fixed.hotfix == 5
    assert fixed.time == "12:00:00"


def test_decode_dll_config():
    resp = decode("OK,1,2400,2500,2410,5,0.5,25", GetDLLConfig())
    assert int(resp.lower_frequency) == 2400
    assert int(resp.step_frequency) == 5
    assert float(resp.threshold) == 0.5
    assert int(resp.main_delay) == 25


def test_decode_soa_config_skips_reserved_field():
    resp = decode("OK,1,1,9,0,1,0,1,0,1", GetSOAConfig())
    assert resp.temperature is True
    assert resp.reflection is False
    assert resp.external_watchdog is True
    assert resp.current is True


def test_decode_pwm_uses_first_and_last_field():
    resp = decode("OK,1,1200,0,0,0,0,0,0,0,40", GetPWMDutyCycle())
    assert int(resp.frequency) == 1200
    assert int(resp.duty_cycle) == 40


def test_decode_channel_id_and_clock_source():
    assert int(decode("OK,3", GetChannelID()).channel_id) == 3
    assert decode("OK,1,1", GetClockSource()).source is ClockSource.MASTER


def test_as_dict_is_plain_data():
    d = decode("OK,1,0,24", GetStatus()).as_dict()
    assert d["kind"] == "Status"
    assert d["command"] == "GetStatus"
    assert d["flags"] == ["shutdown_pa_temperature", "reset_detected"]


def test_non_finite_fields_are_decode_errors():
    from iscctl.cmds.manual import GetAttenuation

    for raw in ("OK,1,inf", "OK,1,-inf", "OK,1,nan"):
        assert isinstance(decode(raw, GetAttenuation()), DecodeFailure)
    assert isinstance(decode("OK,1,1e999", GetFrequency()), DecodeFailure)


def test_clear_errors_echo_is_not_a_device_error():
    from iscctl.cmds.faults import ClearErrors

    resp = decode("$ERRC,1,OK", ClearErrors())
    assert isinstance(resp, Acknowledgement)
    assert resp.raw == "$ERRC,1,OK"

    failed = decode("$ERRC,1,ERR05", ClearErrors())
    assert isinstance(failed, DeviceFailure)
    assert failed.error.kind is DeviceErrorKind.WRONG_MODE


def test_reply_must_start_with_ok():
    resp = decode("XX,1,2450", GetFrequency())
    assert isinstance(resp, DecodeFailure)
    assert "OK" in resp.reason
