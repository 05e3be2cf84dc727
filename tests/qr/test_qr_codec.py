import pytest

from qr_attendance.core.exceptions import ConfigurationError
from qr_attendance.qr.codec import JsonQrCodec, PipeQrCodec, StudentIdentity, build_codec


@pytest.mark.parametrize(
    "identity",
    [
        StudentIdentity("S001", "Alice"),
        StudentIdentity("007", "Bond"),
        StudentIdentity("2024-CS-11", "Nguyễn Văn A"),
    ],
)
def test_pipe_roundtrip_keeps_ids_as_text(identity):
    codec = PipeQrCodec()
    assert codec.decode(codec.encode(identity)) == identity


def test_pipe_encode_trims_fields():
    assert PipeQrCodec().encode(StudentIdentity("  S001 ", " Alice  ")) == "S001|Alice"


def test_pipe_decode_trims_parts():
    assert PipeQrCodec().decode("  S001 |  Alice ") == StudentIdentity("S001", "Alice")


@pytest.mark.parametrize(
    "text",
    ["", "   ", "a|b|c", "not a valid payload", "|Alice", "S001|", " | ", None, 42, b"S001|Alice"],
)
def test_pipe_decode_rejects_malformed_input(text):
    assert PipeQrCodec().decode(text) is None


def test_pipe_name_with_separator_does_not_roundtrip():
    codec = PipeQrCodec()
    assert codec.decode(codec.encode(StudentIdentity("S1", "A|B"))) is None


def test_json_roundtrip_and_prefix_check():
    codec = JsonQrCodec("QR_ATTENDANCE")
    payload = codec.encode(StudentIdentity("007", "Bond"))

    assert codec.decode(payload) == StudentIdentity("007", "Bond")
    assert JsonQrCodec("OTHER").decode(payload) is None


@pytest.mark.parametrize(
    "text",
    [
        "S001|Alice",
        "[]",
        '{"p":"QR_ATTENDANCE","id":"","name":"x"}',
        '{"p":"QR_ATTENDANCE","id":"1"}',
        None,
    ],
)
def test_json_decode_rejects_malformed_input(text):
    assert JsonQrCodec().decode(text) is None


def test_json_decode_numeric_id_becomes_text():
    assert JsonQrCodec().decode('{"p":"QR_ATTENDANCE","id":12,"name":"Bob"}') == StudentIdentity("12", "Bob")


def test_build_codec_selects_format():
    assert isinstance(build_codec("pipe"), PipeQrCodec)
    assert isinstance(build_codec(" JSON "), JsonQrCodec)


def test_build_codec_unknown_format():
    with pytest.raises(ConfigurationError):
        build_codec("base64")


def test_json_decode_accepts_zero_id():
    assert JsonQrCodec().decode('{"p":"QR_ATTENDANCE","id":0,"name":"Zed"}') == StudentIdentity("0", "Zed")


@pytest.mark.parametrize(
    "text",
    [
        '{"p":"QR_ATTENDANCE","id":{"n":1},"name":"Bob"}',
        '{"p":"QR_ATTENDANCE","id":["1"],"name":"Bob"}',
        '{"p":"QR_ATTENDANCE","id":true,"name":"Bob"}',
        '{"p":"QR_ATTENDANCE","id":"1","name":null}',
        '{"p":"QR_ATTENDANCE","id":"1","name":["Bob"]}',
    ],
)
def test_json_decode_rejects_non_scalar_fields(text):
    assert JsonQrCodec().decode(text) is None
