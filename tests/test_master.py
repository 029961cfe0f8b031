import pytest

from rtuframe.master import Master
from rtuframe.protocol import (
    BAD_BYTE_COUNT,
    CRC_MISMATCH,
    FUNCTION_MISMATCH,
    READ_HOLDING_REGISTERS,
    SLAVE_MISMATCH,
    TOO_MANY_REGISTERS,
    TRUNCATED,
    FrameError,
    ModbusError,
    crc16,
)

SLAVE_ID = 1


def _response(slave_id, registers):
    body = bytes([slave_id, READ_HOLDING_REGISTERS, len(registers) * 2])
    body += b"".join(value.to_bytes(2, "big") for value in registers)
    return body + crc16(body).to_bytes(2, "little")


@pytest.fixture
def master():
    m = Master()
    m.encode_read_request(SLAVE_ID, 0x0100, 2)
    return m


def test_encode_read_request_success():
    frame = Master().encode_read_request(SLAVE_ID, 0x0100, 2)
    assert len(frame) == 8
    assert frame[0] == SLAVE_ID
    assert frame[1] == READ_HOLDING_REGISTERS
    assert int.from_bytes(frame[2:4], "big") == 0x0100
    assert int.from_bytes(frame[4:6], "big") == 2
    assert crc16(frame) == 0


def test_encode_read_request_known_frame():
    assert Master().encode_read_request(1, 0, 1) == bytes.fromhex("010300000001840A")
    assert Master().encode_read_request(1, 0, 10) == bytes.fromhex("01030000000AC5CD")


def test_encode_read_request_remembers_slave():
    m = Master()
    m.encode_read_request(7, 0, 1)
    assert m.last_slave_id == 7


@pytest.mark.parametrize(
    "slave_id, addr, qty",
    [
        (SLAVE_ID, 0x0100, 0),
        (250, 0x0100, 2),
        (SLAVE_ID, 0xFFFF, 2),
        (SLAVE_ID, 0x10000, 1),
        (SLAVE_ID, -1, 1),
        (SLAVE_ID, 0, 126),
    ],
)
def test_encode_read_request_invalid(slave_id, addr, qty):
    m = Master()
    m.encode_read_request(3, 0, 1)
    with pytest.raises(ModbusError):
        m.encode_read_request(slave_id, addr, qty)
    assert m.last_slave_id == 3


def test_decode_read_response_success(master):
    frame = _response(SLAVE_ID, [1000, 5000])
    assert master.decode_read_response(frame, 2) == [1000, 5000]


def test_decode_read_response_ignores_trailing_bytes(master):
    buffer = bytearray(256)
    frame = _response(SLAVE_ID, [1000, 5000])
    buffer[: len(frame)] = frame
    assert master.decode_read_response(buffer, 2) == [1000, 5000]


def test_decode_read_response_round_trip_with_request(master):
    registers = list(range(0, 125 * 500, 500))
    assert master.decode_read_response(_response(SLAVE_ID, registers)) == registers


def test_decode_without_request_is_slave_mismatch():
    with pytest.raises(FrameError) as info:
        Master().decode_read_response(_response(SLAVE_ID, [1]), 1)
    assert info.value.reason == SLAVE_MISMATCH


def _expect(master, frame, reason, max_registers=2):
    with pytest.raises(FrameError) as info:
        master.decode_read_response(frame, max_registers)
    return info.value.reason == reason


def test_decode_wrong_slave(master):
    frame = bytearray(_response(SLAVE_ID, [1000, 5000]))
    frame[0] ^= 0xFF
    assert _expect(master, frame, SLAVE_MISMATCH)


def test_decode_wrong_function(master):
    frame = bytearray(_response(SLAVE_ID, [1000, 5000]))
    frame[1] = 0xFF
    assert _expect(master, frame, FUNCTION_MISMATCH)


def test_decode_bad_byte_count(master):
    frame = bytearray(256)
    good = _response(SLAVE_ID, [1000, 5000])
    frame[: len(good)] = good
    frame[2] = 255
    assert _expect(master, frame, BAD_BYTE_COUNT)


def test_decode_buffer_too_small(master):
    frame = _response(SLAVE_ID, [1000, 5000])
    assert _expect(master, frame[:2], TRUNCATED)
    assert _expect(master, frame[:-1], TRUNCATED)


def test_decode_output_too_small(master):
    frame = _response(SLAVE_ID, [1000, 5000])
    assert _expect(master, frame, TOO_MANY_REGISTERS, max_registers=1)


def test_decode_crc_mismatch(master):
    frame = bytearray(_response(SLAVE_ID, [1000, 5000]))
    frame[7] ^= 0xFF
    assert _expect(master, frame, CRC_MISMATCH)


def test_decode_corrupted_payload_is_crc_mismatch(master):
    frame = bytearray(_response(SLAVE_ID, [1000, 5000]))
    frame[4] ^= 0x01
    assert _expect(master, frame, CRC_MISMATCH)