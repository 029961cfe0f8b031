"""The requesting side: build read requests and check the responses."""

from __future__ import annotations

import struct

from rtuframe.protocol import (
    BAD_BYTE_COUNT,
    CRC_MISMATCH,
    CRC_SIZE,
    FUNCTION_MISMATCH,
    MAX_REGISTERS,
    READ_HOLDING_REGISTERS,
    RESPONSE_HEADER_SIZE,
    SLAVE_MISMATCH,
    TOO_MANY_REGISTERS,
    TRUNCATED,
    FrameError,
    ModbusError,
    crc16,
    is_valid_address_range,
    is_valid_byte_count,
    is_valid_quantity,
    is_valid_slave_id,
)

_REQUEST = struct.Struct(">BBHH")


class Master:
    """A Modbus master that remembers which slave it last addressed."""

    def __init__(self) -> None:
        self.last_slave_id = 0

    def encode_read_request(self, slave_id: int, addr: int, qty: int) -> bytes:
        """Build a "Read Holding Registers" request frame with its CRC.

        Raises ModbusError if the slave, address or quantity is invalid.
        """
        if not 0 <= addr <= 0xFFFF:
            raise ModbusError(f"register address out of range: {addr}")
        if not is_valid_quantity(qty):
            raise ModbusError(f"invalid register quantity: {qty}")
        if not is_valid_slave_id(slave_id):
            raise ModbusError(f"invalid slave id: {slave_id}")
        if not is_valid_address_range(addr, qty):
            raise ModbusError(f"register range {addr}+{qty} exceeds 0xFFFF")

        body = _REQUEST.pack(slave_id, READ_HOLDING_REGISTERS, addr, qty)
        frame = body + crc16(body).to_bytes(CRC_SIZE, "little")
        self.last_slave_id = slave_id
        return frame

    def decode_read_response(
        self, frame: bytes | bytearray | memoryview, max_registers: int = MAX_REGISTERS
    ) -> list[int]:
        """Return the register values carried by a response frame.

        Bytes after the frame's CRC are ignored. Raises FrameError when the
        response is from another slave, has the wrong function code or byte
        count, is cut short, holds more than ``max_registers`` values or
        fails its CRC.
        """
        data = bytes(frame)
        if len(data) < RESPONSE_HEADER_SIZE:
            raise FrameError(TRUNCATED)

        slave_id, function, byte_count = data[:RESPONSE_HEADER_SIZE]
        if slave_id != self.last_slave_id:
            raise FrameError(
                SLAVE_MISMATCH,
                f"response from slave {slave_id}, expected {self.last_slave_id}",
            )
        if function != READ_HOLDING_REGISTERS:
            raise FrameError(FUNCTION_MISMATCH, f"unexpected function code 0x{function:02X}")
        if not is_valid_byte_count(byte_count):
            raise FrameError(BAD_BYTE_COUNT, f"invalid byte count {byte_count}")

        payload_end = RESPONSE_HEADER_SIZE + byte_count
        if len(data) < payload_end + CRC_SIZE:
            raise FrameError(TRUNCATED)

        count = byte_count // 2
        if max_registers < count:
            raise FrameError(
                TOO_MANY_REGISTERS,
                f"response holds {count} registers, room for {max_registers}",
            )

        received = int.from_bytes(data[payload_end:payload_end + CRC_SIZE], "little")
        if crc16(data[:payload_end]) != received:
            raise FrameError(CRC_MISMATCH)

        payload = data[RESPONSE_HEADER_SIZE:RESPONSE_HEADER_SIZE + count * 2]
        return [value for (value,) in struct.iter_unpack(">H", payload)]