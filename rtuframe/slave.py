"""The responding side: check incoming read requests and build responses."""

from __future__ import annotations

import struct
from collections.abc import Iterable

from rtuframe.protocol import (
    BROADCAST_SLAVE_ID,
    CRC_MISMATCH,
    CRC_SIZE,
    FUNCTION_MISMATCH,
    INVALID_REQUEST,
    NOT_ADDRESSED,
    READ_HOLDING_REGISTERS,
    REQUEST_SIZE,
    TRUNCATED,
    FrameError,
    ModbusError,
    ReadRequest,
    crc16,
    is_valid_address_range,
    is_valid_quantity,
    is_valid_slave_id,
)

_REQUEST = struct.Struct(">BBHH")
_HEADER = struct.Struct(">BBB")


def encode_read_response(slave_id: int, registers: Iterable[int]) -> bytes:
    """Build a "Read Holding Registers" response frame with its CRC.

    Raises ModbusError if the slave id, the number of registers or a
    register value is invalid.
    """
    values = list(registers)
    if not is_valid_quantity(len(values)):
        raise ModbusError(f"invalid register quantity: {len(values)}")
    if not is_valid_slave_id(slave_id):
        raise ModbusError(f"invalid slave id: {slave_id}")
    for value in values:
        if not 0 <= value <= 0xFFFF:
            raise ModbusError(f"register value out of range: {value}")

    body = _HEADER.pack(slave_id, READ_HOLDING_REGISTERS, len(values) * 2)
    body += struct.pack(f">{len(values)}H", *values)
    return body + crc16(body).to_bytes(CRC_SIZE, "little")


class Slave:
    """A Modbus slave that answers requests for its own id or broadcasts."""

    def __init__(self, slave_id: int | None = None) -> None:
        self.slave_id = BROADCAST_SLAVE_ID
        if slave_id is not None:
            self.set_slave_id(slave_id)

    def set_slave_id(self, slave_id: int) -> None:
        """Set the id this device answers to (1..247).

        Raises ModbusError for an invalid id or the broadcast id.
        """
        if not is_valid_slave_id(slave_id) or slave_id == BROADCAST_SLAVE_ID:
            raise ModbusError(f"invalid device slave id: {slave_id}")
        self.slave_id = slave_id

    def decode_read_request(self, frame: bytes | bytearray | memoryview) -> ReadRequest:
        """Check a request frame and return what it asks for.

        Bytes after the CRC are ignored. Raises FrameError when the frame is
        cut short, asks for an invalid range, is meant for another slave,
        has the wrong function code or fails its CRC.
        """
        data = bytes(frame)
        if len(data) < REQUEST_SIZE + CRC_SIZE:
            raise FrameError(TRUNCATED)

        slave_id, function, address, quantity = _REQUEST.unpack_from(data)
        if (
            not is_valid_quantity(quantity)
            or not is_valid_slave_id(slave_id)
            or not is_valid_address_range(address, quantity)
        ):
            raise FrameError(
                INVALID_REQUEST,
                f"invalid request: slave {slave_id}, address {address}, quantity {quantity}",
            )
        if slave_id not in (self.slave_id, BROADCAST_SLAVE_ID):
            raise FrameError(NOT_ADDRESSED, f"request for slave {slave_id}")
        if function != READ_HOLDING_REGISTERS:
            raise FrameError(FUNCTION_MISMATCH, f"unexpected function code 0x{function:02X}")

        received = int.from_bytes(data[REQUEST_SIZE:REQUEST_SIZE + CRC_SIZE], "little")
        if crc16(data[:REQUEST_SIZE]) != received:
            raise FrameError(CRC_MISMATCH)

        return ReadRequest(slave_id=slave_id, address=address, quantity=quantity)