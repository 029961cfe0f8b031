"""Modbus RTU constants, CRC-16 and the checks shared by master and slave."""

from __future__ import annotations

from dataclasses import dataclass

MAX_REGISTERS = 125
"""Largest number of registers one frame may carry."""

MAX_SLAVE_ID = 247
"""Largest valid slave address."""

READ_HOLDING_REGISTERS = 0x03
"""Function code for "Read Holding Registers"."""

BROADCAST_SLAVE_ID = 0
"""Slave address that every device accepts."""

REQUEST_SIZE = 6
"""Bytes in a read request before its CRC: slave, function, address, quantity."""

RESPONSE_HEADER_SIZE = 3
"""Bytes in a read response header: slave, function, byte count."""

CRC_SIZE = 2
"""Bytes of CRC at the end of every frame (low byte first)."""

# Reasons carried by FrameError.
INVALID_ARGUMENT = "invalid_argument"
TRUNCATED = "truncated"
INVALID_REQUEST = "invalid_request"
NOT_ADDRESSED = "not_addressed"
SLAVE_MISMATCH = "slave_mismatch"
FUNCTION_MISMATCH = "function_mismatch"
BAD_BYTE_COUNT = "bad_byte_count"
TOO_MANY_REGISTERS = "too_many_registers"
CRC_MISMATCH = "crc_mismatch"


class ModbusError(ValueError):
    """Raised when values cannot be turned into a valid Modbus frame."""


class FrameError(ModbusError):
    """Raised when a received frame is malformed or not meant for us.

    The ``reason`` attribute holds one of this module's reason constants.
    """

    def __init__(self, reason: str, message: str | None = None) -> None:
        super().__init__(message or reason.replace("_", " "))
        self.reason = reason


@dataclass(frozen=True)
class ReadRequest:
    """A decoded "Read Holding Registers" request."""

    slave_id: int
    address: int
    quantity: int


def crc16(data: bytes | bytearray | memoryview) -> int:
    """Return the Modbus RTU CRC-16 of ``data`` (0xFFFF for no data)."""
    crc = 0xFFFF
    for byte in bytes(data):
        crc ^= byte
        for _ in range(8):
            if crc & 0x0001:
                crc = (crc >> 1) ^ 0xA001
            else:
                crc >>= 1
    return crc


def is_valid_quantity(qty: int) -> bool:
    """True if ``qty`` registers may be read in one frame."""
    return 1 <= qty <= MAX_REGISTERS


def is_valid_byte_count(byte_count: int) -> bool:
    """True if ``byte_count`` is an acceptable register payload size."""
    return 2 <= byte_count <= MAX_REGISTERS * 2


def is_valid_slave_id(slave: int) -> bool:
    """True if ``slave`` is a slave address, the broadcast address included."""
    return 0 <= slave <= MAX_SLAVE_ID


def is_valid_address_range(addr: int, qty: int) -> bool:
    """True if ``qty`` registers starting at ``addr`` stay within 0xFFFF."""
    return addr + qty - 1 <= 0xFFFF