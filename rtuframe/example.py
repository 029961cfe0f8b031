"""A walk through one request and one response, printed step by step."""

from __future__ import annotations

import argparse
import sys
from typing import TextIO

from rtuframe.master import Master
from rtuframe.protocol import ModbusError
from rtuframe.slave import Slave, encode_read_response


def _hex(frame: bytes) -> str:
    return " ".join(f"{byte:02X}" for byte in frame)


def run_example(out: TextIO) -> None:
    """Encode and decode a read request and its response, writing to ``out``."""
    print("=== Modbus Example ===", file=out)

    req_addr = 0x0258
    req_qty = 2
    slave_id = 1

    master = Master()
    slave = Slave()
    slave.set_slave_id(slave_id)

    request = master.encode_read_request(slave_id, req_addr, req_qty)
    print(
        f"[INFO] Encoded Read Request (slave={slave_id}, addr=0x{req_addr:04X}, qty={req_qty}):",
        file=out,
    )
    print(_hex(request), end="\n\n", file=out)

    decoded = slave.decode_read_request(request)
    print(
        f"[INFO] Decoded Read Request: slave={decoded.slave_id}, "
        f"starting_address=0x{decoded.address:04X}, qty={decoded.quantity}",
        end="\n\n",
        file=out,
    )

    registers = [0x03E8, 0x1388]
    response = encode_read_response(slave_id, registers)
    print(f"[INFO] Encoded Read Response ({len(registers)} registers):", file=out)
    print(_hex(response), end="\n\n", file=out)

    values = master.decode_read_response(response, len(registers))
    print(f"[INFO] Decoded {len(values)} registers:", file=out)
    for index, value in enumerate(values):
        print(f"  Reg[{index}] = {value} (0x{value:04X})", file=out)
    print(file=out)

    print("=== Example Finished Successfully ===", file=out)


def main(argv: list[str] | None = None) -> int:
    """Run the example on standard output; return the exit status."""
    parser = argparse.ArgumentParser(
        description="Encode and decode a Modbus read request and response."
    )
    parser.parse_args(argv)
    try:
        run_example(sys.stdout)
    except ModbusError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())