"""A TCP slave that serves dummy registers, and a master that queries it."""

from __future__ import annotations

import argparse
import socket
import sys
from collections.abc import Callable
from typing import TextIO

from rtuframe.master import Master
from rtuframe.protocol import ModbusError, FrameError
from rtuframe.slave import Slave, encode_read_response

PORT = 5020
"""Default TCP port for the simulation."""

BUFFER_SIZE = 256
"""Largest number of bytes read from the socket at once."""

MASTER_SLAVE_ID = 1
"""Slave id the simulated master addresses."""


def serve_slave(
    host: str = "0.0.0.0",
    port: int = PORT,
    slave_id: int = 1,
    out: TextIO | None = None,
    ready: Callable[[int], None] | None = None,
) -> int:
    """Accept one connection and answer its read requests until it closes.

    Each requested register holds its own address as dummy data. ``ready``,
    if given, is called with the bound port once the socket listens.
    Returns the number of requests answered.
    """
    out = out if out is not None else sys.stdout
    slave = Slave(slave_id)
    served = 0

    with socket.create_server((host, port), backlog=1) as server:
        bound_port = server.getsockname()[1]
        print(f"[SLAVE] Listening on port {bound_port}...", file=out, flush=True)
        if ready is not None:
            ready(bound_port)

        conn, _ = server.accept()
        with conn:
            while True:
                data = conn.recv(BUFFER_SIZE)
                if not data:
                    break
                try:
                    request = slave.decode_read_request(data)
                except FrameError as exc:
                    print(f"[SLAVE] Invalid request ({exc.reason})", file=out, flush=True)
                    continue

                print(
                    f"[SLAVE] Received request: start={request.address} qty={request.quantity}",
                    file=out,
                    flush=True,
                )
                registers = [
                    (request.address + offset) & 0xFFFF for offset in range(request.quantity)
                ]
                response = encode_read_response(request.slave_id, registers)
                conn.sendall(response)
                served += 1
                print(f"[SLAVE] Sent response ({len(response)} bytes)", file=out, flush=True)

    return served


def run_master(
    host: str = "127.0.0.1",
    port: int = PORT,
    start_addr: int = 100,
    qty: int = 5,
    out: TextIO | None = None,
) -> list[int]:
    """Send one read request to a slave and return the registers it sends back.

    Raises ConnectionError if the slave closes without answering and
    FrameError if the answer is not a valid response.
    """
    out = out if out is not None else sys.stdout
    master = Master()
    request = master.encode_read_request(MASTER_SLAVE_ID, start_addr, qty)

    with socket.create_connection((host, port)) as conn:
        conn.sendall(request)
        print(f"[MASTER] Sent request: start={start_addr} qty={qty}", file=out, flush=True)
        reply = conn.recv(BUFFER_SIZE)

    if not reply:
        raise ConnectionError("slave closed the connection without a response")

    registers = master.decode_read_response(reply, qty)
    print(f"[MASTER] Received {len(registers)} registers:", file=out)
    for index, value in enumerate(registers):
        print(f"  Reg[{index}] = {value}", file=out)
    out.flush()
    return registers


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Modbus read simulation over TCP.")
    roles = parser.add_subparsers(dest="role", required=True)

    slave = roles.add_parser("slave", help="serve dummy registers to one master")
    slave.add_argument("--host", default="0.0.0.0")
    slave.add_argument("--port", type=int, default=PORT)
    slave.add_argument("--slave-id", type=int, default=1)

    master = roles.add_parser("master", help="read registers from a slave")
    master.add_argument("--host", default="127.0.0.1")
    master.add_argument("--port", type=int, default=PORT)
    master.add_argument("--start", type=int, default=100)
    master.add_argument("--qty", type=int, default=5)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the slave or the master side; return the exit status."""
    args = _parser().parse_args(argv)
    if args.role == "slave":
        try:
            serve_slave(args.host, args.port, args.slave_id, sys.stdout)
        except (OSError, ModbusError) as exc:
            print(f"[SLAVE] {exc}", file=sys.stderr)
            return 1
        return 0

    try:
        run_master(args.host, args.port, args.start, args.qty, sys.stdout)
    except FrameError as exc:
        print(f"[MASTER] Failed to decode response ({exc.reason})", file=sys.stderr)
        return 1
    except (OSError, ModbusError) as exc:
        print(f"[MASTER] {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())