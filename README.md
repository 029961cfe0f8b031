# rtuframe

Build and parse Modbus RTU frames for the *Read Holding Registers*
function (code `0x03`), for both sides of the link:

- a **master** encodes read requests and decodes the slave's responses;
- a **slave** decodes incoming requests and encodes responses.

Every frame ends with the standard Modbus RTU CRC-16, low byte first.
Slave ids (0 to 247), register quantities (1 to 125), byte counts and
address ranges are checked when frames are built and when they are read.

The package has no runtime dependencies.

## Installation

```
pip install rtuframe
```

## Master side

```python
from rtuframe.master import Master

master = Master()
request = master.encode_read_request(1, 0x0258, 2)   # bytes, CRC included

# ... send `request`, receive `response` ...

registers = master.decode_read_response(response, 2)  # list of ints
```

`encode_read_request` raises `ModbusError` for an invalid slave id,
quantity or address range, and otherwise remembers the slave id in
`master.last_slave_id` (0 until the first request).

`decode_read_response(frame, max_registers=125)` accepts only a response
from the slave the most recent request went to. Bytes after the frame's
CRC are ignored. It raises `FrameError` when the response comes from
another slave, has the wrong function code or byte count, is cut short,
holds more than `max_registers` values, or fails its CRC.

## Slave side

```python
from rtuframe.slave import Slave, encode_read_response

slave = Slave(1)              # or Slave() and then slave.set_slave_id(1)

request = slave.decode_read_request(frame)
request.slave_id, request.address, request.quantity

response = encode_read_response(1, [1000, 5000])
```

`set_slave_id` takes an id from 1 to 247 and raises `ModbusError` for
anything else, the broadcast id 0 included.

`decode_read_request` accepts frames addressed to the device's id or to
the broadcast id 0, ignores bytes after the CRC, and returns a frozen
`ReadRequest`. It raises `FrameError` when the frame is too short, asks
for an invalid range, is meant for another slave, has the wrong function
code or fails its CRC.

`encode_read_response` raises `ModbusError` for an invalid slave id, for
fewer than 1 or more than 125 registers, or for a value outside
0..0xFFFF.

## Shared pieces

`rtuframe.protocol` holds:

- `crc16(data)`: the Modbus RTU CRC-16 of a bytes-like object, `0xFFFF`
  for empty input;
- `is_valid_quantity`, `is_valid_byte_count`, `is_valid_slave_id` and
  `is_valid_address_range`: the range checks both sides apply;
- the constants `MAX_REGISTERS`, `MAX_SLAVE_ID`, `READ_HOLDING_REGISTERS`,
  `BROADCAST_SLAVE_ID`, `REQUEST_SIZE`, `RESPONSE_HEADER_SIZE` and
  `CRC_SIZE`;
- `ModbusError`, a `ValueError`, raised for values that cannot make a
  valid frame, and its subclass `FrameError`, raised for received frames
  that are malformed or not meant for this side. A `FrameError` carries a
  `reason`, one of `TRUNCATED`, `INVALID_REQUEST`, `NOT_ADDRESSED`,
  `SLAVE_MISMATCH`, `FUNCTION_MISMATCH`, `BAD_BYTE_COUNT`,
  `TOO_MANY_REGISTERS` or `CRC_MISMATCH`.

## Commands

A walk-through that encodes and decodes one request and one response and
prints each frame in hex:

```
rtuframe-example
```

A small TCP simulation. The slave accepts one connection, answers each
read request with registers that hold their own addresses, and exits when
the master disconnects:

```
rtuframe-sim slave --host 0.0.0.0 --port 5020 --slave-id 1
```

The master sends one request to slave 1 and prints the registers it gets
back:

```
rtuframe-sim master --host 127.0.0.1 --port 5020 --start 100 --qty 5
```

From Python, `rtuframe.sim.serve_slave` and `rtuframe.sim.run_master` do
the same; `run_master` returns the register values.

## What it does not do

- Only *Read Holding Registers* is supported; no other function codes and
  no exception responses.
- There is no serial-line transport, timing or framing by silence: the
  functions work on complete frames in memory.
- The simulation sends the RTU frames as they are over TCP; it does not
  speak Modbus TCP, and its slave serves a single connection.

## Running the tests

```
pip install -e ".[test]"
pytest
```