"""Modbus RTU Read Holding Registers framing for masters and slaves, with a TCP simulation."""

__version__ = "0.1.0"

__all__ = ["protocol", "master", "slave", "example", "sim"]