"""Errors raised during schema synthesis."""

from __future__ import annotations


class UnsupportedTypeError(Exception):
    """Raised when a descriptor's kind has no JSON Schema representation."""

    def __init__(self, serial_name: str, kind: str) -> None:
        self.serial_name = serial_name
        self.kind = kind
        super().__init__(f"Type {serial_name} with kind {kind} is not supported")
