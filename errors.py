# errors.py
from __future__ import annotations


class EnigmaError(ValueError):
    """Root of every error raised by the machine and its setup helpers."""


class InvalidConfiguration(EnigmaError):
    """Malformed alphabet, cycles, rotor placement or settings."""


class UnknownIdentifier(InvalidConfiguration):
    """A rotor name that is not in the machine's catalog."""


class IndexOutOfRange(EnigmaError, IndexError):
    """An alphabet index outside 0..size-1."""


class InvalidSymbol(IndexOutOfRange):
    """A symbol that is not part of the alphabet."""
