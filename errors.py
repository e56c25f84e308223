# errors.py
from __future__ import annotations


class EnigmaError(ValueError):
    """Base class for every failure the machine reports to its caller."""


class InvalidCharacter(EnigmaError):
    def __init__(self, symbol: str, alphabet: str = "") -> None:
        self.symbol = symbol
        msg = f"Invalid character {symbol!r} for current alphabet."
        if alphabet:
            msg = f"Invalid character {symbol!r}, not in {alphabet!r}."
        super().__init__(msg)


class InvalidConfiguration(EnigmaError):
    pass


class MalformedCycle(EnigmaError):
    def __init__(self, spec: str, reason: str = "") -> None:
        self.spec = spec
        msg = f"Malformed cycle {spec!r}"
        super().__init__(f"{msg}: {reason}" if reason else msg)
