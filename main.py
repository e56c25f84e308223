# main.py
from __future__ import annotations

import argparse
import sys
from contextlib import ExitStack
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, TextIO

from debug import COMPONENTS, Debug
from errors import EnigmaError, InvalidConfiguration
from utilities import (
    BLOCK,
    MachineConfig,
    format_groups,
    is_settings_line,
    load_config,
    parse_settings,
)

# ────────────────────────────────────────────────────────────────────────
#  0. Runtime switches
# ────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class Config:
    """Runtime switches for one run of the simulator."""

    verbose: bool = False           # trace stepping and the signal path
    trace: List[str] = field(default_factory=list)   # extra Debug components
    log_file: str | None = None     # also write the trace here
    block: int = BLOCK              # output group size

    def make_debug(self) -> Debug | None:
        components = set(self.trace)
        if self.verbose:
            components.update(("stepping", "encipher"))
        if not components:
            return None
        return Debug(log_to=self.log_file).enable(*sorted(components))


# ────────────────────────────────────────────────────────────────────────
#  1. Message processing
# ────────────────────────────────────────────────────────────────────────


def process(
    config: MachineConfig,
    lines: Iterable[str],
    out: TextIO,
    *,
    debug: Debug | None = None,
    block: int = BLOCK,
) -> None:
    """Run every message in LINES through a machine built from CONFIG.

    A ``*`` line resets the machine; every other non-blank line is a message
    whose conversion is written to OUT in groups of BLOCK.
    """
    machine = config.build_machine(debug)
    ready = False

    for raw in lines:
        line = raw.rstrip("\r\n")
        if is_settings_line(line):
            parse_settings(line, config.num_rotors).apply(machine)
            ready = True
        elif not line.strip():
            out.write("\n")
        elif not ready:
            raise InvalidConfiguration("Input must begin with a settings line")
        else:
            out.write(format_groups(machine.convert_message(line), block) + "\n")


def encipher(config: MachineConfig, settings: str, message: str) -> str:
    """Convert one message under one settings line, no grouping."""
    machine = config.build_machine()
    parse_settings(settings, config.num_rotors).apply(machine)
    return machine.convert_message(message)


# ────────────────────────────────────────────────────────────────────────
#  2. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def parse_args(argv: List[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Encrypt or decrypt messages with a rotor machine")
    p.add_argument("config", metavar="CONFIG", help="Machine configuration file.")
    p.add_argument("input", metavar="INPUT", nargs="?", help="Messages to convert. Default: standard input.")
    p.add_argument("output", metavar="OUTPUT", nargs="?", help="Where to write results. Default: standard output.")
    p.add_argument("--verbose", action="store_true", help="Trace rotor stepping and every signal path on stderr.")
    p.add_argument(
        "--trace", action="append", default=[], choices=COMPONENTS, metavar="COMPONENT",
        help=f"Enable one trace component ({', '.join(COMPONENTS)}). Repeatable.",
    )
    p.add_argument("--log-file", dest="log_file", metavar="FILE", help="Also write the trace to FILE.")
    args = p.parse_args(argv)
    if args.log_file and not (args.verbose or args.trace):
        p.error("--log-file needs --verbose or --trace")
    return args


def _open(stack: ExitStack, name: str | None, mode: str, default: TextIO) -> TextIO:
    if name is None:
        return default
    try:
        return stack.enter_context(open(name, mode, encoding="utf-8"))
    except OSError:
        raise SystemExit(f"Error: could not open {name}") from None


# ────────────────────────────────────────────────────────────────────────
#  3. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: List[str] | None = None) -> None:
    args = parse_args(argv)
    cfg = Config(verbose=args.verbose, trace=args.trace, log_file=args.log_file)
    debug = cfg.make_debug()

    if not Path(args.config).is_file():
        sys.exit(f"Error: could not open {args.config}")

    with ExitStack() as stack:
        source = _open(stack, args.input, "r", sys.stdin)
        sink = _open(stack, args.output, "w", sys.stdout)
        try:
            machine_cfg = load_config(args.config, debug)
            process(machine_cfg, source, sink, debug=debug, block=cfg.block)
        except EnigmaError as excp:
            sys.exit(f"Error: {excp}")
        except UnicodeDecodeError as excp:
            sys.exit(f"Error: could not read input: {excp.reason}")


if __name__ == "__main__":
    main()
