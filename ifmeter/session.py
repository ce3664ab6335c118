"""Session controller: prompt, measure, report, repeat.

One measurement is: snapshot → wait (polling the PeakTracker, or blocking
in manual mode) → snapshot → build_report → optional background
correction → table. An optional background calibration runs first and
its report is reused for every later correction.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

# Import all sampler modules so they register themselves.
import ifmeter
import ifmeter.mock
import ifmeter.procnet
from ifmeter.background import subtract
from ifmeter.base import BaseSampler, add_filter_args
from ifmeter.delta import build_report
from ifmeter.errors import CounterRollover, SamplerError
from ifmeter.graph import LiveGraph
from ifmeter.logging_config import configure_logging
from ifmeter.models import ReportRow
from ifmeter.peak import PeakTracker
from ifmeter.stop import StopCondition, choose_stop
from ifmeter.table import render_report

logger = logging.getLogger(__name__)

MIN_INTERVAL_S = 0.1


@dataclass
class MeasurementResult:
    rows: list[ReportRow]
    duration: float
    ticks: int


class Session:
    """Drives repeated measurements against one sampler.

    The clock, sleep function and streams are injectable so a whole
    session can be scripted in tests.
    """

    def __init__(
        self,
        sampler: BaseSampler,
        *,
        interval_s: float = MIN_INTERVAL_S,
        duration: float | None = None,
        background: bool = False,
        background_duration: float | None = None,
        allow_keypress: bool = True,
        graph: bool = False,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.sampler = sampler
        self.interval_s = max(MIN_INTERVAL_S, interval_s)
        self.duration = duration
        self.background = background
        self.background_duration = background_duration
        self.allow_keypress = allow_keypress
        self.graph = graph
        self._in = stdin if stdin is not None else sys.stdin
        self._out = stdout if stdout is not None else sys.stdout
        self.clock = clock
        self.sleep = sleep

        self.descriptions = sampler.descriptions()
        self.background_report: list[ReportRow] | None = None
        self.measurements = 0

    # ---- one measurement ----

    def stop_condition(self, duration: float | None) -> StopCondition:
        return choose_stop(duration, self._in, allow_keypress=self.allow_keypress, clock=self.clock)

    def measure(self, stop: StopCondition) -> MeasurementResult:
        """Run one measurement until the stop condition fires.

        Raises CounterRollover (from the live tracker or the final delta)
        and aborts the measurement without a report.
        """
        start = self.sampler.take()
        started = self.clock()
        tracker = PeakTracker(start, started)

        with stop:
            if stop.blocking:
                logger.info("No non-blocking stop available; peak rates will not be tracked")
                stop.wait()
            else:
                self._poll(tracker, stop)

        end = self.sampler.take()
        elapsed = self.clock() - started
        peaks = tracker.peaks()
        rows = build_report(start, end, peaks.rx, peaks.tx, elapsed, self.descriptions)
        logger.debug("Measurement finished: %.3fs, %d ticks, %d rows", elapsed, tracker.ticks, len(rows))
        return MeasurementResult(rows=rows, duration=elapsed, ticks=tracker.ticks)

    def _poll(self, tracker: PeakTracker, stop: StopCondition) -> None:
        live = LiveGraph(self.interval_s, stream=self._out) if self.graph else None
        if live:
            live.begin()
        try:
            while True:
                self.sleep(self.interval_s)
                rates = tracker.on_sample(self.sampler.take(), self.clock())
                if live:
                    live.push(rates)
                    live.draw(stop.hint)
                if stop.should_stop():
                    break
        finally:
            if live:
                live.end()

    # ---- session loop ----

    def calibrate(self) -> list[ReportRow]:
        """Measure idle traffic until it succeeds; keep the report for later."""
        duration = self.background_duration or self.duration
        while True:
            self._prompt("Stop any workload, then press Enter to measure background traffic...")
            stop = self.stop_condition(duration)
            self._say(f"Background measurement started, {stop.hint}.")
            try:
                result = self.measure(stop)
            except CounterRollover as exc:
                self._abort(exc)
                continue
            self.background_report = result.rows
            self._say(render_report(result.rows, "Background", result.duration))
            return result.rows

    def run_once(self) -> MeasurementResult | None:
        """Prompt, measure and print one report. None if it was aborted."""
        self._prompt("Press Enter to start a measurement...")
        stop = self.stop_condition(self.duration)
        self._say(f"Measurement started, {stop.hint}.")
        try:
            result = self.measure(stop)
        except CounterRollover as exc:
            self._abort(exc)
            return None

        self.measurements += 1
        if self.background_report is not None:
            result.rows = subtract(result.rows, self.background_report)
        self._say(render_report(result.rows, f"Measurement {self.measurements}", result.duration))
        return result

    def run(self, once: bool = False) -> int:
        """Main loop. Ends on EOF or Ctrl+C (raised to the caller)."""
        self._say(self.adapter_summary())
        if self.background and self.background_report is None:
            self.calibrate()
        while True:
            result = self.run_once()
            if once:
                return 0 if result is not None else 1

    def adapter_summary(self) -> str:
        names = sorted(self.sampler.take())
        if not names:
            return "No adapters to measure."
        parts = []
        for name in names:
            desc = self.descriptions.get(name, "")
            parts.append(f"{name} ({desc})" if desc else name)
        return f"Measuring {len(names)} adapter(s): " + ", ".join(parts)

    # ---- terminal I/O ----

    def _prompt(self, text: str) -> None:
        self._out.write(text + "\n")
        self._out.flush()
        if not self._in.readline():
            raise EOFError("input closed")

    def _say(self, text: str) -> None:
        print(text, file=self._out, flush=True)

    def _abort(self, exc: CounterRollover) -> None:
        logger.error("Measurement aborted: %s", exc)
        self._say(f"Measurement aborted: {exc}. Starting over.")


# ---- command line ----

def _env_float(name: str, default: float | None) -> float | None:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number", name, raw)
        return default


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ifmeter",
        description="Measure per-adapter network transfer and average/peak rates.",
        epilog="Defaults can be set with IFMETER_SAMPLER, IFMETER_INTERVAL and IFMETER_DURATION.",
    )
    parser.add_argument(
        "--sampler",
        default=os.environ.get("IFMETER_SAMPLER", "proc"),
        help="Counter source (default: proc). See --list.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        dest="list_samplers",
        help="List available samplers and exit",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=_env_float("IFMETER_INTERVAL", MIN_INTERVAL_S),
        help=f"Polling interval in seconds while measuring (default/minimum: {MIN_INTERVAL_S})",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=_env_float("IFMETER_DURATION", None),
        help="Stop each measurement after this many seconds (default: wait for a key)",
    )
    parser.add_argument(
        "--background",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Measure idle traffic first and subtract it from every report (default: off)",
    )
    parser.add_argument(
        "--background-duration",
        type=float,
        default=None,
        help="Length of the background measurement (default: same as --duration)",
    )
    parser.add_argument("--once", action="store_true",
                        help="Run a single measurement and exit")
    parser.add_argument("--graph", action="store_true",
                        help="Draw a live rate chart while measuring")
    parser.add_argument("--no-keypress", action="store_true",
                        help="Stop on Enter instead of any key (disables peak tracking)")

    add_filter_args(parser)
    for cls in ifmeter.SAMPLERS.values():
        cls.add_args(parser)
    return parser


def list_samplers(out: TextIO) -> None:
    for name, cls in sorted(ifmeter.SAMPLERS.items()):
        aliases = [a for a, canon in ifmeter.ALIASES.items() if canon == name]
        alias_str = f"  (aka {', '.join(aliases)})" if aliases else ""
        avail = "✓" if cls.is_available() else "✗"
        print(f"  {avail}  {name:8s}  {cls.default_title}{alias_str}", file=out)


def main(argv: list[str] | None = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)
    for flag in ("duration", "background_duration"):
        value = getattr(args, flag)
        if value is not None and value <= 0:
            parser.error(f"--{flag.replace('_', '-')} must be positive")

    if args.list_samplers:
        print("Available samplers:")
        list_samplers(sys.stdout)
        return 0

    name = ifmeter.resolve(args.sampler)
    if name not in ifmeter.SAMPLERS:
        all_names = sorted(set(list(ifmeter.SAMPLERS) + list(ifmeter.ALIASES)))
        print(f"Unknown sampler: {args.sampler}", file=sys.stderr)
        print(f"Available: {', '.join(all_names)}", file=sys.stderr)
        return 1
    if not ifmeter.SAMPLERS[name].is_available():
        print(f"Sampler '{name}' is not available on this system.", file=sys.stderr)
        return 1

    sampler = ifmeter.SAMPLERS[name](args)
    try:
        session = Session(
            sampler,
            interval_s=args.interval,
            duration=args.duration,
            background=args.background,
            background_duration=args.background_duration,
            allow_keypress=not args.no_keypress,
            graph=args.graph,
        )
        return session.run(once=args.once)
    except SamplerError as exc:
        logger.error("Sampler failure: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except (KeyboardInterrupt, EOFError):
        return 0
    finally:
        sampler.cleanup()
        print("\nExiting...")


if __name__ == "__main__":
    raise SystemExit(main())
