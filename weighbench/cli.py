#!/usr/bin/env python3
"""Command-line interface for Weighbench.

Usage:
    python -m weighbench list
    python -m weighbench list --pallet identity
    python -m weighbench run --pallet identity --extrinsic set_identity --steps 10 --repeat 3
    python -m weighbench run --pallet balances --extrinsic transfer --format json --output transfer.json
    python -m weighbench plan plans/identity.yaml
"""
from __future__ import annotations

import argparse
import csv
import io
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from weighbench.core.config import WeighbenchConfig
from weighbench.core.errors import BenchmarkError
from weighbench.core.models import BenchmarkResult, Component
from weighbench.core.registry import get_registry, list_pallets
from weighbench.core.validate import load_plan

logger = logging.getLogger(__name__)


def format_csv(
    pallet: str,
    extrinsic: str,
    steps: int,
    repeat: int,
    components: Sequence[Component],
    results: Sequence[BenchmarkResult],
) -> str:
    buf = io.StringIO()
    buf.write(f'Pallet: "{pallet}", Extrinsic: "{extrinsic}", Steps: {steps}, Repeat: {repeat}\n')
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow([c.name for c in components] + ["time"])
    for result in results:
        writer.writerow([value for _, value in result.assignment] + [result.elapsed_ns])
    return buf.getvalue()


def format_json(
    pallet: str,
    extrinsic: str,
    steps: int,
    repeat: int,
    components: Sequence[Component],
    results: Sequence[BenchmarkResult],
) -> dict:
    return {
        "pallet": pallet,
        "extrinsic": extrinsic,
        "steps": steps,
        "repeat": repeat,
        "components": [c.model_dump() for c in components],
        "results": [r.to_dict() for r in results],
    }


class WeighbenchCLI:
    """Command-line interface for benchmark operations."""

    def __init__(self, config: Optional[WeighbenchConfig] = None, out: Optional[TextIO] = None, err: Optional[TextIO] = None):
        # Registers the built-in pallets' benchmarks.
        import weighbench.pallets  # noqa: F401

        self.config = config or WeighbenchConfig.from_env()
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    def _echo(self, msg: str = "") -> None:
        print(msg, file=self.out, flush=True)

    def _fail(self, msg: str) -> int:
        print(f"❌ {msg}", file=self.err, flush=True)
        return 1

    def list_benchmarks(self, pallet: Optional[str] = None) -> int:
        pallets = [pallet] if pallet else list_pallets()
        for name in pallets:
            try:
                registry = get_registry(name)
            except BenchmarkError:
                return self._fail(f"Pallet '{name}' not found. Available: {', '.join(list_pallets())}")
            self._echo(f"📦 {name}")
            for bench in registry:
                ranges = ", ".join(f"{c.name}: [{c.low}, {c.high})" for c in bench.components())
                self._echo(f"   - {bench.name} ({ranges})")
        return 0

    def run_benchmark(
        self,
        pallet: str,
        extrinsic: str,
        steps: Optional[int] = None,
        repeat: Optional[int] = None,
        fmt: str = "csv",
        output: Optional[str] = None,
    ) -> int:
        runs = [(pallet, extrinsic, steps, repeat)]
        return self._run_all(runs, fmt, output)

    def run_plan(self, plan_path: str, fmt: str = "csv", output: Optional[str] = None) -> int:
        try:
            plan = load_plan(plan_path)
        except (OSError, ValueError) as e:
            return self._fail(str(e))
        runs = [(r.pallet, r.extrinsic, r.steps, r.repeat) for r in plan.resolved_runs()]
        return self._run_all(runs, fmt, output)

    def _run_all(self, runs, fmt: str, output: Optional[str]) -> int:
        from weighbench.services.service_factory import create_engine

        rendered: List[str] = []
        documents: List[dict] = []
        for pallet, extrinsic, steps, repeat in runs:
            steps = self.config.engine.steps if steps is None else steps
            repeat = self.config.engine.repeat if repeat is None else repeat
            try:
                engine = create_engine(pallet, self.config)
                try:
                    results = engine.run(extrinsic, steps=steps, repeat=repeat)
                    components = engine.registry.get(extrinsic).components()
                finally:
                    engine.store.close()
            except (BenchmarkError, ValueError) as e:
                return self._fail(f"{pallet}.{extrinsic}: {e}")

            if fmt == "json":
                documents.append(format_json(pallet, extrinsic, steps, repeat, components, results))
            else:
                rendered.append(format_csv(pallet, extrinsic, steps, repeat, components, results))

        if fmt == "json":
            text = json.dumps(documents[0] if len(documents) == 1 else documents, indent=2)
        else:
            text = "\n".join(rendered).rstrip("\n")

        if output:
            Path(output).write_text(text + "\n", encoding="utf-8")
            self._echo(f"💾 Results written to {output}")
        else:
            self._echo(text)
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="weighbench", description="Parameterized benchmark sweeps for runtime calls")
    parser.add_argument("--log-level", default=None, help="Logging level (default: WEIGHBENCH_LOG_LEVEL or INFO)")
    parser.add_argument("--db", default=None, help="SQLite path for the backing store (default: WEIGHBENCH_DB_PATH)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List pallets and their benchmarks")
    p_list.add_argument("--pallet", default=None)

    def add_output_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("--format", choices=("csv", "json"), default="csv")
        p.add_argument("--output", "-o", default=None, help="Write results to a file instead of stdout")

    p_run = sub.add_parser("run", help="Sweep one benchmark")
    p_run.add_argument("--pallet", "-p", required=True)
    p_run.add_argument("--extrinsic", "-e", required=True)
    p_run.add_argument("--steps", "-s", type=int, default=None)
    p_run.add_argument("--repeat", "-r", type=int, default=None)
    add_output_args(p_run)

    p_plan = sub.add_parser("plan", help="Run every sweep listed in a YAML/JSON plan file")
    p_plan.add_argument("plan_file")
    add_output_args(p_plan)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = WeighbenchConfig.from_env()
    except ValueError as e:
        print(f"❌ Invalid configuration: {e}", file=sys.stderr, flush=True)
        return 2
    if args.log_level:
        config.log_level = args.log_level
    if args.db:
        config.database.path = args.db

    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format='%(levelname)s - %(message)s',
    )

    for flag in ("steps", "repeat"):
        value = getattr(args, flag, None)
        if value is not None and value <= 0:
            parser.error(f"--{flag} must be positive")

    cli = WeighbenchCLI(config)
    if args.command == "list":
        return cli.list_benchmarks(args.pallet)
    if args.command == "run":
        return cli.run_benchmark(args.pallet, args.extrinsic, args.steps, args.repeat, args.format, args.output)
    if args.command == "plan":
        return cli.run_plan(args.plan_file, args.format, args.output)
    parser.error(f"Unknown command: {args.command}")
    return 2


if __name__ == "__main__":
    sys.exit(main())
