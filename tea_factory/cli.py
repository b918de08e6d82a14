"""
Tea Factory CLI

Runs one or more batches to completion in whole-second steps, printing a
step log and writing CSV rows as it goes.

    tea-factory --dt 5 --model gentle --batches 3 --plot run.png
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .backend.config import ConfigError, SimulationConfig, load_config
from .backend.simulation.charts import render_history
from .backend.simulation.engine import BatchLine, CLI_MAX_BATCHES
from .backend.simulation.factory import build_line
from .backend.simulation.physics import ModelVariant
from .data_gateway.adapters import BatchSourceAdapter, ConsoleSink, CsvFileSink
from .data_gateway.core import DataEngine, ISink

logger = logging.getLogger("TeaFactoryCLI")

DEFAULT_CSV_PATH = "tea_factory_cli.csv"


def setup_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tea-factory",
        description="Tea Factory Simulator (steaming -> rolling -> drying)",
    )
    parser.add_argument("--config", help="Settings JSON file (simulation section is used)")
    parser.add_argument("--dt", type=int, help="Step size in seconds (may exceed a stage)")
    parser.add_argument("--steaming", type=int, help="Steaming duration in seconds")
    parser.add_argument("--rolling", type=int, help="Rolling duration in seconds")
    parser.add_argument("--drying", type=int, help="Drying duration in seconds")
    parser.add_argument("--model", help="Model variant: default, gentle or aggressive")
    parser.add_argument("--batches", type=int, help=f"Parallel batches (1-{CLI_MAX_BATCHES})")

    csv_group = parser.add_mutually_exclusive_group()
    csv_group.add_argument("--csv", dest="csv_path", default=DEFAULT_CSV_PATH,
                           help=f"CSV output path (default: {DEFAULT_CSV_PATH})")
    csv_group.add_argument("--no-csv", dest="csv_path", action="store_const", const=None,
                           help="Disable CSV output")

    parser.add_argument("--plot", help="Write a PNG history chart per batch")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="-v for INFO, -vv for DEBUG")
    return parser


def resolve_config(args: argparse.Namespace) -> SimulationConfig:
    """Settings file (or defaults) overridden by explicit flags, then validated."""
    config = load_config(args.config)
    overrides = {
        "dt_seconds": args.dt,
        "steaming_seconds": args.steaming,
        "rolling_seconds": args.rolling,
        "drying_seconds": args.drying,
        "batches": args.batches,
    }
    for key, value in overrides.items():
        if value is not None:
            setattr(config, key, value)
    if args.model is not None:
        try:
            config.model = ModelVariant.from_name(args.model)
        except ValueError as e:
            raise ConfigError(str(e)) from None
    return config.validate()


def batch_path(path: str, index: int, batch_count: int) -> str:
    """'run.csv' -> 'run_b03.csv' when several batches share one base path."""
    if batch_count == 1:
        return path
    root, ext = os.path.splitext(path)
    return f"{root}_b{index + 1:02d}{ext}"


def run_line(line: BatchLine, dt_seconds: int, csv_path: Optional[str] = None,
             stream=None) -> List[float]:
    """
    Step every batch to FINISHED.

    Returns:
        Final quality score per batch
    """
    multi = line.batch_count > 1
    scores = []

    for i, batch in enumerate(line.batches):
        console = ConsoleSink(stream, prefix=f"{batch.id} " if multi else "")
        sinks: List[ISink] = [console]
        csv_sink = None
        if csv_path is not None:
            csv_sink = CsvFileSink(batch_path(csv_path, i, line.batch_count))
            csv_sink.connect()
            sinks.append(csv_sink)

        source = BatchSourceAdapter(batch)
        engine = DataEngine(source, sinks)
        history = line.histories[i]
        try:
            while True:
                # Rows carry the stage whose law ran during the step
                process = batch.process_state
                if not batch.step(dt_seconds):
                    break
                engine.write(source.read(process=process.value))
                history.record(batch)
        finally:
            if csv_sink is not None:
                csv_sink.disconnect()

        score = batch.quality_score()
        scores.append(score)
        logger.info(f"{batch.id} finished: t={batch.elapsed_seconds}s "
                    f"quality={score:.2f} ({batch.quality_status()}), {engine.rows_written} rows")
    return scores


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = resolve_config(args)
    except ConfigError as e:
        parser.error(str(e))

    line = build_line(config, max_batches=CLI_MAX_BATCHES)
    logger.info(f"Running {line.batch_count} batch(es), model={config.model}, dt={config.dt_seconds}s")

    scores = run_line(line, config.dt_seconds, args.csv_path)

    out = sys.stdout
    for batch, score in zip(line.batches, scores):
        out.write(f"{batch.id}: quality={score:.2f} status={batch.quality_status()}\n")

    if args.plot:
        for i, batch in enumerate(line.batches):
            path = batch_path(args.plot, i, line.batch_count)
            render_history(line.histories[i], path, title=f"{batch.id} ({config.model})")
            logger.info(f"Chart written to {path}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
