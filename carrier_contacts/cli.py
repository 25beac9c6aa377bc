import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from carrier_contacts.config import RunMode, Settings, configure_logging
from carrier_contacts.exceptions.custom import InputFileError
from carrier_contacts.services.runner import run_extraction

logger = logging.getLogger("carrier_contacts")

# argparse dest -> Settings field
_OVERRIDES = (
    "input_file",
    "output_dir",
    "mode",
    "concurrency",
    "delay",
    "batch_size",
    "wait_seconds",
)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="carrier-contacts",
        description="Resolve MC numbers into carrier contact records via SAFER.",
    )
    p.add_argument("--input", dest="input_file", help="File with one MC number per line")
    p.add_argument("--output-dir", dest="output_dir", help="Directory for CSV checkpoints")
    p.add_argument("--mode", choices=[m.value for m in RunMode], help="both (default) or urls")
    p.add_argument("--concurrency", type=int, help="Identifiers in flight per wave")
    p.add_argument("--delay", type=int, help="Pause between waves in ms")
    p.add_argument("--batch-size", dest="batch_size", type=int, help="Identifiers per checkpoint")
    p.add_argument("--wait-seconds", dest="wait_seconds", type=int, help="Pause between batches")
    return p


def load_settings(args: argparse.Namespace) -> Settings:
    overrides = {
        name: getattr(args, name)
        for name in _OVERRIDES
        if getattr(args, name, None) is not None
    }
    return Settings(**overrides)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = load_settings(args)
    except ValidationError as exc:
        print(f"Invalid configuration:\n{exc}", file=sys.stderr)
        return 1

    configure_logging(settings.log_level)

    try:
        summary = asyncio.run(run_extraction(settings))
    except InputFileError as exc:
        logger.error("%s. Create it with one MC per line.", exc)
        return 1
    except Exception:
        logger.exception("Fatal error")
        return 1

    logger.info(
        "Done. total=%d valid=%d invalid=%d errors=%d records=%d",
        summary.total, summary.valid, summary.invalid, summary.errors, summary.records,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
