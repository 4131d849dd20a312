"""
main.py — UIBuilder Entry Point

Usage:
    python -m uibuilder                          # REPL, default settings
    python -m uibuilder --log-level DEBUG        # Verbose logging
    python -m uibuilder --config path/to/config.yaml
    uibuilder "A login form with email and password"   # one-shot, prints the code
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="uibuilder",
        description="AI UI Builder — describe a UI, get a React component",
    )
    parser.add_argument(
        "prompt",
        nargs="?",
        default=None,
        help="Generate once for this description, print the code and exit. "
             "Omit to start the interactive REPL.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: $UIBUILDER_CONFIG or config/config.yaml)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Override log level from config",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="With a prompt: write the component here instead of printing it",
    )
    return parser.parse_args(argv)


def bootstrap(args: argparse.Namespace):
    """
    Load config, validate it fully, and set up logging.
    Returns (settings, log) ready for use.

    Exits with code 1 (after printing a clear message) if:
      - config.yaml has invalid values (Pydantic ValidationError)
      - cross-field problems are found (ConfigError from validate_all())
    """
    from pydantic import ValidationError

    from uibuilder.config.settings import ConfigError, load_settings
    from uibuilder.observability.logger import get_logger, setup_logging_from_settings

    # -- Load and parse -------------------------------------------------------
    try:
        settings = load_settings(args.config)
    except ValidationError as exc:
        problems = "\n".join(
            f"  • {e['loc'][-1] if e['loc'] else '?'}: {e['msg']}"
            for e in exc.errors()
        )
        print(
            f"\n❌  Config validation failed:\n\n{problems}\n\n"
            f"    Fix config/config.yaml or your .env file and restart.\n",
            file=sys.stderr,
        )
        sys.exit(1)
    except (OSError, ValueError, TypeError) as exc:
        print(
            f"\n❌  Failed to load config: {type(exc).__name__}: {exc}\n",
            file=sys.stderr,
        )
        sys.exit(1)

    # -- Cross-field validation -----------------------------------------------
    try:
        settings.validate_all()
    except ConfigError as exc:
        print(str(exc), file=sys.stderr)
        sys.exit(1)

    # -- Logging --------------------------------------------------------------
    # --log-level overrides config.yaml
    if args.log_level:
        settings.logging.level = args.log_level
    setup_logging_from_settings(settings)

    log = get_logger("uibuilder.main")
    return settings, log


async def _run_once(settings, log, prompt: str, output: str | None) -> int:
    """Generate a single component without the REPL."""
    from uibuilder.agent.orchestrator import Orchestrator

    orchestrator = Orchestrator.from_settings(settings)

    def report(event) -> None:
        print(event.message, file=sys.stderr)

    result = await orchestrator.run(prompt, on_progress=report)
    if not result.ok:
        log.error("uibuilder.one_shot_failed", error=result.error)
        return 1

    if output:
        target = Path(output).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(result.code + "\n", encoding="utf-8")
        print(f"Saved {target}", file=sys.stderr)
    else:
        print(result.code)
    return 0


async def main(argv: list[str] | None = None) -> int:
    load_dotenv(dotenv_path=Path.cwd() / ".env")
    args = parse_args(argv)
    settings, log = bootstrap(args)

    log.info(
        "uibuilder.starting",
        llm_provider=settings.llm.provider,
        llm_model=settings.llm.model,
        one_shot=args.prompt is not None,
    )

    if args.prompt:
        return await _run_once(settings, log, args.prompt, args.output)

    from uibuilder.interfaces.cli import run_cli
    await run_cli(settings, log)
    return 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
