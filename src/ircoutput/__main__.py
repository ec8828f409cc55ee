"""Standalone host: read JSON-lines log messages from stdin and relay them to IRC."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import signal
import sys
from pathlib import Path
from typing import Any, TextIO

import yaml
from loguru import logger

from ircoutput import __version__
from ircoutput.config import Config, cfg, load_config_with_env
from ircoutput.errors import ConfigurationError, OutputError
from ircoutput.models import LogMessage
from ircoutput.output import IRCOutput

# Third-party libraries to intercept and route through loguru
_INTERCEPTED_LIBRARIES = ["pydle", "pydle.client", "pydle.connection"]


def _intercept_logging(level: str) -> None:
    """Route stdlib logging (pydle) to loguru."""

    class InterceptHandler(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            try:
                log_level: str | int = logger.level(record.levelname).name
            except ValueError:
                log_level = record.levelno
            msg = record.getMessage().replace("{", "{{").replace("}", "}}")
            logger.patch(
                lambda r: r.update(
                    name=record.name,
                    function=record.funcName,
                    line=record.lineno,
                ),
            ).opt(exception=record.exc_info).log(log_level, msg)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for lib in _INTERCEPTED_LIBRARIES:
        lib_logger = logging.getLogger(lib)
        lib_logger.handlers = [InterceptHandler()]
        lib_logger.propagate = False
        lib_logger.setLevel(level)


def _safe_message_filter(record: Any) -> bool:
    """Escape braces/angles in log messages to prevent format/tag errors."""
    if isinstance(record.get("message"), str):
        msg = record["message"]
        msg = msg.replace("{", "{{").replace("}", "}}").replace("<", "\\<")
        record["message"] = msg
    return True


def setup_logging(verbose: bool = False) -> None:
    """Configure loguru. verbose=True or LOG_LEVEL=DEBUG enables DEBUG; otherwise INFO."""
    level = "INFO"
    if verbose:
        level = "DEBUG"
    else:
        env_level = (os.environ.get("LOG_LEVEL") or "").upper()
        if env_level in ("DEBUG", "INFO", "WARNING", "ERROR"):
            level = env_level

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=("<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> | {message}"),
        filter=_safe_message_filter,
    )
    _intercept_logging(level)


def reload_config(config_path: Path) -> Config:
    """Load config from path and update global cfg."""
    data = load_config_with_env(config_path)
    cfg.reload(data)
    return cfg


def parse_line(line: str) -> LogMessage | None:
    """One JSON object per line; None (with a warning) for blank or malformed lines."""
    line = line.strip()
    if not line:
        return None
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        logger.warning("Skipping malformed input line: {}", exc)
        return None
    if not isinstance(data, dict):
        logger.warning("Skipping input line: expected a JSON object")
        return None
    return LogMessage.from_dict(data)


async def relay(output: IRCOutput, config: Config, stream: TextIO) -> int:
    """Feed batches from stream into output until EOF. Returns the number of failed batches."""
    failed = 0
    batch: list[LogMessage] = []

    async def flush() -> None:
        nonlocal failed
        if not batch:
            return
        try:
            # Stream table is read per batch so a SIGHUP reload applies to the next one
            await output.write(list(batch), config.streams)
        except OutputError as exc:
            failed += 1
            logger.error("Batch of {} messages failed: {}", len(batch), exc)
        batch.clear()

    while True:
        line = await asyncio.to_thread(stream.readline)
        if not line:
            break
        msg = parse_line(line)
        if msg is None:
            continue
        batch.append(msg)
        if len(batch) >= config.batch_size:
            await flush()
    await flush()
    return failed


async def _run(config_path: Path, config: Config) -> int:
    output = IRCOutput(timeout=config.timeout_seconds)
    output.initialize(config.output)

    def on_sighup() -> None:
        try:
            reload_config(config_path)
            logger.info("Config reloaded (SIGHUP): {} streams", len(cfg.streams))
        except (ConfigurationError, OSError, yaml.YAMLError) as exc:
            logger.error("Config reload failed, keeping previous: {}", exc)

    loop = asyncio.get_running_loop()
    if hasattr(signal, "SIGHUP"):
        loop.add_signal_handler(signal.SIGHUP, on_sighup)

    try:
        return await relay(output, config, sys.stdin)
    finally:
        await output.stop()


def main() -> None:
    """Main entrypoint."""
    parser = argparse.ArgumentParser(description="Relay JSON-lines log messages from stdin to IRC channels")
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    args = parser.parse_args()

    setup_logging(args.verbose)

    if not args.config.exists():
        logger.error("Config file not found: {}", args.config)
        sys.exit(1)

    try:
        config = reload_config(args.config)
    except (ConfigurationError, yaml.YAMLError) as exc:
        logger.error("Invalid config {}: {}", args.config, exc)
        sys.exit(1)
    logger.info("Config loaded from {}: {} streams", args.config, len(config.streams))

    try:
        failed = asyncio.run(_run(args.config, config))
    except ConfigurationError as exc:
        logger.error("IRC output configuration rejected: {}", exc)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        sys.exit(130)
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
