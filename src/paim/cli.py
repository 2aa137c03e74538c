"""
CLI entry point.

Commands:
- init: Create data directory and database schema
- remember <text> [--source S] [--meta key=value ...]: Observe one input
- ask <query> [--k N]: Recall facts and similar logs as JSON
- run: Read observations from stdin and consolidate periodically

Flags:
- --debug: Enable debug logging
"""

import asyncio
import json
import logging
import os
import signal
import stat
import sys
from collections.abc import AsyncIterator

from paim.core.config import Settings, get_settings
from paim.core.errors import PaimError
from paim.core.logging import get_logger, setup_logging
from paim.core.types import Observation

USAGE = """Usage: paim [--debug] <command> [args]
Commands:
  init                                      Create data directory and schema
  remember <text> [--source S] [--meta k=v] Store an observation
  ask <query> [--k N]                       Recall facts and related logs
  run                                       Observe stdin lines, consolidate periodically"""


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = list(sys.argv[1:] if argv is None else argv)
    settings = get_settings()

    debug_mode = "--debug" in args
    if debug_mode:
        args.remove("--debug")

    log_level = logging.DEBUG if debug_mode else logging.INFO
    setup_logging(level=log_level, log_file=settings.data_dir / "paim.log")
    logger = get_logger("cli")

    if not args:
        print(USAGE)
        return 1

    command, rest = args[0], args[1:]
    try:
        if command == "init":
            return asyncio.run(_init(settings))
        if command == "remember":
            return asyncio.run(_remember(settings, rest))
        if command == "ask":
            return asyncio.run(_ask(settings, rest))
        if command == "run":
            return asyncio.run(_run(settings))
    except PaimError as e:
        logger.error(f"{command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print(f"Unknown command: {command}")
    print(USAGE)
    return 1


def _pop_option(args: list[str], name: str) -> list[str]:
    """Remove every ``name value`` pair from args, return the values."""
    values = []
    while name in args:
        idx = args.index(name)
        if idx + 1 >= len(args):
            raise ValueError(f"{name} requires a value")
        values.append(args[idx + 1])
        del args[idx : idx + 2]
    return values


def _parse_meta(pairs: list[str]) -> dict[str, str]:
    metadata = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise ValueError(f"--meta expects key=value, got {pair!r}")
        metadata[key] = value
    return metadata


async def _init(settings: Settings) -> int:
    from paim.memory.factory import open_engine

    async with open_engine(settings):
        pass
    print(f"Initialized: {settings.db_path}")
    return 0


async def _remember(settings: Settings, args: list[str]) -> int:
    from paim.memory.factory import open_engine

    source = (_pop_option(args, "--source") or ["chat"])[-1]
    metadata = _parse_meta(_pop_option(args, "--meta"))
    observation = Observation(content=" ".join(args), source=source, metadata=metadata)

    async with open_engine(settings) as engine:
        log_id = await engine.observe(observation)
        # The buffer does not outlive this process, so distill right away
        facts = await engine.consolidate()
    print(json.dumps({"id": log_id, "facts": facts}))
    return 0


async def _ask(settings: Settings, args: list[str]) -> int:
    from paim.memory.factory import open_engine

    k_values = _pop_option(args, "--k")
    top_k = int(k_values[-1]) if k_values else settings.default_top_k
    query = " ".join(args)

    async with open_engine(settings) as engine:
        recalled = await engine.recall(query, top_k)
    print(json.dumps(recalled.to_dict(), indent=2, ensure_ascii=False))
    return 0


async def _run(settings: Settings, lines: AsyncIterator[str] | None = None) -> int:
    """Long-running mode: each input line is observed, consolidation runs on a timer.

    Ends on EOF or SIGINT/SIGTERM, flushing the buffer once before exit.
    """
    from paim.memory.consolidation import ConsolidationLoop
    from paim.memory.factory import open_engine

    logger = get_logger("cli.run")
    shutdown = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown.set)

    def on_reader_done(task: asyncio.Task) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Input reader failed: {task.exception()}")
        shutdown.set()

    try:
        async with open_engine(settings) as engine:
            consolidation = ConsolidationLoop(engine, settings.consolidation_interval)
            await consolidation.start()
            source = lines if lines is not None else _stdin_lines()
            reader = asyncio.create_task(_observe_lines(engine, source))
            reader.add_done_callback(on_reader_done)
            try:
                await shutdown.wait()
                logger.info("Shutting down")
            finally:
                reader.cancel()
                # Reader errors were already logged by the done callback
                await asyncio.gather(reader, return_exceptions=True)
                await consolidation.stop()
                # Flush what is still buffered before exit
                await consolidation.run_once()
    finally:
        for sig in (signal.SIGINT, signal.SIGTERM):
            loop.remove_signal_handler(sig)
    return 0


async def _stdin_lines() -> AsyncIterator[str]:
    """Yield stdin lines from a pipe, TTY or regular file."""
    mode = os.fstat(sys.stdin.fileno()).st_mode
    if stat.S_ISREG(mode):
        # Pipe transports refuse regular files; file reads never block for long
        while line := await asyncio.to_thread(sys.stdin.readline):
            yield line
        return

    reader = asyncio.StreamReader()
    loop = asyncio.get_running_loop()
    await loop.connect_read_pipe(lambda: asyncio.StreamReaderProtocol(reader), sys.stdin)
    while raw := await reader.readline():
        yield raw.decode("utf-8", errors="replace")


async def _observe_lines(engine, lines: AsyncIterator[str]) -> None:
    logger = get_logger("cli.run")
    async for line in lines:
        text = line.strip()
        if not text:
            continue
        try:
            await engine.observe(Observation(content=text, source="chat"))
        except PaimError as e:
            logger.warning(f"Observe failed: {e}")


if __name__ == "__main__":
    sys.exit(main())
