from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer

from .config import get_settings
from .envelope import ENVELOPES
from .errors import FileSinkError
from .log_config import configure_logging
from .models import StageConfig, WriteResult
from .paths import resolve_destination
from .stage import FileSinkStage

app = typer.Typer(help="file sink stage operational CLI")

# ---------------------------
# Common options
# ---------------------------


def directory_opt() -> Optional[str]:
    return typer.Option(
        None, "--directory", help="Base directory (default: FILE_SINK_DIRECTORY)"
    )


def encoding_opt() -> Optional[str]:
    return typer.Option(
        None, "--encoding", help="Encoding for text chunks (default: FILE_SINK_ENCODING)"
    )


def _stage_config(directory: Optional[str], encoding: Optional[str]) -> StageConfig:
    settings = get_settings()
    return StageConfig(
        directory=directory or settings.DIRECTORY,
        encoding=encoding or settings.ENCODING,
    )


def _fail(exc: FileSinkError) -> NoReturn:
    typer.echo(json.dumps({"ok": False, "error": exc.kind.value, "detail": exc.detail}, indent=2))
    raise typer.Exit(code=1)


async def _write_one(
    stage: FileSinkStage, source: str, file_name: str, envelope: str
) -> WriteResult:
    # message shaped the way the chosen envelope expects it
    async with stage:
        if source == "-":
            return await stage.receive(
                {envelope: {"file_name": file_name}, "payload": sys.stdin.buffer}
            )
        with open(source, "rb") as fh:
            return await stage.receive({envelope: {"file_name": file_name}, "payload": fh})


# ---------------------------
# Commands
# ---------------------------


@app.command("write")
def write(
    source: str = typer.Argument(..., help="File to stream, or '-' for stdin"),
    file_name: str = typer.Option(..., "--file-name", help="Destination file name"),
    directory: Optional[str] = directory_opt(),
    encoding: Optional[str] = encoding_opt(),
    envelope: Optional[str] = typer.Option(
        None, "--envelope", help="Message envelope: header or info (default: FILE_SINK_ENVELOPE)"
    ),
):
    """Stream SOURCE through a file sink stage."""
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    if source != "-" and not Path(source).is_file():
        typer.echo(f"Source file not found: {source}", err=True)
        raise typer.Exit(code=2)

    envelope = envelope or settings.ENVELOPE
    if envelope not in ENVELOPES:
        typer.echo(f"Unknown envelope: {envelope}. Must be one of {sorted(ENVELOPES)}", err=True)
        raise typer.Exit(code=2)

    stage = FileSinkStage(
        "cli",
        _stage_config(directory, encoding),
        envelope=envelope,
        chunk_size=settings.CHUNK_SIZE,
    )
    try:
        result = asyncio.run(_write_one(stage, source, file_name, envelope))
    except FileSinkError as exc:
        _fail(exc)

    typer.echo(
        json.dumps(
            {"ok": True, "path": result.path, "bytes_written": result.bytes_written},
            indent=2,
        )
    )


@app.command("resolve")
def resolve(
    file_name: str = typer.Argument(..., help="File name as it would arrive in a message"),
    directory: Optional[str] = directory_opt(),
):
    """Print where FILE_NAME would be written, without writing anything."""
    config = _stage_config(directory, None)
    try:
        path = resolve_destination(config.directory, file_name)
    except FileSinkError as exc:
        _fail(exc)
    typer.echo(json.dumps({"ok": True, "path": path}, indent=2))


@app.command("config")
def show_config():
    """Print the effective settings."""
    typer.echo(json.dumps(get_settings().model_dump(), indent=2))


if __name__ == "__main__":
    app()
