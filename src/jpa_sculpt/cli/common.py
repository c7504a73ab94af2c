import base64
import binascii
from collections.abc import Sequence
from pathlib import Path
from typing import Any, NoReturn

import typer
from pydantic import BaseModel
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from jpa_sculpt.config import settings_from_env
from jpa_sculpt.core.errors import JpaSculptError
from jpa_sculpt.core.source_unit import SourceUnit, load, load_file
from jpa_sculpt.fs.path_security import ProjectRootPathValidator
from jpa_sculpt.generators.context import GenerationContext, GenerationResult
from jpa_sculpt.models import ErrorDetail, Response

console = Console()
err_console = Console(stderr=True)


def build_context(cwd: Path, write: bool) -> GenerationContext:
    return GenerationContext(
        project_root=cwd,
        path_validator=ProjectRootPathValidator(),
        settings=settings_from_env(),
        write=write,
    )


def decode_b64(value: str) -> str:
    try:
        return base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        fail(ErrorDetail(kind="invalid_input", message=f"Source is not valid base64 UTF-8: {exc}"))


def encode_b64(unit: SourceUnit) -> str:
    return base64.b64encode(unit.source).decode("ascii")


def load_unit(cwd: Path, path: str | None, b64_source: str | None, what: str = "entity") -> SourceUnit:
    """Read a unit from ``path`` (inside ``cwd``) or from inline base64 source."""
    if b64_source is not None:
        return load(decode_b64(b64_source), path)
    if path is None:
        fail(ErrorDetail(kind="invalid_input", message=f"Either --{what}-path or --b64-source is required"))
    try:
        target = ProjectRootPathValidator().validate(Path(path), cwd)
        return load_file(target)
    except JpaSculptError as exc:
        fail(ErrorDetail(kind=exc.kind, message=exc.message))
    except FileNotFoundError as exc:
        fail(ErrorDetail(kind="not_found", message=str(exc)))


def emit(response: BaseModel) -> None:
    typer.echo(response.model_dump_json(indent=2, exclude_none=True))


def fail(detail: ErrorDetail) -> NoReturn:
    err_console.print(f"[red]Error[/red] ({detail.kind}): {escape(detail.message)}")
    emit(Response[None](succeed=False, error=detail))
    raise typer.Exit(code=1)


def emit_result(result: GenerationResult, inline: bool = False) -> None:
    """Print the envelope of ``result``; inline runs also return the edited source."""
    response = result.to_response()
    if response.error is not None:
        err_console.print(f"[red]Error[/red] ({response.error.kind}): {escape(response.error.message)}")
        emit(response)
        raise typer.Exit(code=1)
    if inline and response.data is not None:
        response.data.b64_source = encode_b64(result.unit)
    for warning in result.warnings:
        err_console.print(f"[yellow]Warning[/yellow]: {escape(warning)}")
    emit(response)


def render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]]) -> None:
    table = Table(show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*("" if v is None else str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")
