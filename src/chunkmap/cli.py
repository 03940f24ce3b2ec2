"""Command line interface for inspecting chunk manifests."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import Callable

import click
from rich.console import Console
from rich.table import Table

from chunkmap import __version__
from chunkmap.crypto.unwrap import AesKeyWrapUnwrapper
from chunkmap.diagnostics import Diagnostics
from chunkmap.errors import ConfigurationError, ManifestFormatError
from chunkmap.manifest import (
    FileGroup,
    convert_chunk_encryption_keys,
    load_manifest,
    reconstruct,
    resolve_options,
)

EXIT_SUCCESS = 0
EXIT_USAGE = 1
EXIT_FS = 3
EXIT_CORRUPT = 4

console = Console()


def _package_version() -> str:
    try:
        return version("chunkmap")
    except PackageNotFoundError:
        return __version__


def _short(data: bytes, limit: int = 16) -> str:
    rendered = data.hex()
    if not rendered:
        return "-"
    return rendered if len(rendered) <= limit * 2 else rendered[: limit * 2] + "…"


def _parse_kek(values: tuple[str, ...]) -> dict[bytes, bytes]:
    table: dict[bytes, bytes] = {}
    for value in values:
        signature, sep, kek = value.partition("=")
        if not sep:
            raise click.BadParameter(f"expected SIGNATURE=KEK, got {value!r}", param_hint="--kek")
        try:
            table[bytes.fromhex(signature)] = bytes.fromhex(kek)
        except ValueError as exc:
            raise click.BadParameter(f"not hex: {value!r}", param_hint="--kek") from exc
    return table


def _handle_action(action: Callable[[], None]) -> int:
    try:
        action()
    except ManifestFormatError as exc:
        console.print(f"[red]Invalid manifest:[/red] {exc}")
        return EXIT_CORRUPT
    except ConfigurationError as exc:
        console.print(f"[red]Invalid option:[/red] {exc}")
        return EXIT_USAGE
    except FileNotFoundError as exc:
        console.print(f"[red]File not found:[/red] {exc}")
        return EXIT_FS
    except PermissionError as exc:
        console.print(f"[red]Permission denied:[/red] {exc}")
        return EXIT_FS
    except OSError as exc:  # noqa: BLE001
        console.print(f"[red]Filesystem error:[/red] {exc}")
        return EXIT_FS
    return EXIT_SUCCESS


def _print_group(number: int, group: FileGroup, diagnostics: Diagnostics, *, resolve: bool) -> None:
    console.print(f"[bold]File group {number}[/bold]")

    containers = Table(title="Containers")
    containers.add_column("Index", justify="right")
    containers.add_column("Host")
    containers.add_column("Chunk", justify="right")
    containers.add_column("Checksum")
    containers.add_column("Key")
    for index, container in group.containers.items():
        for position, chunk in enumerate(container):
            containers.add_row(
                str(index) if position == 0 else "",
                (container.host or "-") if position == 0 else "",
                str(position),
                _short(chunk.checksum),
                _short(chunk.encryption_key),
            )
    console.print(containers)

    files = Table(title="Files")
    files.add_column("Signature")
    files.add_column("References", justify="right")
    if resolve:
        files.add_column("Resolved chunks", justify="right")
    for signature in group.file_signatures():
        references = group.chunk_references_for(signature) or ()
        row = [_short(signature), str(len(references))]
        if resolve:
            located = group.locate(signature, diagnostics)
            row.append(str(sum(len(chunks) for chunks in located.values())))
        files.add_row(*row)
    console.print(files)


def _print_diagnostics(diagnostics: Diagnostics) -> None:
    if not len(diagnostics):
        console.print("[green]No diagnostics.[/green]")
        return
    console.print(f"[yellow]{len(diagnostics)} diagnostic(s):[/yellow]")
    for event in diagnostics:
        console.print(f"  - {event.describe()}", markup=False)


@click.group(
    context_settings={"help_option_names": ["-h", "--help"]},
    invoke_without_command=False,
)
@click.version_option(version=_package_version(), prog_name="chunkmap")
def cli() -> None:
    """Rebuild file-to-chunk maps from storage manifests."""


@cli.command(
    help="Show containers, file signatures and diagnostics for a JSON manifest.",
    epilog="Example:\n  chunkmap inspect manifest.json --resolve",
)
@click.argument("manifest_path", type=click.Path(path_type=Path))
@click.option(
    "--server-errors",
    type=click.Choice(["report", "exclude"], case_sensitive=False),
    default="report",
    show_default=True,
    help="Whether files flagged by the server are kept or dropped.",
)
@click.option(
    "--resolve/--no-resolve",
    default=False,
    help="Also validate every file's chunk references.",
)
@click.pass_context
def inspect(ctx: click.Context, manifest_path: Path, server_errors: str, resolve: bool) -> None:
    def _run() -> None:
        diagnostics = Diagnostics()
        manifest = load_manifest(manifest_path)
        groups = reconstruct(manifest, resolve_options(server_errors=server_errors), diagnostics)
        for number, group in enumerate(groups):
            _print_group(number, group, diagnostics, resolve=resolve)
        _print_diagnostics(diagnostics)

    ctx.exit(_handle_action(_run))


@cli.command(
    help="Unwrap chunk encryption keys (RFC 3394) and print the result.",
    epilog="Example:\n  chunkmap convert manifest.json --kek 66310a=000102...0f",
)
@click.argument("manifest_path", type=click.Path(path_type=Path))
@click.option("--kek", "keks", multiple=True, help="SIGNATURE_HEX=KEK_HEX, repeatable.")
@click.option(
    "--key-type/--no-key-type",
    default=True,
    help="Expect a leading key-type byte on wrapped chunk keys.",
)
@click.option(
    "--server-errors",
    type=click.Choice(["report", "exclude"], case_sensitive=False),
    default="report",
    show_default=True,
    help="Whether files flagged by the server are kept or dropped.",
)
@click.pass_context
def convert(
    ctx: click.Context,
    manifest_path: Path,
    keks: tuple[str, ...],
    key_type: bool,
    server_errors: str,
) -> None:
    kek_table = _parse_kek(keks)
    unwrapper = AesKeyWrapUnwrapper() if key_type else AesKeyWrapUnwrapper(key_type=None)

    def _run() -> None:
        diagnostics = Diagnostics()
        manifest = load_manifest(manifest_path)
        groups = reconstruct(manifest, resolve_options(server_errors=server_errors), diagnostics)
        for number, group in enumerate(groups):
            converted = convert_chunk_encryption_keys(group, unwrapper, kek_table, diagnostics)
            _print_group(number, converted, diagnostics, resolve=False)
        _print_diagnostics(diagnostics)

    ctx.exit(_handle_action(_run))


@cli.command(name="version", help="Print the chunkmap version.")
def version_cmd() -> None:
    console.print(f"chunkmap {_package_version()}")


def main(argv: list[str] | None = None) -> int:
    try:
        return cli.main(args=argv, prog_name="chunkmap", standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return EXIT_USAGE
    except SystemExit as exc:  # noqa: TRY003
        code = exc.code if isinstance(exc.code, int) else EXIT_USAGE
        return code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
