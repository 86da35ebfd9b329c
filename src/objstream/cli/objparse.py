"""
objparse - Wavefront OBJ Parser Command-Line Interface
======================================================

This module implements the command-line interface for the streaming OBJ
parser. It reads a file in a single pass and reports what it found.

Usage Examples
--------------
Record counts:
    $ objparse model.obj

Every event, in document order:
    $ objparse model.obj --dump

Normalized copy (comments, names, groups and materials removed):
    $ objparse model.obj -o clean.obj

Verbose mode (debug logging from the lexer and parser):
    $ objparse -v model.obj
"""

import codecs
import contextlib
import logging
import os
from pathlib import Path
from typing import Optional

import click

from objstream import __version__, parse_file
from objstream.cli.errors import handle_cli_exception
from objstream.sink import GeometrySink, IndexTriplet, TeeSink
from objstream.writer import ObjWriter, format_float

# Suffix of the file the normalized copy is written to before it replaces --output
PARTIAL_SUFFIX = ".part"


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


class EventPrinter(GeometrySink):
    """Echoes each event as one line of text."""

    def _echo(self, name: str, *values: float) -> None:
        click.echo(f"{name} " + " ".join(format_float(value) for value in values))

    def on_vertex(self, x: float, y: float, z: float, w: float) -> None:
        self._echo("vertex", x, y, z, w)

    def on_texture(self, u: float, v: float, w: float) -> None:
        self._echo("texture", u, v, w)

    def on_normal(self, x: float, y: float, z: float) -> None:
        self._echo("normal", x, y, z)

    def on_parameter(self, a: float, b: float, c: float) -> None:
        self._echo("parameter", a, b, c)

    def on_face(self, indices: list[IndexTriplet], count: int) -> None:
        groups = " ".join(
            f"{t.position}/{t.texture}/{t.normal}" for t in indices[:count]
        )
        click.echo(f"face {groups}")


def _check_encoding(ctx, param, value: str) -> str:
    try:
        codecs.lookup(value)
    except LookupError:
        raise click.BadParameter(f"unknown encoding {value!r}") from None
    return value


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write a normalized OBJ file",
)
@click.option(
    "--dump",
    is_flag=True,
    help="Print every geometry event in document order",
)
@click.option(
    "--encoding",
    default="utf-8",
    show_default=True,
    help="Text encoding of the input file",
    callback=_check_encoding,
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="objparse")
def main(
    input_file: Path,
    output: Optional[Path],
    dump: bool,
    encoding: str,
    verbose: bool,
) -> None:
    """
    Parse a Wavefront OBJ file and report its geometry.

    INPUT_FILE is the .obj file to read. Vertices, texture coordinates,
    normals, parameter-space vertices and faces are recognized; object,
    group, material and smoothing statements are skipped.

    \b
    Examples:
        objparse cube.obj              # Print record counts
        objparse cube.obj --dump       # Print every event
        objparse cube.obj -o out.obj   # Write a normalized copy
    """
    setup_logging(verbose)

    staged: Optional[Path] = None
    try:
        with contextlib.ExitStack() as stack:
            sinks: list[GeometrySink] = []
            if dump:
                sinks.append(EventPrinter())

            writer = None
            if output is not None:
                # Written beside the target and moved over it after a clean parse
                part = output.with_name(output.name + PARTIAL_SUFFIX)
                stream = stack.enter_context(open(part, "w", encoding="utf-8"))
                staged = part
                writer = ObjWriter(
                    stream,
                    header=f"Normalized from {input_file.name} by objparse {__version__}",
                )
                sinks.append(writer)

            if not sinks:
                sink = GeometrySink()
            elif len(sinks) == 1:
                sink = sinks[0]
            else:
                sink = TeeSink(*sinks)

            if verbose:
                click.echo(f"Parsing {input_file}...")

            _, stats = parse_file(input_file, sink, encoding=encoding)

        if staged is not None:
            os.replace(staged, output)
            staged = None

        if not dump:
            click.echo(f"{input_file}:")
            click.echo(str(stats))

        if writer is not None:
            click.echo(f"Wrote {writer.records_written} statements to {output}")

    except Exception as e:
        if staged is not None:
            staged.unlink(missing_ok=True)
        handle_cli_exception(e, verbose=verbose, error_type="Parse")


if __name__ == "__main__":
    main()
