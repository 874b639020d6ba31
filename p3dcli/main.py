from __future__ import annotations

import argparse
import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from libp3d.errors import InputParseError, P3dReadError, UnsupportedPolygon
from libp3d.model import (
    DEFAULT_MAP_RESOLUTION,
    DEFAULT_SNAP_EPSILON,
    DEFAULT_SNAP_RESOLUTION,
    CompileOptions,
    EmitMode,
)
from libp3d.p3di import load_p3di
from libp3d.reader import read_p3d_file
from libp3d.summary import P3dSummary, summarize_p3d, summarize_p3di
from libp3d.uvmap import write_uv_map
from libp3d.writer import write_p3d

console = Console()
log = logging.getLogger("p3dcli")

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_PARSE = 3
EXIT_POLYGON = 4
EXIT_READ = 5


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def options_from_args(args: argparse.Namespace) -> CompileOptions:
    model, rig, uv_map = args.model, args.rig, args.map
    if not (model or rig or uv_map):
        model = rig = True
    return CompileOptions(
        generate_model=model,
        generate_rig=rig,
        generate_map=uv_map,
        snap_enabled=not args.no_snap,
        snap_resolution=args.snap_resolution,
        snap_epsilon=args.snap_epsilon,
        map_resolution=args.map_resolution,
    )


def cmd_compile(args: argparse.Namespace) -> int:
    inp = args.input
    if not os.path.isfile(inp):
        console.print(f"[red]Input file not found:[/red] {inp}")
        return EXIT_USAGE

    opts = options_from_args(args)
    out_dir = args.out_dir or os.path.dirname(os.path.abspath(inp))
    stem = os.path.splitext(os.path.basename(inp))[0]
    os.makedirs(out_dir, exist_ok=True)

    model = load_p3di(inp)
    log.debug(f"Loaded {inp}: version {model.version}, {len(model.sockets)} sockets, {len(model.meshes)} root meshes")

    if opts.generate_model:
        write_p3d(model, os.path.join(out_dir, stem + ".p3d"), EmitMode.MODEL, opts)
    if opts.generate_rig:
        write_p3d(model, os.path.join(out_dir, stem + ".p3dr"), EmitMode.RIG, opts)
    if opts.generate_map:
        write_uv_map(
            model,
            os.path.join(out_dir, stem + ".png"),
            opts.map_resolution,
            opts.snap_enabled,
            opts.snap_resolution,
            opts.snap_epsilon,
        )

    console.print("[green]Done.[/green]")
    return EXIT_OK


def print_summary(s: P3dSummary, path: str) -> None:
    console.print(f"[bold]File:[/bold] {path}")
    console.print(f"[bold]Kind:[/bold] {s.kind}")
    console.print(f"[bold]Version:[/bold] {s.version}")
    console.print(f"[bold]Faces:[/bold] {s.face_count}")

    st = Table(title="Sockets")
    st.add_column("Name", overflow="fold")
    st.add_column("Parent", overflow="fold")
    if s.sockets:
        for sock in s.sockets:
            st.add_row(sock.name, sock.parent or "-")
    else:
        st.add_row("(none)", "-")
    console.print(st)

    mt = Table(title="Meshes")
    mt.add_column("Name", overflow="fold")
    mt.add_column("Material")
    mt.add_column("Tris", justify="right")
    mt.add_column("Quads", justify="right")
    if s.meshes:
        for m in s.meshes:
            mt.add_row("  " * m.depth + m.name, m.material or "-", str(m.triangles), str(m.quads))
    else:
        mt.add_row("(none)", "-", "-", "-")
    console.print(mt)


def cmd_summary(args: argparse.Namespace) -> int:
    path = args.file
    if not os.path.isfile(path):
        console.print(f"[red]File not found:[/red] {path}")
        return EXIT_USAGE

    if path.lower().endswith(".p3di"):
        s = summarize_p3di(load_p3di(path))
    else:
        s = summarize_p3d(read_p3d_file(path))
    print_summary(s, path)
    return EXIT_OK


def _positive_int(text: str) -> int:
    value = int(text)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="p3dc")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser("compile", help="Compile a .p3di file (model + rig unless told otherwise)")
    c.add_argument("input")
    c.add_argument("--model", action="store_true", help="Write <stem>.p3d")
    c.add_argument("--rig", action="store_true", help="Write <stem>.p3dr")
    c.add_argument("--map", action="store_true", help="Write <stem>.png UV map")
    c.add_argument("--out-dir", default=None, help="Output directory (default: next to input)")
    c.add_argument("--no-snap", action="store_true", help="Disable UV snapping")
    c.add_argument("--snap-resolution", type=_positive_int, default=DEFAULT_SNAP_RESOLUTION)
    c.add_argument("--snap-epsilon", type=float, default=DEFAULT_SNAP_EPSILON)
    c.add_argument("--map-resolution", type=_positive_int, default=DEFAULT_MAP_RESOLUTION)
    c.set_defaults(fn=cmd_compile)

    s = sub.add_parser("summary", help="Print info about a .p3di, .p3d or .p3dr file")
    s.add_argument("file")
    s.set_defaults(fn=cmd_summary)

    return p


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        return int(args.fn(args))
    except InputParseError as e:
        log.error(f"Parse error: {e}")
        return EXIT_PARSE
    except UnsupportedPolygon as e:
        log.error(str(e))
        return EXIT_POLYGON
    except P3dReadError as e:
        log.error(f"Read error: {e}")
        return EXIT_READ


if __name__ == "__main__":
    raise SystemExit(main())
