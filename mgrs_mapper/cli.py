"""Command line front-end for a map session.

Configuration comes from the ``MGRS_MAPPER_*`` environment variables
(see :class:`mgrs_mapper.core.config.MapperConfig`).  Domain errors are
printed on stderr and exit with status 1.

Examples::

    mgrs-mapper add 15TVK1234567890 --name "Drop zone"
    mgrs-mapper draw 45,-100 45,-99 46,-99 46,-100
    mgrs-mapper list
    mgrs-mapper export --out exports/
"""

from __future__ import annotations

import argparse
import logging
import sys

from mgrs_mapper import __version__
from mgrs_mapper.coordinates import from_mgrs, to_mgrs
from mgrs_mapper.core.config import MapperConfig
from mgrs_mapper.core.exceptions import MapperError
from mgrs_mapper.models.events import Created
from mgrs_mapper.session import MapSession

logger = logging.getLogger("mgrs_mapper.cli")


# ---------------------------------------------------------------------------
# Argument types
# ---------------------------------------------------------------------------


def _lat_lon_pair(text: str) -> tuple[float, float]:
    """Parse ``"LAT,LON"`` into a ``(lat, lon)`` tuple."""
    parts = text.split(",")
    if len(parts) != 2:
        msg = f"expected LAT,LON, got {text!r}"
        raise argparse.ArgumentTypeError(msg)
    try:
        return float(parts[0]), float(parts[1])
    except ValueError:
        msg = f"expected numeric LAT,LON, got {text!r}"
        raise argparse.ArgumentTypeError(msg) from None


def _confirm(prompt: str) -> bool:
    try:
        answer = input(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _cmd_list(session: MapSession, args: argparse.Namespace) -> int:
    print(f"{session.project_name} ({len(session.aois)} AOIs)")
    for aoi in session.aois:
        details = f" ({aoi.dimensions})" if aoi.dimensions else ""
        print(f"{aoi.id}  {aoi.name}  {aoi.mgrs_coordinate}{details}")
    return 0


def _cmd_add(session: MapSession, args: argparse.Namespace) -> int:
    aoi = session.add_from_mgrs(args.mgrs, args.name)
    print(f"{aoi.id}  {aoi.name}  {aoi.mgrs_coordinate}")
    return 0


def _cmd_draw(session: MapSession, args: argparse.Namespace) -> int:
    aoi = session.handle_draw_event(Created(vertices=list(args.vertices), name=args.name))
    print(f"{aoi.id}  {aoi.name}  {aoi.mgrs_coordinate} ({aoi.dimensions})")
    return 0


def _cmd_rename(session: MapSession, args: argparse.Namespace) -> int:
    aoi = session.rename_aoi(args.id, args.name)
    print(f"{aoi.id}  {aoi.name}")
    return 0


def _cmd_delete(session: MapSession, args: argparse.Namespace) -> int:
    aoi = session.repository.get(args.id)
    if not args.yes and not _confirm(f"Delete AOI '{aoi.name}'?"):
        print("Cancelled")
        return 0
    session.delete_aoi(args.id)
    print(f"Deleted {aoi.id}")
    return 0


def _cmd_clear(session: MapSession, args: argparse.Namespace) -> int:
    if not args.yes and not _confirm(f"Delete all {len(session.aois)} AOIs?"):
        print("Cancelled")
        return 0
    count = session.delete_all()
    print(f"Deleted {count} AOIs")
    return 0


def _cmd_project(session: MapSession, args: argparse.Namespace) -> int:
    session.rename_project(args.name)
    print(session.project_name)
    return 0


def _cmd_import(session: MapSession, args: argparse.Namespace) -> int:
    added = session.import_file(args.file, args.media_type)
    print(f"Imported {len(added)} AOIs")
    return 0


def _cmd_export(session: MapSession, args: argparse.Namespace) -> int:
    path = session.export_to_directory(args.out)
    print(path)
    return 0


def _cmd_to_mgrs(config: MapperConfig, args: argparse.Namespace) -> int:
    print(to_mgrs(args.lat, args.lon, args.precision if args.precision is not None else config.mgrs_precision))
    return 0


def _cmd_from_mgrs(config: MapperConfig, args: argparse.Namespace) -> int:
    lat, lon = from_mgrs(args.mgrs)
    print(f"{lat:.6f},{lon:.6f}")
    return 0


# Commands that need no session (pure coordinate conversion)
_STATELESS_COMMANDS = {"to-mgrs", "from-mgrs"}


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mgrs-mapper",
        description="Draw, name, persist and export MGRS-annotated Areas of Interest",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="List the project's AOIs")
    p.set_defaults(func=_cmd_list)

    p = sub.add_parser("add", help="Add a square AOI around an MGRS reference")
    p.add_argument("mgrs", help="MGRS reference, e.g. 15TVK1234567890")
    p.add_argument("--name", help="AOI name (default: AOI <n>)")
    p.set_defaults(func=_cmd_add)

    p = sub.add_parser("draw", help="Add a polygon AOI from LAT,LON vertices")
    p.add_argument("vertices", nargs="+", type=_lat_lon_pair, metavar="LAT,LON")
    p.add_argument("--name", help="AOI name (default: AOI <n>)")
    p.set_defaults(func=_cmd_draw)

    p = sub.add_parser("rename", help="Rename an AOI")
    p.add_argument("id")
    p.add_argument("name")
    p.set_defaults(func=_cmd_rename)

    p = sub.add_parser("delete", help="Delete an AOI")
    p.add_argument("id")
    p.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    p.set_defaults(func=_cmd_delete)

    p = sub.add_parser("clear", help="Delete every AOI")
    p.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    p.set_defaults(func=_cmd_clear)

    p = sub.add_parser("project", help="Rename the project")
    p.add_argument("name")
    p.set_defaults(func=_cmd_project)

    p = sub.add_parser("import", help="Import Polygon features from a GeoJSON file")
    p.add_argument("file")
    p.add_argument("--media-type", default=None, help="Media type reported for the file")
    p.set_defaults(func=_cmd_import)

    p = sub.add_parser("export", help="Export every AOI as one GeoJSON file")
    p.add_argument("--out", default=None, help="Target directory (default: MGRS_MAPPER_EXPORT_DIR)")
    p.set_defaults(func=_cmd_export)

    p = sub.add_parser("to-mgrs", help="Convert a coordinate to MGRS")
    p.add_argument("lat", type=float)
    p.add_argument("lon", type=float)
    p.add_argument("--precision", type=int, default=None, choices=range(6))
    p.set_defaults(func=_cmd_to_mgrs)

    p = sub.add_parser("from-mgrs", help="Convert MGRS to the centre coordinate of its cell")
    p.add_argument("mgrs")
    p.set_defaults(func=_cmd_from_mgrs)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point of the ``mgrs-mapper`` console script."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = MapperConfig.from_env()
    except (MapperError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
    )

    try:
        if args.command in _STATELESS_COMMANDS:
            return args.func(config, args)
        session = MapSession.open(config)
        return args.func(session, args)
    except MapperError as exc:
        logger.debug("Command failed | command=%s | error=%s", args.command, exc.to_error_dict())
        print(f"error: {exc.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
