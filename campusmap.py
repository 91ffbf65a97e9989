# --- campusmap.py ---
import argparse
import logging
import sys

from campusmap_lib.campus import Campus
from campusmap_lib.config import DEFAULT_CONFIG_PATH, ConfigService
from campusmap_lib.errors import CampusMapError
from campusmap_lib.log_utils import setup_logging
from campusmap_lib.schema import Service

SERVICE_CHOICES = {
    "dining": Service.DINING,
    "library": Service.LIBRARY,
    "parking": Service.PARKING,
}
SHELL_SERVICES = {"d": "dining", "l": "library", "p": "parking"}


def get_cli_args(argv=None):
    """Configures and parses command-line arguments."""
    p = argparse.ArgumentParser(
        description="Finds routes between campus buildings and highlights them "
        "on an ASCII campus map."
    )
    p.add_argument("-t", "--topology", help="Path to the building list file.")
    p.add_argument("-m", "--map", help="Path to the campus map file.")
    p.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the settings file (default: {DEFAULT_CONFIG_PATH}).",
    )
    # Query arguments
    g_query = p.add_argument_group("Queries")
    g_query.add_argument(
        "--path",
        nargs=2,
        type=int,
        metavar=("SRC", "TGT"),
        help="Highlight the shortest path between two building ids.",
    )
    g_query.add_argument(
        "--service",
        choices=sorted(SERVICE_CHOICES),
        help="Highlight all buildings offering a service.",
    )
    g_query.add_argument(
        "--list", action="store_true", help="Print the building list."
    )
    g_query.add_argument(
        "--locate",
        nargs=2,
        type=int,
        metavar=("ROW", "COL"),
        help="Print the building drawn at a map cell.",
    )
    g_query.add_argument(
        "-i",
        "--interactive",
        action="store_true",
        help="Start an interactive prompt after running the other queries.",
    )
    g_query.add_argument(
        "--no-color",
        action="store_true",
        help="Render the map without ANSI highlighting.",
    )
    # Logging arguments
    g_log = p.add_argument_group("Logging & Output")
    g_log.add_argument(
        "-v", "--verbose", action="store_true", help="Enable INFO logging."
    )
    g_log.add_argument(
        "--color-logs", action="store_true", help="Enable colored logging."
    )
    g_log.add_argument(
        "--log-file", metavar="FILE", help="Redirect log output to a file."
    )
    g_log.add_argument(
        "-d",
        "--debug",
        nargs="?",
        const="all",
        dest="debug_topics",
        metavar="TOPICS",
        help="Enable DEBUG logging (all,campus,graph,topology,parse,render,config).",
    )
    return p.parse_args(argv)


def build_campus(args) -> Campus:
    """Loads the campus from the files named on the command line or in config."""
    config = ConfigService(args.config)
    settings = config.get_settings()
    topology_file, map_file = config.input_files(settings, args.topology, args.map)
    return Campus.from_files(
        topology_file,
        map_file,
        **config.style_args(settings, use_color=not args.no_color),
    )


def show_path(campus: Campus, src: int, tgt: int, out=print):
    path = campus.shortest_path(src, tgt)
    out(campus.render())
    out(campus.selection_listing(path, campus.path_style))
    out(f"  Total cost: {campus.route_cost(path)}")


def show_service(campus: Campus, name: str, out=print):
    selected = campus.select_by_service(SERVICE_CHOICES[name])
    out(campus.render())
    out(campus.selection_listing(selected) or f"  No building offers {name}.")


def show_overview(campus: Campus, out=print):
    campus.reset_view()
    out(campus.building_listing())
    out(campus.render())


def run_interactive(campus: Campus, read=input, out=print):
    """
    Reads commands until 'x' or end of input:
    'm' map, 'd'/'l'/'p' services, '<src> <tgt>' shortest path.
    """
    log = logging.getLogger("campusmap.main")
    show_overview(campus, out)
    while True:
        try:
            line = read("campusmap> ")
        except EOFError:
            break
        cmd = line.lower().split()
        if not cmd:
            continue
        try:
            if cmd[0] == "x":
                break
            elif cmd[0] == "m":
                show_overview(campus, out)
            elif cmd[0] in SHELL_SERVICES:
                show_service(campus, SHELL_SERVICES[cmd[0]], out)
            elif len(cmd) == 2:
                show_path(campus, int(cmd[0]), int(cmd[1]), out)
            else:
                out(f"Unknown command: {line.strip()}")
        except ValueError as e:
            out(f"Error: {e}")
        except CampusMapError as e:
            log.debug("Query failed: %r", e)
            out(f"Error: {e}")


def main(argv=None) -> int:
    """Main entry point for the campusmap CLI."""
    args = get_cli_args(argv)
    log_level = logging.INFO if args.verbose else logging.WARNING
    if args.debug_topics:
        log_level = logging.DEBUG

    setup_logging(log_level, args.color_logs, args.debug_topics, args.log_file)
    log = logging.getLogger("campusmap.main")

    log.info("--- CAMPUSMAP CLI Initialized ---")
    log.debug("Arguments received: %s", vars(args))

    try:
        campus = build_campus(args)
    except FileNotFoundError as e:
        log.critical("Input file not found: %s", e.filename)
        return 1
    except CampusMapError as e:
        log.critical("Failed to load campus data: %s", e)
        return 1

    try:
        if args.list:
            print(campus.building_listing())
        if args.locate:
            row, col = args.locate
            bid = campus.locate(row, col)
            if bid is None:
                print(f"No building at row {row}, column {col}.")
            else:
                print(campus.buildings[bid])
        if args.service:
            show_service(campus, args.service)
        if args.path:
            show_path(campus, *args.path)
    except CampusMapError as e:
        log.error("%s", e)
        return 2

    if args.interactive:
        run_interactive(campus)
    elif not (args.list or args.locate or args.service or args.path):
        show_overview(campus)
    return 0


if __name__ == "__main__":
    sys.exit(main())
