"""Command line entry point."""

from __future__ import annotations

import argparse
import functools
import logging
import sys
from pathlib import Path

from PySide6.QtCore import QCoreApplication, QTimer

from server_browser.config_loader import SettingsLoader
from server_browser.controllers import DirectoryController
from server_browser.models import ErrorKind
from server_browser.utils import AppPaths, begin_client_session, get_app_paths
from server_browser.utils.qt_background_worker import wait_for_background_tasks

logger = logging.getLogger("server_browser")

# Upper bound for one run, covering the fetch and a connection attempt
RUN_TIMEOUT_MS = 30000


def _setup_logging(logs_dir: Path, verbose: bool) -> None:
    """Log to the console and to server_browser.log in the logs directory."""
    level = logging.DEBUG if verbose else logging.INFO
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    console.setLevel(level if verbose else logging.WARNING)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(console)

    try:
        file_handler = logging.FileHandler(logs_dir / "server_browser.log", encoding="utf-8")
    except OSError as e:
        logger.warning("File logging disabled: %s", e)
        return
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)


def _print_entries(controller: DirectoryController) -> None:
    """Print the directory as a table."""
    entries = controller.entries()
    if not entries:
        print("No servers.")
    for index, entry in enumerate(entries):
        flags = ("*" if entry.favourite else " ") + ("L" if entry.requires_password else " ")
        if not entry.is_online:
            state = "offline"
        elif entry.is_compatible(controller.local_version):
            state = "ok"
        else:
            state = f"v{entry.version}"
        print(f"{index:3d} {flags} {entry.display_name:<40.40} {entry.player_count:>7} {state:<10} {entry.address}")
    print(f"{controller.total_players()} players online (local version {controller.local_version})")


def _print_paths(app_paths: AppPaths) -> None:
    mode = "portable" if app_paths.is_portable_mode() else "standard"
    print(f"Mode:       {mode}")
    print(f"Config:     {app_paths.get_config_dir()}")
    print(f"Data:       {app_paths.get_data_dir()}")
    print(f"Favourites: {app_paths.get_favourites_file()}")
    print(f"Settings:   {app_paths.get_settings_file()}")
    print(f"Logs:       {app_paths.get_logs_dir()}")


def _on_join_failed(kind: ErrorKind, detail: str) -> None:
    if kind is ErrorKind.INCOMPATIBLE_VERSION:
        print(f"Unable to connect to server: incorrect software version (server runs {detail!r})", file=sys.stderr)
    else:
        print(f"Unable to connect to server: {detail}", file=sys.stderr)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="server-browser", description="Browse and join multiplayer servers.")
    parser.add_argument("--url", help="Master server URL for this run")
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("list", help="Fetch and list servers")

    join = commands.add_parser("join", help="Join a listed server by index")
    join.add_argument("index", type=int)

    connect = commands.add_parser("connect", help="Connect to an address")
    connect.add_argument("address")

    add = commands.add_parser("add", help="Add a server by address")
    add.add_argument("address")

    favourite = commands.add_parser("favourite", help="Toggle favourite for a listed server")
    favourite.add_argument("index", type=int)

    name = commands.add_parser("name", help="Set the player name")
    name.add_argument("player_name")

    commands.add_parser("paths", help="Show where settings, favourites and logs are stored")

    portable = commands.add_parser("portable", help="Store files next to the install instead of the user profile")
    portable.add_argument("state", choices=("on", "off"))

    return parser


def _run_command(args: argparse.Namespace, controller: DirectoryController) -> int:
    """Run a command once the directory is populated.

    Returns:
        Process exit code
    """
    if args.command == "list":
        _print_entries(controller)
        return 0

    if args.command == "join":
        return 0 if controller.join(args.index) else 1

    if args.command == "favourite":
        state = controller.toggle_favourite(args.index)
        if state is None:
            print(f"No server at index {args.index}", file=sys.stderr)
            return 1
        print("Added to favourites" if state else "Removed from favourites")
        return 0

    return 1


def main(argv: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        argv: Command line arguments, defaults to sys.argv[1:]

    Returns:
        Exit code
    """
    args = _build_parser().parse_args(argv)

    app_paths = get_app_paths()
    if args.command == "portable":
        app_paths.set_portable_mode(args.state == "on")
        print(f"Files are stored in {app_paths.get_config_dir()}")
        return 0
    if args.command == "paths":
        _print_paths(app_paths)
        return 0

    app_paths.ensure_directories()
    _setup_logging(app_paths.get_logs_dir(), args.verbose)

    settings_loader = SettingsLoader(app_paths.get_settings_file())
    settings = settings_loader.load()

    session = functools.partial(begin_client_session, timeout=settings.connect_timeout)
    controller = DirectoryController(
        app_paths.get_favourites_file(),
        settings,
        settings_loader,
        session,
    )
    controller.join_failed.connect(_on_join_failed)

    if args.command == "name":
        return 0 if controller.set_player_name(args.player_name) else 1

    if args.command == "connect":
        return 0 if controller.join_raw(args.address) else 1

    controller.open(fetch=False)
    try:
        if args.command == "add":
            entry = controller.add_server(args.address)
            if entry is None:
                return 1
            print(f"Added {entry.address}")
            return 0

        app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
        result = {"code": 1}

        def on_fetch_completed(merged: bool) -> None:
            if not merged:
                print("Could not fetch the server list, showing favourites only.", file=sys.stderr)
            result["code"] = _run_command(args, controller)
            app.quit()

        def on_timeout() -> None:
            print("Timed out waiting for the master server.", file=sys.stderr)
            app.quit()

        controller.fetch_completed.connect(on_fetch_completed)
        QTimer.singleShot(0, lambda: controller.refresh(args.url))
        QTimer.singleShot(RUN_TIMEOUT_MS, on_timeout)
        app.exec()
        return result["code"]
    finally:
        controller.close()
        if not wait_for_background_tasks(int(settings.fetch_timeout * 1000) + 1000):
            logger.warning("Background fetch still running at exit")


if __name__ == "__main__":
    sys.exit(main())
