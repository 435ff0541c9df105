"""portkill - command-line front end."""

import argparse
import json
import logging
import sys

from portkill.commands import invoke


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one subcommand per boundary operation."""
    parser = argparse.ArgumentParser(
        prog="portkill",
        description="Find the processes bound to a port and terminate them.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    check = subparsers.add_parser("check", help="List processes bound to a port")
    check.add_argument("port")

    kill = subparsers.add_parser("kill", help="Forcefully terminate a process")
    kill.add_argument("pid")

    graceful = subparsers.add_parser("graceful-kill", help="Ask a process to shut down")
    graceful.add_argument("pid")

    detail = subparsers.add_parser("detail", help="Show details of a process")
    detail.add_argument("pid")
    detail.add_argument("--port", help="Port the process was found on")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the portkill command."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "check":
        response = invoke("check_port", args.port)
    elif args.command == "kill":
        response = invoke("kill_process", args.pid)
    elif args.command == "graceful-kill":
        response = invoke("graceful_kill_process", args.pid)
    else:
        response = invoke("get_process_detail", {"pid": args.pid, "port": args.port})

    print(json.dumps(response.to_dict(), indent=2))
    return 0 if response.ok else 1


if __name__ == "__main__":
    sys.exit(main())
