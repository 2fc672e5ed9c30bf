"""Interactive launcher for safe_backup.

Prompts for a file name and a command (backup, restore, delete), runs it
against the working directory and records the outcome in logfile.txt.

Usage:
    python run.py
    python run.py --config config/config.json --log-level DEBUG
    python run.py --workdir /path/to/files
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from safe_backup.backup.backup_config import load_config
from safe_backup.backup.backup_manager import COMMANDS, BackupManager
from safe_backup.backup.errors import UNKNOWN_COMMAND
from safe_backup.database.action_logger import ActionLogger

logger = logging.getLogger("safe_backup")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2

QUIT_WORDS = ("exit", "quit")


def prompt(text: str) -> str:
    return input(text).strip()


def printable(text: str) -> str:
    """Replace undecodable filename bytes so the text can be printed."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def run_once(manager: BackupManager) -> int:
    """Ask for one file name and one command, run it, return the exit code."""
    try:
        filename = prompt("Please enter your file name: ")
        if filename.lower() in QUIT_WORDS:
            print("Bye.")
            return EXIT_OK
        command = prompt(f"Please enter your command ({', '.join(COMMANDS)}): ")
    except (EOFError, KeyboardInterrupt):
        print(file=sys.stderr)
        print("[error] no input", file=sys.stderr)
        return EXIT_USAGE
    except UnicodeDecodeError:
        print("[error] input is not valid text", file=sys.stderr)
        return EXIT_USAGE

    result = manager.run(command, filename)
    if result.success:
        shown = Path(result.path).name if result.path else filename
        messages = {
            "backup": f"Your backup created: {shown}",
            "restore": f"Your file has been restored: {shown}",
            "delete": f"Deleted: {filename}",
        }
        print(printable(messages[command.strip().lower()]))
        return EXIT_OK

    print(printable(f"[error] {result.error}: {result.message}"), file=sys.stderr)
    if result.error == UNKNOWN_COMMAND:
        return EXIT_USAGE
    return EXIT_FAILURE


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Safe Backup - back up, restore or delete a file",
    )
    parser.add_argument(
        "-c", "--config",
        default=None,
        help="Path to config.json (default: config/config.json if present)",
    )
    parser.add_argument(
        "-w", "--workdir",
        default=".",
        help="Directory holding the files and logfile.txt (default: .)",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("LOG_LEVEL", "WARNING"),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
    except (OSError, ValueError) as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return EXIT_USAGE

    workdir = Path(args.workdir)
    action_logger = ActionLogger(str(workdir / config["backup"]["log_file"]))
    manager = BackupManager(action_logger, workdir=str(workdir), config=config)
    logger.debug("Working directory: %s", workdir.resolve())
    return run_once(manager)


if __name__ == "__main__":
    sys.exit(main())
