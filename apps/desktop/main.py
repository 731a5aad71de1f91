import argparse
import logging
import signal
import sys
from typing import Optional, Sequence

from PySide6.QtWidgets import QApplication

from packages.core.logging_ import setup_logging
from packages.core.watch.coordinator import WaitCoordinator
from packages.shared.config import DEFAULT_EXTRA_COMMAND, ConfigError, load_config
from .ui.theme import Theme
from .ui.window import WaitWindow

log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wait-for-file",
        description="Wait for a file to appear, then run a command. "
        "Also offers an extra customizable button.",
    )
    parser.add_argument("-p", "--presence-file", help="file whose appearance triggers the command")
    parser.add_argument("-c", "--command", help="shell command to run once the file exists")
    parser.add_argument(
        "-e",
        "--extra-command",
        default=DEFAULT_EXTRA_COMMAND,
        help='"Label:command" for the extra button (default: %(default)r)',
    )
    parser.add_argument("-i", "--icon", help="icon file path or theme icon name")
    parser.add_argument(
        "--no-auto-unlock",
        action="store_true",
        help="do not run the extra command automatically on startup",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(verbose=args.verbose)

    try:
        cfg = load_config(
            presence_file=args.presence_file,
            command=args.command,
            extra_command=args.extra_command,
            icon=args.icon,
            auto_trigger_extra=not args.no_auto_unlock,
        )
    except ConfigError as e:
        print(f"wait-for-file: {e}", file=sys.stderr)
        return 2

    app = QApplication(sys.argv[:1])
    coordinator = WaitCoordinator(cfg)
    win = WaitWindow(coordinator, Theme.from_system())
    win.show()

    coordinator.auto_trigger()
    coordinator.start()

    # Ctrl+C closes the window, which cancels the watch.
    def signal_handler(sig, frame):
        log.info("Received interrupt signal, shutting down")
        win.close()

    if hasattr(signal, "SIGINT"):
        signal.signal(signal.SIGINT, signal_handler)

    code = app.exec()
    coordinator.join(timeout=2.0)
    log.info("Exiting with state %s", coordinator.state)
    return code


if __name__ == "__main__":
    sys.exit(main())
