"""Process control for the website server: start, stop and restart a detached server."""

from __future__ import annotations

import argparse
import os
import signal
import subprocess
import sys
import time
from pathlib import Path

from website.config import Settings

RESTART_DELAY = 1.0


def read_pid(pid_path: Path) -> int | None:
    """Read the PID recorded in ``pid_path``, or None if absent or unreadable."""
    try:
        first_line = pid_path.read_text().splitlines()[0]
        return int(first_line.strip())
    except (OSError, IndexError, ValueError):
        return None


def build_server_command(settings: Settings) -> list[str]:
    """uvicorn command line serving the app with the configured worker pool."""
    command = [
        sys.executable,
        "-m",
        "uvicorn",
        "website.main:app",
        "--workers",
        str(settings.workers),
    ]
    if settings.socket_path is not None:
        command += ["--uds", str(settings.socket_path)]
    else:
        command += ["--host", settings.host, "--port", str(settings.port)]
    return command


def server_environment(settings: Settings) -> dict[str, str]:
    """Environment for the server process, pinned to this site's base directory."""
    env = os.environ.copy()
    env["WEBSITE_BASE_DIR"] = str(settings.base_dir.resolve())
    env["WEBSITE_NAME"] = settings.name
    return env


def start(settings: Settings) -> int | None:
    """Spawn the detached server and record its PID. Returns the PID, or None."""
    pid_path = settings.pid_path
    if pid_path.exists():
        print(
            f"PID file {pid_path} already exists, stop the running server first "
            "or configure a different pid file"
        )
        return None

    if settings.socket_path is not None and settings.socket_path.exists():
        print(f"Removing stale socket {settings.socket_path}")
        settings.socket_path.unlink()

    print(f"Starting {settings.name}...")
    process = subprocess.Popen(
        build_server_command(settings),
        cwd=settings.base_dir,
        env=server_environment(settings),
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )
    pid_path.parent.mkdir(parents=True, exist_ok=True)
    pid_path.write_text(f"{process.pid}\n")
    print(f"Started pid {process.pid}")
    return process.pid


def stop(settings: Settings) -> bool:
    """Send SIGTERM to the recorded server process. Returns whether a PID file was found."""
    pid_path = settings.pid_path
    if not pid_path.exists():
        print("PID file doesn't exist...")
        return False

    pid = read_pid(pid_path)
    if pid is None:
        print(f"PID file {pid_path} is unreadable, removing it")
    else:
        print(f"Killing pid {pid} ...")
        try:
            os.kill(pid, signal.SIGTERM)
        except ProcessLookupError:
            print(f"No process with pid {pid}, removing stale PID file")
    pid_path.unlink(missing_ok=True)
    return True


def restart(settings: Settings) -> int | None:
    """Stop, wait briefly, then start again."""
    stop(settings)
    time.sleep(RESTART_DELAY)
    return start(settings)


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="website-ctl",
        description="Control a detached website server",
    )
    parser.add_argument("--base", "-b", help="Site base directory (default: WEBSITE_BASE_DIR or .)")
    parser.add_argument("--workers", "-w", type=int, help="Number of worker processes")

    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("start", help="Start the server")
    subparsers.add_parser("stop", help="Stop the server")
    subparsers.add_parser("restart", help="Restart the server")

    args = parser.parse_args(argv)

    overrides: dict[str, object] = {}
    if args.base:
        overrides["base_dir"] = Path(args.base)
    if args.workers is not None:
        if args.workers < 1:
            print("Error: --workers must be at least 1")
            sys.exit(1)
        overrides["workers"] = args.workers
    settings = Settings(**overrides)  # type: ignore[arg-type]

    if args.command == "start":
        start(settings)
    elif args.command == "stop":
        stop(settings)
    elif args.command == "restart":
        restart(settings)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
