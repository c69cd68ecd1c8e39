"""
Start or stop the local Firestore emulator used during development.
"""

from __future__ import annotations

import argparse
import logging
import os
import signal
import subprocess
import sys

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8816


def build_start_command(port: int, host: str = "0.0.0.0") -> list[str]:
    return [
        "gcloud",
        "emulators",
        "firestore",
        "start",
        f"--host-port={host}:{port}",
    ]


def find_listening_pids(port: int) -> list[int]:
    """Return the ids of processes bound to the TCP port, via lsof."""
    result = subprocess.run(
        ["lsof", "-t", f"-iTCP:{port}", "-sTCP:LISTEN"],
        capture_output=True,
        text=True,
        check=False,
    )
    # lsof exits with 1 when nothing matches.
    if result.returncode not in (0, 1):
        raise RuntimeError(f"lsof failed: {result.stderr.strip()}")
    return [int(line) for line in result.stdout.split() if line.strip().isdigit()]


def kill_port(port: int) -> int:
    pids = find_listening_pids(port)
    for pid in pids:
        logger.info("Killing process %d listening on port %d", pid, port)
        try:
            os.kill(pid, signal.SIGKILL)
        except ProcessLookupError:
            logger.info("Process %d already exited", pid)
    if not pids:
        logger.info("Nothing is listening on port %d", port)
    return len(pids)


def main() -> int:
    parser = argparse.ArgumentParser(description="Local Firestore emulator")
    parser.add_argument("action", choices=["start", "kill"])
    parser.add_argument(
        "-p",
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help="Emulator port",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Emulator bind address (start only)",
    )
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO)

    if args.action == "kill":
        kill_port(args.port)
        return 0

    command = build_start_command(args.port, args.host)
    logger.info("Running %s", " ".join(command))
    try:
        return subprocess.call(command)
    except FileNotFoundError:
        logger.error("gcloud is not installed or not on PATH")
        return 1
    except KeyboardInterrupt:
        return 0


if __name__ == "__main__":
    sys.exit(main())
