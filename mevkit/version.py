"""Build version string derived from the git checkout."""

from __future__ import annotations

import argparse
import subprocess
from collections.abc import Sequence


def _git(args: Sequence[str], cwd: str | None) -> str:
    completed = subprocess.run(["git", *args], capture_output=True, cwd=cwd, check=False)
    return completed.stdout.decode("utf-8")


def get_git_commit(cwd: str | None = None) -> str:
    """Return the version as a quoted literal: "branch-commit[-dirty]@date"."""
    output = _git(["log", "-1", "--pretty=format:%h,%ad", "--date=format:%Y-%m-%d"], cwd).strip()
    parts = output.split(",")
    if len(parts) != 2:
        raise ValueError("Unexpected output format")
    commit, date = parts

    dirty = "-dirty" if _git(["status", "-s"], cwd) else ""
    branch = _git(["rev-parse", "--abbrev-ref", "HEAD"], cwd).strip()

    return f'"{branch}-{commit}{dirty}@{date}"'


def build_version(cwd: str | None = None) -> str:
    """Return the version string without surrounding quotes."""
    return get_git_commit(cwd)[1:-1]


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print the build version of a git checkout.")
    parser.add_argument("--cwd", default=None, help="directory of the checkout")
    args = parser.parse_args(argv)
    print(build_version(args.cwd))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())