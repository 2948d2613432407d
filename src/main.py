"""Script entry point.

Runs the CLI with `python -m main` from `src/`, next to the `tempo` console
script installed by pip.
"""

from __future__ import annotations

import sys

# Windows terminals may default to cp1252.
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
