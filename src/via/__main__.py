"""Allows `python -m via ...`."""

from __future__ import annotations

from via.cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
