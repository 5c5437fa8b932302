"""Module entrypoint for running dkimconf as ``python -m dkimconf``."""

from __future__ import annotations

from dkimconf.cli import main


if __name__ == "__main__":
    main()
