r"""Entry point of ``python -m multicurl``."""

from __future__ import annotations

from multicurl.cli import main

if __name__ == "__main__":
    main(prog_name="multicurl")
