"""Allow ``python -m ccannounce``."""

from __future__ import annotations

from ccannounce.cli.main import main

if __name__ == "__main__":
    main()
