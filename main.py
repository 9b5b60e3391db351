from __future__ import annotations

from panozoom.scripts.panozoom_cli import main

if __name__ == "__main__":
    raise SystemExit(main())
