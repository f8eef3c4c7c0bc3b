from __future__ import annotations

from breakthrough.benchmark import main


if __name__ == "__main__":
    raise SystemExit(main())
