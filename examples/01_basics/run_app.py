#!/usr/bin/env python3
"""
Run the clock demo until Ctrl+C.

    python examples/01_basics/run_app.py --name you
"""

import asyncio
import sys
from pathlib import Path

from appmods import Application, load_app_config

HERE = Path(__file__).parent


def main() -> int:
    conf = load_app_config(HERE / "etc" / "app.yaml")
    return asyncio.run(Application.run(HERE / "modules", conf, argv=sys.argv[1:]))


if __name__ == "__main__":
    sys.exit(main())
