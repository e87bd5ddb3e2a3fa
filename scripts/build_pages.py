#!/usr/bin/env python3
"""
Build the static dashboard: <PAGES_OUT_DIR>/index.html and latest.json.
No secrets end up in the output.
"""
from pathlib import Path
import os
import sys

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
os.chdir(ROOT)

from piewatch.main import main

if __name__ == "__main__":
    sys.exit(main(["pages", *sys.argv[1:]]))
