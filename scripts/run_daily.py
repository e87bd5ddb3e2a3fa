#!/usr/bin/env python3
"""
Daily digest job.

Pulls account cash, pies and recent transactions from Trading 212, updates the
ledger and snapshot files, and emails the digest with recommendations.
"""
from pathlib import Path
import os
import sys

# Ensure repo root is on sys.path and is the working directory.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
os.chdir(ROOT)

from piewatch.main import main

if __name__ == "__main__":
    sys.exit(main(["daily", *sys.argv[1:]]))
