#!/usr/bin/env python3
"""
pagescribe CLI - Turn a directory of page images into one transcript

Usage:
  pagescribe [INPUT_DIR] [-o OUTPUT] [--concurrency N] [--start-date S]
             [--max-dimension N] [--model M] [--log-dir D] [--verbose]

Exit codes:
  0    transcript written (failed images appear inline)
  1    run-level failure (no images, bad credential, save failed)
  130  cancelled
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from cli import main


if __name__ == '__main__':
    main()
