#!/usr/bin/env python3
"""voice2prompt: speak an instruction, get an English prompt for your code assistant.

Usage:
    python cli.py                        # record Spanish, copy English prompt to clipboard
    python cli.py -l pt -o prompt.txt    # Portuguese input, also write prompt.txt
    python cli.py --no-clipboard -p "..."  # custom rewrite instructions, stdout only

Press ESC to stop recording.
"""

import sys
import os

sys.path.insert(0, os.path.dirname(__file__))

from core.cli_runtime import run_cli


if __name__ == "__main__":
    sys.exit(run_cli())
