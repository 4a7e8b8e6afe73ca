"""
Entry point: generate a label proof.

Usage:
    python main.py make --label-type <type> --width W --height H [options]
    python main.py upload [FILE] --label-type <type> [options]

Example:
    python main.py make --label-type Rolls --width 4 --height 6 --output proof.svg
    python main.py make --label-type Die-cut --width 3 --height 3 --dxf proof.dxf
    python main.py upload dieline.svg --label-type Rolls --config .labelproof.json
"""

import sys

# Unicode-safe console output on Windows
if sys.stdout.encoding and sys.stdout.encoding.lower() not in ('utf-8', 'utf8'):
    sys.stdout.reconfigure(encoding='utf-8', errors='replace')
if sys.stderr.encoding and sys.stderr.encoding.lower() not in ('utf-8', 'utf8'):
    sys.stderr.reconfigure(encoding='utf-8', errors='replace')

from label_proof.cli import main

if __name__ == "__main__":
    sys.exit(main())
