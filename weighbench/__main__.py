"""Entry point for running weighbench as a module.

Usage:
    python -m weighbench list
    python -m weighbench run --pallet identity --extrinsic set_identity --steps 10
"""
import sys
from weighbench.cli import main

if __name__ == "__main__":
    sys.exit(main())
