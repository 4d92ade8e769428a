"""
Entry point for the Mortgage Savings Calculator.

Usage:
    python main.py          # launches the web app at localhost:5000
    python main.py --cli    # runs the terminal interface
"""

import argparse
import logging


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Bolånekalkylator: current rate vs. offered rate",
    )
    parser.add_argument(
        "--cli",
        action="store_true",
        help="Run in terminal mode instead of launching the web app",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if args.cli:
        from cli import run_cli
        run_cli()
    else:
        from app import run_web
        run_web()


if __name__ == "__main__":
    main()
