#!/usr/bin/env python3
"""
WireLab - Wireless Communications Lab

Main entry point for the application.
Launches the PyQt6 dashboard with one tab per lab model.

Usage:
    python main.py                    # Dashboard
    python main.py --report           # Print a snapshot of every model, no GUI
    python main.py --help             # Show all options

Options:
    --seed N           Seed the stochastic models
    --log-level LEVEL  DEBUG, INFO, WARNING (default), ERROR
"""

import argparse
import logging
import sys


def main():
    """Launch the WireLab dashboard (or print the headless report)."""
    parser = argparse.ArgumentParser(
        description="WireLab - interactive wireless communications models",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py                          # Run the dashboard
  python main.py --report --seed 7        # Reproducible text report
  python main.py --log-level DEBUG        # Trace handoffs, drops, stages
        """
    )
    parser.add_argument('--report', action='store_true',
                        help='Print a snapshot of every model and exit')
    parser.add_argument('--seed', type=int, default=None,
                        help='Seed for the stochastic models')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging verbosity (default: WARNING)')
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    if args.report:
        from wirelab.report import build_report
        print(build_report(seed=args.seed))
        return 0

    # Import UI components only when the dashboard is requested
    from wirelab.ui.main_dashboard import launch
    return launch(seed=args.seed)


if __name__ == "__main__":
    sys.exit(main())
