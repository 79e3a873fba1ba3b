#!/usr/bin/env python3
"""
Print host and compute device information.

Usage:
    python scripts/device_info.py [--device N] [--verbose]

With no --device (or a negative one) every detected device is listed.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))


def main():
    parser = argparse.ArgumentParser(description="Print host and compute device information")
    parser.add_argument("--device", type=int, default=None,
                        help="Device index to select (default: GPUTEST_DEVICE, -1 for all)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from gputest import DeviceIndexError, Session

    session = Session()
    try:
        session.start(args.device)
    except DeviceIndexError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        session.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
