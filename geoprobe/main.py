#!/usr/bin/env python3
"""
geoprobe - Main Entry Point
"""

import logging
import sys


def main():
    """Main entry point"""
    try:
        from geoprobe.scan_cli.cli import main_cli
        return main_cli()
    
    except KeyboardInterrupt:
        print("\n👋 Cancelled by user, goodbye!")
        return 130
    
    except Exception as e:
        logging.error(f"Unexpected error: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
