#!/usr/bin/env python3
"""
Wirenet CLI - Entry point for the wire network tool.

This module allows running the tool as:
    python -m wire_network blueprint.json
    wirenet blueprint.json  (when installed via pip)
"""

from wire_network.cli import main

if __name__ == "__main__":
    main()
