#!/usr/bin/env python3
"""
LAN Discovery CLI - Main entry point for module execution

    python -m lan_discovery
"""

from lan_discovery import main

if __name__ == "__main__":
    main()
