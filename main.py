#!/usr/bin/env python3
"""
Main entry point for the Notice Board backend.
"""
from noticeboard.interface_adapters.cli import main

if __name__ == '__main__':
    main()
