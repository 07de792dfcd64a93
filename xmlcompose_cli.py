#!/usr/bin/env python3
"""
xmlcompose CLI entry point.

This script serves as the entry point for the xmlcompose command-line interface.
"""

from xmlcompose.cli import app

if __name__ == "__main__":
    app()
