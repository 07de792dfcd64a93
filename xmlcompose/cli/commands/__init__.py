"""
Command modules for the xmlcompose CLI.

Each module registers its commands on the main application when imported.
"""
