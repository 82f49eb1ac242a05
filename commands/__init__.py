"""CLI command modules.

This package contains:
- rooms: Room commands (rooms, stage, select, add-rooms, rename-rooms, delete-rooms)
- setup: Setup and help commands (configure, init, setup, help)
- helpers: Opening the configured workbook and registry
"""
