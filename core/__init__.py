"""Core functionality for the room registry.

This package contains:
- config: User configuration and the immutable RegistryConfig
- workbook: Workbook interface and the local JSON workbook
- sheets: Google Sheets workbook backend
- operator: Terminal prompts and notices via click
"""
