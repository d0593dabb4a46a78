"""
Spreadsheet translation job runner.
"""

__version__ = "1.0.0"
