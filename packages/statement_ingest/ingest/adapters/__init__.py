"""Adapters turning raw statement text into normalized transactions.

- ``structured_csv``: delimited exports (falls back to ``line_scanner``)
- ``line_scanner``: three-line plaintext layouts
- ``assisted``: optional language-model extraction
"""
