"""Exports & reporting: CSV writers and the Markdown summary.

- writers.py: CSV emitters with fixed schemas
- reports.py: number formatting and summary.md
"""
