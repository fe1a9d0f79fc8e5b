"""Sending-domain suggester.

Asks a text-generation API for alternative sending domains for a brand, one
per domain the infrastructure estimate calls for. See `domains.py`.
"""
