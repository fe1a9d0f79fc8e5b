"""Outbound capacity calculator.

Revenue goal and funnel conversion rates in, daily email volume, inboxes,
sending domains and their cost out.
"""
