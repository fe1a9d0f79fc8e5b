"""Funnel derivation: business inputs -> monthly and daily outbound volume.

- inputs.py: BusinessInputs, defaults and boundary validation
- engine.py: derive_funnel and the monthly funnel breakdown
"""
