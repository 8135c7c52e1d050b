"""
HTTP surface for predictions and inbound signals.
"""
