"""
Shared building blocks for the occupancy and billing engine.
"""
