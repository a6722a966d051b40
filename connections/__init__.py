"""
Connectors for the platforms the review-variant reports pull from.
"""
