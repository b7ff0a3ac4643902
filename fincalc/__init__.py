"""
Financial calculator formula engine and its JSON API.
"""
