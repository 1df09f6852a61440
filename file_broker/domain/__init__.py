"""
Domain layer: file records, access rules, errors and events.
"""
