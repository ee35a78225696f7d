"""
Infrastructure services for the Snake server: tick scheduling, the session
registry and periodic maintenance.
"""
