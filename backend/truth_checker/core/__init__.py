"""
Core infrastructure for the Truth Checker backend.

- http_client: async text fetching over requests with typed failures
"""
