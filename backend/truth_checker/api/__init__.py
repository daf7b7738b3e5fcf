"""
Truth Checker API Package.

Package Structure:
    - v1/: Version 1 API endpoints
        - verify.py: Fact-check verification endpoint

All endpoints are versioned under the /api/v1 URL prefix.
"""
