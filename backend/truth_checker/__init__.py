"""
Truth Checker Backend Application Package

This package contains the Truth Checker FastAPI application, which accepts a
claim, a YouTube link or a webpage URL and asks a chat model to fact-check it:

- Content routing between plain text, YouTube videos and webpages
- YouTube transcript acquisition with an ordered fallback chain
- Webpage text extraction
- LangChain-backed fact checking (Google Gemini by default)

Package Structure:
- api/: REST API endpoints organized by version (v1)
- core/: Core infrastructure (outbound HTTP fetching)
- models/: Pydantic models for normalized content and API payloads
- services/: Business logic layer
- utils/: Utility functions and helpers
"""

__version__ = "2.0.0"
__app_name__ = "Truth-Checker"
