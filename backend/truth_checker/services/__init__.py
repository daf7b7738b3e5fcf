"""
Services module for the Truth Checker backend.

This package contains the business logic service classes:

- content_router_service: Classifies queries and produces normalized content
- transcript_service: YouTube transcript acquisition fallback chain
- webpage_service: Webpage text and title extraction
- fact_check_service: LangChain chat model invocation for fact checking

All services follow async patterns for non-blocking operations and are
designed for dependency injection through FastAPI's dependency system.
"""
