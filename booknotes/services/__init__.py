"""Book Notes - Services Package

Service modules for external integrations:
- OpenLibrary title suggestions
- Shared HTTP client
"""
