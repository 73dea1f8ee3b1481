"""
EduVerse - a web platform for online courses.

This package contains the complete application:
- core: Framework-agnostic business logic
- infrastructure: External service integrations
- api: FastAPI routes, pages and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
