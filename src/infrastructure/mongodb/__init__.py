"""
MongoDB integration for course content.

Includes an in-memory mock pool for local development without a server.
"""
