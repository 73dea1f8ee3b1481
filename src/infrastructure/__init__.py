"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency:
- mongodb: Course video documents
- supabase: Access-token verification and user profiles
- realtime: Socket.IO server

These wrappers translate between external formats and our domain models.
"""
