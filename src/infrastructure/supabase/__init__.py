"""
Supabase integration: token verification and profile lookups.
"""
