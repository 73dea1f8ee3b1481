"""
Core business logic for the learning platform.

This package is framework-agnostic - it doesn't import FastAPI, MongoDB,
or Supabase. Storage URL rules, avatar state and the dashboard gate can be
tested in isolation.
"""
