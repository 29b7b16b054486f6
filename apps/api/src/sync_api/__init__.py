"""Clerk user synchronization API."""
