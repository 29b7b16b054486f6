"""Shared library for Clerk user synchronization."""
