"""Workspace video call scheduling and lifecycle backend."""
