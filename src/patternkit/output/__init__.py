"""Persisting rendered resources."""
