"""Rendering of collections and pages."""
