"""Turning source files into resource trees."""
