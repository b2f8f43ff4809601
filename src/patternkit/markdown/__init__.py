"""Front matter and markdown handling for source files."""
