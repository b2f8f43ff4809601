"""Reading source files from disk."""
