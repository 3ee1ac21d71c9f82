# docsweep/parser/__init__.py
"""HTML to Markdown conversion."""
