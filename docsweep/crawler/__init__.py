# docsweep/crawler/__init__.py
"""
Crawl engine: frontier, change detection, checkpoints and page orchestration.
"""
