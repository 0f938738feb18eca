"""Command-line writing client for the inkfeed API.

The modules here mirror what the browser writing page does: edit a Markdown
buffer, keep a per-document draft cache, and publish through the feed API.
"""
