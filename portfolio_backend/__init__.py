"""
Backend package for the portfolio site.

This package provides a FastAPI application serving projects, resources
and blog posts from MySQL, with basic-auth-gated writes, an in-process
listing cache and webhook notifications for new posts.
"""
