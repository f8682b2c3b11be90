"""
HTTP API routers.
"""
