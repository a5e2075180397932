"""HTTP server: API routes behind the bearer gateway, WebDAV behind Basic auth.

Requires: pip install webdavhub[server]
"""
