"""
opencafe.services

Service-layer package.

Responsibilities:
- Own transaction boundaries: repositories flush, services commit.
- Gate every mutation on an AuthCore capability before touching records.
"""
