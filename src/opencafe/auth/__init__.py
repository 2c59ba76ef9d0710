"""
opencafe.auth

Authentication/authorization package (AuthCore).

Responsibilities:
- Token issuing, encryption at rest and scan-based resolution.
- Role/capability evaluation.
- FastAPI dependencies for bearer tokens.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Every service receives the caller's plaintext token and goes through `AuthCore`.
