"""
opencafe.db.repositories

Repository package: one repository per collection.

Responsibilities:
- Find-all / find-one / insert / update / delete over each table.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories flush but never commit; the service layer owns the transaction.
