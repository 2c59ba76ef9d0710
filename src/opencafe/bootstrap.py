"""
opencafe.bootstrap

First-run setup: `python -m opencafe.bootstrap` (or `opencafe-bootstrap`).

Responsibilities:
- Create tables on the configured database.
- Seed the first head admin of an empty deployment and print its one-time token.
"""

from __future__ import annotations

import asyncio
import sys

from opencafe.auth.core import AuthCore
from opencafe.auth.crypto import KeyedEncryptionProvider
from opencafe.db.init_db import ensure_head_admin, init_db
from opencafe.db.repositories.admins import AdminRepo
from opencafe.db.session import create_engine, create_sessionmaker, session_scope
from opencafe.observability.logging import configure_logging, get_logger
from opencafe.settings import Settings, get_settings

log = get_logger(__name__)


async def bootstrap(settings: Settings) -> str | None:
    """Returns the head admin's plaintext token, or None when admins already exist."""

    encryption = KeyedEncryptionProvider.from_settings(settings)
    engine = create_engine(settings)
    try:
        await init_db(engine)
        async with session_scope(create_sessionmaker(engine)) as session:
            auth = AuthCore(
                store=AdminRepo(session),
                cipher=encryption.cipher_for("admins"),
                timeout_seconds=settings.store_timeout_seconds,
            )
            issued = await ensure_head_admin(session, auth)
    finally:
        await engine.dispose()
    return issued.plaintext if issued is not None else None


def main() -> int:
    settings = get_settings()
    # Logs go to stderr; stdout carries only the token.
    configure_logging(
        service_name=settings.service_name, level=settings.log_level, stream=sys.stderr
    )

    token = asyncio.run(bootstrap(settings))
    if token is None:
        log.info("bootstrap.skipped", reason="admins already exist")
        return 0
    print(token)
    return 0


if __name__ == "__main__":
    sys.exit(main())
