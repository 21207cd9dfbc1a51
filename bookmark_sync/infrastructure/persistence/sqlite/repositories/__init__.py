from bookmark_sync.infrastructure.persistence.sqlite.repositories.bookmark_repository import (
    SqliteBookmarkRepository,
)
from bookmark_sync.infrastructure.persistence.sqlite.repositories.mirror_ledger_repository import (
    SqliteMirrorLedgerRepository,
)

__all__ = ["SqliteBookmarkRepository", "SqliteMirrorLedgerRepository"]
