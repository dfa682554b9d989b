"""Root conftest: shared test configuration."""

import os

# Tests never reach a real database or the configured production admin
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("CUSTODY_ADMIN_ADDRESS", "0xad")
