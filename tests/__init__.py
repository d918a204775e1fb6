"""
Test suite. Points the application at a throwaway SQLite database before
any ``garagehub`` module creates its engine.
"""
import os
import tempfile

TEST_DB_PATH = os.path.join(tempfile.mkdtemp(prefix="garagehub-tests-"), "garagehub.db")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-enough-length-for-hs256")
os.environ.setdefault("LOG_LEVEL", "WARNING")
