"""Test environment: in-memory SQLite, a fixed JWT secret and cheap bcrypt rounds.

Set before any storyrelay module is imported so the cached Settings pick them up.
"""

import os

os.environ["APP_ENV"] = "dev"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-for-storyrelay"
os.environ["JWT_EXPIRE_MINUTES"] = "60"
os.environ["BCRYPT_ROUNDS"] = "4"
