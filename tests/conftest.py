"""Test environment: in-memory SQLite and a cheap bcrypt cost, set before app modules load."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["JWT_SECRET"] = "test-secret-with-at-least-32-bytes-of-key"
