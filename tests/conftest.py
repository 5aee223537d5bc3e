"""Test environment: in-memory SQLite and cheap bcrypt, set before shortlink is imported."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BASE_URL", "http://sho.rt")
