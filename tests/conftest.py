"""Shared pytest configuration.

The environment is prepared before any application module is imported,
because config.yaml is rendered once at import time.
"""

import os

os.environ.setdefault("APP_ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DATABASE_SEED_ON_STARTUP", "false")
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("LOG_LEVEL", "WARNING")

pytest_plugins = ["tests.fixtures.core"]
