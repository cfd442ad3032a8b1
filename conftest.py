"""Global pytest configuration."""

import os

# Seed credentials for tests before any imports read settings
os.environ.setdefault("API_KEY", "test-service-key")
os.environ.setdefault("PEST_API_KEY", "test-pest-key")
