"""Global pytest configuration."""

import os

# Tests never talk to real backends or a real provider
for _var in ("OPENAI_API_KEY", "DATABASE_URL", "REDIS_URL"):
    os.environ.pop(_var, None)
