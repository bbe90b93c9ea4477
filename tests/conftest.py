import os

# Settings are read at import time, so the environment must be in place
# before anything under app/ is imported.
os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-production")
os.environ["USE_IN_MEMORY_BACKENDS"] = "true"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("ENVIRONMENT", "development")
