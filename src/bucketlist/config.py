"""
Configuration constants for the bucket list tracker.

Values can be overridden through environment variables so the same code
runs locally (in-memory storage) and in Lambda (DynamoDB storage).
"""

import os

# Storage keys
ACTIVITIES_KEY = os.getenv("BUCKETLIST_ACTIVITIES_KEY", "activities")
SETTINGS_KEY = os.getenv("BUCKETLIST_SETTINGS_KEY", "settings")

# DynamoDB
STORAGE_TABLE = os.getenv("BUCKETLIST_TABLE")
AWS_REGION = os.getenv("AWS_REGION", "us-east-1")

# Observers re-load the store at this interval (seconds)
POLL_INTERVAL_SECONDS = float(os.getenv("BUCKETLIST_POLL_INTERVAL", "2.0"))

# Generated id collisions are retried this many times
MAX_ID_ATTEMPTS = 5

# API
ENVIRONMENT = os.getenv("ENVIRONMENT", "dev")
CORS_ORIGIN = os.getenv("CORS_ORIGIN", "*")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
