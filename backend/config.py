"""Environment-driven settings for the receipt splitter backend."""

import os

# "any_claim" or "exact_coverage", see utils.assignments.CompletionPolicy
ASSIGNMENT_COMPLETION_POLICY = os.getenv("ASSIGNMENT_COMPLETION_POLICY", "any_claim")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "USD")

# Comma-separated list, "*" allows any origin
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
