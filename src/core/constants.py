"""Core application constants."""

# Time constants
MILLISECONDS_PER_SECOND = 1000

# Security and redaction
REDACTED = "[REDACTED]"

# Maximum depth for nested structure sanitization
MAX_SANITIZE_DEPTH = 10
