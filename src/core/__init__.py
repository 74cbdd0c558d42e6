"""Core package for shared application functionality.

- **config**: Centralized configuration management with environment support
- **constants**: Shared constants
- **exceptions**: Structured exception hierarchy with error codes
- **error_context**: Sensitive data sanitization for safe logging
- **logging**: Structured logging with Loguru
- **types**: Type aliases for record payloads and context dictionaries
"""
