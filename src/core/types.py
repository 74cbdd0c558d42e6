"""Type aliases for dynamic data structures throughout the application.

This module centralizes type definitions for data that cannot be statically
typed, providing clear semantic meaning for these types.

Record payloads arrive from callers as loosely-typed mappings and leave the
validator as plain dictionaries; the aliases below name those shapes.
"""

from collections.abc import Mapping
from typing import Any, TypeAlias

# Candidate record as supplied by a caller: field name -> raw value
RawFields: TypeAlias = Mapping[str, object]

# Record after defaults were applied and values normalized
NormalizedFields: TypeAlias = dict[str, Any]

# Context dictionary for error details and debugging information
ErrorContext: TypeAlias = dict[str, Any]  # flexible error context
