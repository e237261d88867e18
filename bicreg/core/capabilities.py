"""
Capability string constants for bicreg.

This module is the SINGLE SOURCE OF TRUTH for capability strings.
Import from here, never use raw strings.

Usage:
    from bicreg.core.capabilities import CAPABILITY_MATERIALIZED

    if ds.supports(CAPABILITY_MATERIALIZED):
        y = ds['kid_score']
"""

# Data can be returned as full numpy arrays in memory
CAPABILITY_MATERIALIZED = 'materialized'

# Data can be iterated multiple times (model search refits many subsets)
CAPABILITY_REPEATABLE = 'repeatable'

# Columns carry user-facing names (needed for labelled selection output)
CAPABILITY_NAMED_COLUMNS = 'named_columns'

ALL_CAPABILITIES = frozenset({
    CAPABILITY_MATERIALIZED,
    CAPABILITY_REPEATABLE,
    CAPABILITY_NAMED_COLUMNS,
})

__all__ = [
    'CAPABILITY_MATERIALIZED',
    'CAPABILITY_REPEATABLE',
    'CAPABILITY_NAMED_COLUMNS',
    'ALL_CAPABILITIES',
]
