from shakegate.core.logging import (
    CorrelationContext,
    CorrelationFilter,
    correlation_scope,
    get_correlation_context,
    setup_logging,
)

__all__ = [
    "CorrelationContext",
    "CorrelationFilter",
    "correlation_scope",
    "get_correlation_context",
    "setup_logging",
]
