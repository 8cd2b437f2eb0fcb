"""Build trend aggregation service."""
