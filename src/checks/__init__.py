"""Check implementations.

This package turns validated check configurations into executed checks:
prerequisite resolution, native Go tooling, custom commands, and coverage
aggregation.
"""
