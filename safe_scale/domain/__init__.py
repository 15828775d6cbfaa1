"""Domain layer for safe-scale.

Value types and errors for blue-green rollouts. The domain layer MUST NOT
import from the application or infrastructure layers.
"""
