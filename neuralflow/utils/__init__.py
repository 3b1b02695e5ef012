"""NeuralFlow utilities."""

from .ids import snake_case, new_run_id

__all__ = [
    "snake_case",
    "new_run_id",
]
