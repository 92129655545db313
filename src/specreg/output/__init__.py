"""Output layer — rendering ServiceResult for humans (rich) or machines (JSON)."""
