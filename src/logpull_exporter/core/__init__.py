"""Core domain: models, error taxonomy, aggregation and collection cycles."""
