"""Service layer for workflow generation, validation and storage."""
