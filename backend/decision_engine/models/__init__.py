"""Domain (ORM) and schema (pydantic) models."""
