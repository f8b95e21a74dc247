"""Database base model and session management."""
