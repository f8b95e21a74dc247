"""Workflow execution engine for loan underwriting policy graphs."""

__version__ = "1.0.0"
