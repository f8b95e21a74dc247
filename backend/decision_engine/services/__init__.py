"""Service layer for policy execution."""

from decision_engine.services.policy_testing_service import PolicyTestService
from decision_engine.services.underwriting_service import UnderwritingService

__all__ = ["PolicyTestService", "UnderwritingService"]
