"""Exception hierarchy for workflow execution and connector access."""

from typing import Optional


class WorkflowError(Exception):
    """Base class for every error raised while executing a policy workflow."""


class ConfigurationError(WorkflowError):
    """A node or graph is missing configuration it needs to run."""


class ConditionEvaluationError(WorkflowError):
    """A condition tree could not be evaluated."""


class ExpressionEvaluationError(WorkflowError):
    """A calculation formula could not be parsed or evaluated."""


class TraversalError(WorkflowError):
    """The engine could not advance through the graph."""


class DataSourceError(WorkflowError):
    """A data source failed and its policy routes the application to manual review."""


class ConnectorError(Exception):
    """Base class for connector gateway failures."""

    def __init__(self, message: str, connector_id: Optional[str] = None):
        super().__init__(message)
        self.connector_id = connector_id


class ConnectorNotFoundError(ConnectorError):
    """The requested connector does not exist in the registry."""


class ConnectorInactiveError(ConnectorError):
    """The requested connector exists but is disabled."""


class ConnectorCallError(ConnectorError):
    """The connector endpoint failed after all retry attempts."""

    def __init__(
        self,
        message: str,
        connector_id: Optional[str] = None,
        attempts: int = 0,
        status_code: Optional[int] = None,
    ):
        super().__init__(message, connector_id)
        self.attempts = attempts
        self.status_code = status_code
