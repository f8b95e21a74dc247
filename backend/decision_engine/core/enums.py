"""Core enums for type safety across the application."""

from enum import Enum


class NodeKind(str, Enum):
    """Node kinds available in a policy workflow graph."""

    START = "start"
    DATA_SOURCE = "dataSource"
    CONDITION = "condition"
    CALCULATION = "calculation"
    SCORE = "score"
    DECISION = "decision"
    API_CALL = "apiCall"
    DB_QUERY = "dbQuery"
    END = "end"


class Decision(str, Enum):
    """Terminal underwriting decisions."""

    APPROVED = "approved"
    REJECTED = "rejected"
    MANUAL_REVIEW = "manual_review"


class LogicalOperator(str, Enum):
    """Operators combining nested conditions."""

    AND = "AND"
    OR = "OR"


class ComparisonOperator(str, Enum):
    """Operators supported by leaf conditions."""

    GT = ">"
    LT = "<"
    GTE = ">="
    LTE = "<="
    EQ = "=="
    NEQ = "!="
    IN = "IN"
    NOT_IN = "NOT IN"


class OnErrorPolicy(str, Enum):
    """Data source behaviour when the connector gateway fails."""

    SKIP = "skip"
    USE_CACHED = "use_cached"
    MANUAL_REVIEW = "manual_review"


class ConnectorType(str, Enum):
    """External data source categories."""

    BUREAU = "bureau"
    VERIFICATION = "verification"
    DATABASE = "database"
    LOS = "los"
    API = "api"


class ConnectorStatus(str, Enum):
    """Last known connectivity state of a connector."""

    CONNECTED = "connected"
    FAILED = "failed"
    NOT_TESTED = "not_tested"


class AuthType(str, Enum):
    """Authentication schemes for connector HTTP calls."""

    API_KEY = "api_key"
    BEARER = "bearer"
    BASIC = "basic"
    OAUTH = "oauth"
