"""Pydantic schemas for policy workflow graphs.

A graph arrives either in canonical form::

    {"nodes": [{"id": "n1", "kind": "calculation", "config": {...}}], "edges": [...]}

or as saved by the visual policy builder::

    {"nodes": [{"id": "n1", "type": "calculation", "data": {"config": {...}}}], "edges": [...]}

Both are normalized into one node model per kind so that kind-specific
required configuration is rejected when the graph is loaded, not halfway
through an execution.
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from decision_engine.core.enums import Decision, LogicalOperator, OnErrorPolicy


class WorkflowModel(BaseModel):
    """Base for graph schemas: camelCase or snake_case keys, immutable once loaded."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ==================== Condition Tree ====================


class ComparisonCondition(WorkflowModel):
    """Leaf comparison; operands are variable names or literals."""

    left: Any = None
    operator: str = Field(..., description="One of >, <, >=, <=, ==, !=, IN, NOT IN")
    right: Any = None


class ConditionGroup(WorkflowModel):
    """AND/OR composition of nested conditions."""

    operator: LogicalOperator
    conditions: list["ConditionExpression"] = Field(default_factory=list)


def _condition_tag(value: Any) -> str:
    if isinstance(value, dict):
        return "group" if "conditions" in value else "comparison"
    return "group" if isinstance(value, ConditionGroup) else "comparison"


ConditionExpression = Annotated[
    Union[
        Annotated[ConditionGroup, Tag("group")],
        Annotated[ComparisonCondition, Tag("comparison")],
    ],
    Discriminator(_condition_tag),
]

ConditionGroup.model_rebuild()


# ==================== Scoring ====================


class ScoreRange(WorkflowModel):
    """Inclusive numeric range mapped to a point score."""

    min: float
    max: float
    score: float


class ScoreFactor(WorkflowModel):
    """Variable to inspect, its score ranges and the factor weight."""

    variable: str = Field(..., min_length=1)
    name: Optional[str] = None
    ranges: list[ScoreRange] = Field(default_factory=list)
    weight: float = 1.0

    @property
    def label(self) -> str:
        """Key used for this factor in score breakdowns."""
        return self.name or self.variable


# ==================== Node Configs ====================


class EmptyNodeConfig(WorkflowModel):
    """Configuration for nodes that take none (start, end, dbQuery)."""

    model_config = ConfigDict(extra="allow")


class ConditionNodeConfig(WorkflowModel):
    condition: ConditionExpression


class CalculationNodeConfig(WorkflowModel):
    formula: str = Field(..., min_length=1)
    output_variable: str = Field(..., min_length=1)


class ScoreNodeConfig(WorkflowModel):
    factors: list[ScoreFactor] = Field(default_factory=list)
    output_variable: str = Field(default="risk_score", min_length=1)


class DecisionNodeConfig(WorkflowModel):
    decision: Decision
    reason: str = ""
    conditions: list[Any] = Field(default_factory=list)


class DataSourceNodeConfig(WorkflowModel):
    """External data lookup through the connector gateway."""

    connector_id: str = Field(..., min_length=1)
    params: dict[str, Any] = Field(default_factory=dict)
    field_mapping: Optional[dict[str, str]] = None
    cache_response: bool = True
    on_error: Optional[OnErrorPolicy] = None


class ApiCallNodeConfig(DataSourceNodeConfig):
    """Same contract as a data source; a node without a connector is a no-op."""

    connector_id: Optional[str] = None


# ==================== Nodes ====================


class BaseNode(WorkflowModel):
    id: str = Field(..., min_length=1)
    label: Optional[str] = None


class StartNode(BaseNode):
    kind: Literal["start"]
    config: EmptyNodeConfig = Field(default_factory=EmptyNodeConfig)


class EndNode(BaseNode):
    kind: Literal["end"]
    config: EmptyNodeConfig = Field(default_factory=EmptyNodeConfig)


class ConditionNode(BaseNode):
    kind: Literal["condition"]
    config: ConditionNodeConfig


class CalculationNode(BaseNode):
    kind: Literal["calculation"]
    config: CalculationNodeConfig


class ScoreNode(BaseNode):
    kind: Literal["score"]
    config: ScoreNodeConfig = Field(default_factory=ScoreNodeConfig)


class DecisionNode(BaseNode):
    kind: Literal["decision"]
    config: DecisionNodeConfig


class DataSourceNode(BaseNode):
    kind: Literal["dataSource"]
    config: DataSourceNodeConfig


class ApiCallNode(BaseNode):
    kind: Literal["apiCall"]
    config: ApiCallNodeConfig = Field(default_factory=ApiCallNodeConfig)


class DbQueryNode(BaseNode):
    kind: Literal["dbQuery"]
    config: EmptyNodeConfig = Field(default_factory=EmptyNodeConfig)


WorkflowNode = Annotated[
    Union[
        StartNode,
        EndNode,
        ConditionNode,
        CalculationNode,
        ScoreNode,
        DecisionNode,
        DataSourceNode,
        ApiCallNode,
        DbQueryNode,
    ],
    Field(discriminator="kind"),
]


class WorkflowEdge(WorkflowModel):
    id: Optional[str] = None
    source: str
    target: str
    source_handle: Optional[str] = None
    target_handle: Optional[str] = None


# ==================== Graph ====================


def _normalize_node(raw: Any) -> Any:
    """Map the visual builder's {type, data: {config}} shape onto {kind, config}."""
    if not isinstance(raw, dict):
        return raw

    node = dict(raw)
    data = node.pop("data", None) or {}
    if "kind" not in node and "type" in node:
        node["kind"] = node.pop("type")
    if "config" not in node and isinstance(data, dict):
        node["config"] = data.get("config")
        if "label" not in node and data.get("label") is not None:
            node["label"] = data["label"]
    if node.get("config") is None:
        node.pop("config", None)
    node.pop("position", None)
    return node


class WorkflowGraph(WorkflowModel):
    """Policy graph: ordered nodes plus ordered edges."""

    nodes: list[WorkflowNode] = Field(default_factory=list)
    edges: list[WorkflowEdge] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_nodes(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("nodes"), list):
            data = {**data, "nodes": [_normalize_node(node) for node in data["nodes"]]}
        return data

    @field_validator("nodes")
    @classmethod
    def check_unique_ids(cls, nodes: list) -> list:
        seen: set[str] = set()
        duplicates = []
        for node in nodes:
            if node.id in seen:
                duplicates.append(node.id)
            seen.add(node.id)
        if duplicates:
            raise ValueError(f"Duplicate node ids: {', '.join(duplicates)}")
        return nodes

    @classmethod
    def load(cls, data: Any) -> "WorkflowGraph":
        """Validate raw graph JSON, passing an already loaded graph through."""
        if isinstance(data, cls):
            return data
        return cls.model_validate(data)

    def find_start_node(self) -> Optional[BaseNode]:
        return next((node for node in self.nodes if node.kind == "start"), None)

    def get_node(self, node_id: str) -> Optional[BaseNode]:
        return next((node for node in self.nodes if node.id == node_id), None)

    def outgoing_edges(self, node_id: str) -> list[WorkflowEdge]:
        """Edges leaving a node, in graph order."""
        return [edge for edge in self.edges if edge.source == node_id]
