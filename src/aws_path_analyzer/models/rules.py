"""Pydantic models for per-rule policy evaluation detail."""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class RuleEvaluation(BaseModel):
    """Outcome of checking one SG/NACL/firewall rule against a target."""

    model_config = ConfigDict(extra="allow")

    rule_id: str
    rule_type: str = Field("", description="security-group, nacl, firewall, ...")
    action: str = Field("", description="allow or deny")
    matched: bool = False
    reason: str = ""
    source_cidr: Optional[str] = None
    dest_cidr: Optional[str] = None
    protocol: Optional[str] = None
    port_from: Optional[int] = None
    port_to: Optional[int] = None
    priority: Optional[int] = None

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)


class EvaluationResult(BaseModel):
    """Allow/deny verdict from a rule-evaluating node."""

    allowed: bool
    reason: str = ""
    evaluations: list[RuleEvaluation] = Field(default_factory=list)
