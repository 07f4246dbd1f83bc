"""Wire models for the Agent Arena REST API."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from arena_agent.config.constants import SCHEMA_VERSION


class VersionResponse(BaseModel):
    """Response of `GET /v1/version`."""

    schema_version: int
    server_time: str
    interval_seconds: int


class Interval(BaseModel):
    """A trading round. `start_time` anchors submission idempotency."""

    model_config = ConfigDict(frozen=True)

    id: str
    start_time: str
    end_time: str


class ClockResponse(BaseModel):
    """Response of `GET /v1/game/clock`."""

    model_config = ConfigDict(frozen=True)

    current_interval: Interval
    server_time: Optional[str] = None
    seconds_remaining: float


class BalanceEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    asset: str
    amount: float


class Portfolio(BaseModel):
    """Agent balances plus the server-computed NAV."""

    model_config = ConfigDict(frozen=True)

    agent_id: str
    balances: List[BalanceEntry] = Field(default_factory=list)
    nav_usd: float = Field(..., description="Server-computed USD valuation")
    updated_at: str

    @field_validator("balances")
    @classmethod
    def _unique_assets(cls, balances: List[BalanceEntry]) -> List[BalanceEntry]:
        seen = set()
        for entry in balances:
            if entry.asset in seen:
                raise ValueError(f"Duplicate balance entry for asset '{entry.asset}'")
            seen.add(entry.asset)
        return balances

    def balance_of(self, asset: str) -> float:
        for entry in self.balances:
            if entry.asset == asset:
                return entry.amount
        return 0.0


class AssetInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    asset_id: str
    name: str
    subnet_id: Optional[int] = None

    @property
    def is_subnet_token(self) -> bool:
        """True for subnet-routed tokens, False for base currencies."""
        return self.subnet_id is not None


class Trade(BaseModel):
    """Swap ``amount`` of ``from`` into ``to``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_asset: str = Field(
        ...,
        alias="from",
        description="Asset to sell (e.g. 'USD', 'TAO', 'ALPHA_1')",
    )
    to: str = Field(..., description="Asset to buy")
    amount: float = Field(..., gt=0, description="Amount of the 'from' asset to trade")


class DecisionBody(BaseModel):
    model_config = ConfigDict(frozen=True)

    trades: List[Trade] = Field(default_factory=list)


class DecisionMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    repo_url: str = ""
    commit_sha: str = "local"
    workflow_run_url: Optional[str] = None


class DecisionPayload(BaseModel):
    """The decision submitted for one interval. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    schema_version: int = SCHEMA_VERSION
    decision: DecisionBody
    reasoning: str
    metadata: DecisionMetadata

    def to_wire(self) -> dict:
        """Serialize with wire aliases, omitting unset optional metadata."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ValidationResult(BaseModel):
    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @property
    def is_blocking(self) -> bool:
        """Any error (or an explicit invalid flag) blocks submission."""
        return not self.valid or bool(self.errors)


class SubmissionResult(BaseModel):
    accepted: bool
    submission_id: str
    interval_start: str
