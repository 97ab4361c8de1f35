"""Supply-related Pydantic schemas"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from supply_info.metric_cache import CacheState, MetricSnapshot


class SupplySnapshotResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    value: Optional[float] = None
    recorded_at: Optional[int] = Field(default=None, alias="recordedAt")

    @classmethod
    def from_snapshot(cls, snapshot: MetricSnapshot) -> "SupplySnapshotResponse":
        return cls(value=snapshot.value, recorded_at=snapshot.recorded_at)


class TriggerRecordResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    new_recorded_supply: SupplySnapshotResponse = Field(alias="newRecordedSupply")
    new_circulating_supply: SupplySnapshotResponse = Field(alias="newCirculatingSupply")

    @classmethod
    def from_state(cls, state: CacheState) -> "TriggerRecordResponse":
        return cls(
            new_recorded_supply=SupplySnapshotResponse.from_snapshot(state.total_supply),
            new_circulating_supply=SupplySnapshotResponse.from_snapshot(state.circulating_supply),
        )


class LastErrorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_supply: Optional[str] = Field(default=None, alias="totalSupply")
    circulating_supply: Optional[str] = Field(default=None, alias="circulatingSupply")


class StatusErrorResponse(BaseModel):
    """Body of /status when either metric's last attempt failed."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = "ERROR"
    last_total_supply: SupplySnapshotResponse = Field(alias="lastTotalSupply")
    last_circulating_supply: SupplySnapshotResponse = Field(alias="lastCirculatingSupply")
    last_error: LastErrorResponse = Field(alias="lastError")

    @classmethod
    def from_state(cls, state: CacheState) -> "StatusErrorResponse":
        return cls(
            last_total_supply=SupplySnapshotResponse.from_snapshot(state.total_supply),
            last_circulating_supply=SupplySnapshotResponse.from_snapshot(state.circulating_supply),
            last_error=LastErrorResponse(
                total_supply=state.total_supply_error.last_error,
                circulating_supply=state.circulating_supply_error.last_error,
            ),
        )
