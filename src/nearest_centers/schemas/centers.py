"""Nearest-center request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AddressRequest(BaseModel):
    # Left optional so a missing address reaches the route and gets the structured error.
    address: Optional[str] = Field(default=None, description="Free-text address to search from.")


class CenterDistanceModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    address: Optional[str] = None
    distance_km: float = Field(..., alias="distanceKm")


class CenterTimeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    address: Optional[str] = None
    distance_km: float = Field(..., alias="distanceKm")
    travel_time_hrs: float = Field(..., alias="travelTimeHrs")
    waiting_time_hrs: float = Field(..., alias="waitingTimeHrs")
    total_time_hrs: float = Field(..., alias="totalTimeHrs")


class NearestCentersResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    centers_distance: List[CenterDistanceModel] = Field(default_factory=list, alias="centersDistance")
    centers_time: List[CenterTimeModel] = Field(default_factory=list, alias="centersTime")


class WaitingTimeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    site_id: int = Field(
        ...,
        validation_alias=AliasChoices("siteId", "SiteId", "site_id"),
        serialization_alias="siteId",
    )


class WaitingTimeData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_op: int = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("totalOP", "TotalOP", "totalOp", "total_op"),
        serialization_alias="totalOP",
        description="Patients currently waiting at the site.",
    )
    updated_time: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("updatedTime", "UpdatedTime", "updated_time"),
        serialization_alias="updatedTime",
    )


class WaitingTimeResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    data_values: List[WaitingTimeData] = Field(
        default_factory=list,
        validation_alias=AliasChoices("dataValues", "DataValues", "data_values"),
        serialization_alias="dataValues",
    )
