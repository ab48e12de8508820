"""Nearest-center and waiting-time endpoints."""

from __future__ import annotations

import random
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Body, status
from fastapi.responses import JSONResponse

from ...schemas.centers import AddressRequest, WaitingTimeData, WaitingTimeRequest, WaitingTimeResponse
from ...services.centers import service as centers_service

router = APIRouter(prefix="/centers", tags=["centers"])

MIN_SIMULATED_PATIENTS = 1
MAX_SIMULATED_PATIENTS = 10


@router.post("/nearest", status_code=status.HTTP_200_OK, response_model=None)
def nearest(payload: Optional[AddressRequest] = Body(default=None)) -> dict | JSONResponse:
    """Rank the closest centers to an address by distance and by total time."""
    if payload is None or not payload.address or not payload.address.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": centers_service.ADDRESS_REQUIRED},
        )
    return centers_service.find_nearest_centers(payload.address)


@router.post("/wait", response_model=WaitingTimeResponse, status_code=status.HTTP_200_OK)
async def waiting_time(payload: WaitingTimeRequest) -> WaitingTimeResponse:
    """Simulated waiting-time source: a random patient count for the site.

    Must not need a worker thread: `/centers/nearest` calls it in-process
    while holding one.
    """
    total_op = random.randint(MIN_SIMULATED_PATIENTS, MAX_SIMULATED_PATIENTS)
    return WaitingTimeResponse(
        data_values=[
            WaitingTimeData(total_op=total_op, updated_time=datetime.now().strftime("%I:%M %p")),
        ]
    )
