"""
Realtime handshake endpoint.

The Socket.IO client probes this URL before opening its transport. All
actual realtime handling lives in the Socket.IO server started with the
app; this route only acknowledges the probe. Responses are never cached.
"""

from fastapi import APIRouter, Response, status
from fastapi.responses import JSONResponse

router = APIRouter()

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type,Authorization",
}

PROBE_HEADERS = {
    **CORS_HEADERS,
    "Cache-Control": "no-store",
}


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    summary="Realtime handshake probe",
    description="Always 200 with an empty body.",
)
async def socket_probe() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=PROBE_HEADERS)


@router.post("", status_code=status.HTTP_200_OK, include_in_schema=False)
async def socket_probe_post() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=PROBE_HEADERS)


@router.options("", include_in_schema=False)
async def socket_preflight() -> JSONResponse:
    return JSONResponse({}, headers=PROBE_HEADERS)
