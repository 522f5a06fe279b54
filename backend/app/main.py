"""
FastAPI application for the Networking Tools API.
Exposes MAC address lookup and geolocated traceroute.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Depends, HTTPException, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import settings
from .errors import (
    ValidationError,
    ResolutionError,
    TraceExecutionError,
    VendorNotFoundError,
    MacLookupError,
)
from .mac import MacVendorClient, lookup_mac
from .schemas import MacLookupResponse, TracerouteRequest, TracerouteResult
from .traceroute import TracerouteOrchestrator

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    logger.info(f"{settings.app_name} {__version__} starting")
    logger.info(f"Allowed CORS origins: {', '.join(settings.cors_origins)}")

    yield

    logger.info(f"{settings.app_name} stopped")


app = FastAPI(
    title=settings.app_name,
    description="MAC address lookup and geolocated traceroute",
    version=__version__,
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report unusable traceroute bodies as a bad hostname without echoing parser detail."""
    if request.url.path == "/api/traceroute":
        logger.warning(f"Rejected traceroute body: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid hostname format"},
        )
    return await request_validation_exception_handler(request, exc)


def get_orchestrator() -> TracerouteOrchestrator:
    """
    Dependency providing a traceroute orchestrator.
    Usage: Depends(get_orchestrator) in FastAPI endpoints.
    """
    return TracerouteOrchestrator()


def get_mac_vendor_client() -> MacVendorClient:
    """Dependency providing the MAC vendor lookup client."""
    return MacVendorClient()


# ============================================================================
# MAC Lookup
# ============================================================================


@app.get("/api/mac-lookup", response_model=MacLookupResponse)
def mac_lookup(
    mac: Optional[str] = None,
    client: MacVendorClient = Depends(get_mac_vendor_client),
):
    """
    Look up the vendor of a MAC address and classify it.
    Reports whether the address is locally administered and its cast type.
    """
    if not mac:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="MAC address is required"
        )

    try:
        return lookup_mac(mac, client)
    except VendorNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vendor not found for this MAC address",
        )
    except MacLookupError as e:
        logger.error(f"MAC lookup error for {mac}: {e}")
        raise HTTPException(status_code=500, detail="Failed to lookup MAC address")
    except Exception:
        logger.exception(f"Unexpected MAC lookup error for {mac}")
        raise HTTPException(status_code=500, detail="Failed to lookup MAC address")


# ============================================================================
# Traceroute
# ============================================================================


@app.post("/api/traceroute", response_model=TracerouteResult)
def traceroute(
    request: Optional[TracerouteRequest] = None,
    orchestrator: TracerouteOrchestrator = Depends(get_orchestrator),
):
    """
    Trace the route to a hostname.
    Returns the resolved destination and every hop, geolocated where possible.
    Runs synchronously on the server threadpool; a 30-hop trace can take a while.
    """
    hostname = request.hostname if request else None

    try:
        return orchestrator.execute_trace(hostname)
    except (ValidationError, ResolutionError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except TraceExecutionError as e:
        logger.error(f"Traceroute to {hostname} failed: {e}")
        raise HTTPException(status_code=500, detail="Traceroute execution failed")
    except Exception:
        logger.exception(f"Unexpected error tracing {hostname}")
        raise HTTPException(status_code=500, detail="Internal server error")


# ============================================================================
# Health Check
# ============================================================================


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "networking-tools-api", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)
