# apartment_api/main.py

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from apartment_api.config import ALLOWED_ORIGINS, PORT
from apartment_api.logging_config import setup_logging
from apartment_api.middleware import RequestIDMiddleware
from apartment_api.routes.admin_listings import router as admin_listings_router
from apartment_api.routes.health import router as health_router
from apartment_api.routes.listings import router as listings_router
from apartment_api.routes.metrics import router as metrics_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Apartment Listings API",
    description="Public listing search and key-gated listing administration",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials="*" not in ALLOWED_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Reject malformed input with 400 and the field-level issues."""
    logger.info("request_validation_failed", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


# Register routers
app.include_router(health_router, prefix="/api", tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(listings_router, prefix="/api", tags=["Listings"])
app.include_router(admin_listings_router, prefix="/api/admin/listings", tags=["Admin"])


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=PORT)
