"""Main FastAPI application"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from oidc_provider.core.config import logger, settings
from oidc_provider.core.exceptions import IssuerNotFound, OIDCProviderError
from oidc_provider.middleware import StructuredLoggingMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting OIDC Provider...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Version: {settings.version}")

    try:
        from oidc_provider.core.dependencies import build_issuer_resolver
        from oidc_provider.services.credential_store import credential_store

        credentials = credential_store.load()
        app.state.issuer_resolver = build_issuer_resolver(credentials)
        logger.info(f"✓ Root issuer {settings.root_issuer_url} serving {len(credentials)} credentials")

    except Exception as e:
        logger.error(f"Failed to initialize: {e}")
        raise

    yield

    logger.info("Shutting down OIDC Provider...")


# Create FastAPI application
app = FastAPI(
    title="OIDC Provider",
    description="OpenID Connect ID tokens for CI builds",
    version=settings.version,
    docs_url="/docs" if settings.is_development else None,
    redoc_url="/redoc" if settings.is_development else None,
    lifespan=lifespan,
)

app.add_middleware(StructuredLoggingMiddleware)


@app.exception_handler(IssuerNotFound)
async def issuer_not_found_handler(request: Request, exc: IssuerNotFound):
    """Unknown issuers and credentials are plain 404s"""
    logger.debug(f"Issuer not found: {exc}", extra={"path": request.url.path})
    return JSONResponse(status_code=404, content={"detail": "Not Found"})


@app.exception_handler(OIDCProviderError)
async def provider_error_handler(request: Request, exc: OIDCProviderError):
    """Key and algorithm failures are configuration defects"""
    logger.error(
        f"Internal error: {exc}",
        extra={"path": request.url.path, "error_type": type(exc).__name__},
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return JSONResponse(
        content={
            "status": "healthy",
            "version": settings.version,
            "environment": settings.environment,
        }
    )


@app.get("/")
async def root():
    """Root endpoint"""
    return JSONResponse(
        content={
            "service": "OIDC Provider",
            "version": settings.version,
            "issuer": settings.root_issuer_url,
        }
    )


# Include routers
from oidc_provider.api.v1 import admin, oidc  # noqa: E402

app.include_router(oidc.router, prefix="/oidc", tags=["OIDC"])
app.include_router(admin.router, prefix="/admin/credentials", tags=["Admin"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "oidc_provider.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )
