import uvicorn as uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from src.config.settings import Settings, settings as default_settings
from src.commonUtils.errors import ContactFormValidationError, CorsError, MailConfigurationError, PayloadTooLargeError
from src.commonUtils.timeUtil import iso_timestamp, uptime_seconds
from src.routes import contactRoute

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"
CORS_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_HEADERS = ["Content-Type", "Authorization", "Accept"]

# helmet-style defaults
SECURITY_HEADERS = {
    "Content-Security-Policy": "default-src 'self';base-uri 'self';frame-ancestors 'self';object-src 'none'",
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
}


def is_origin_allowed(origin: str | None, settings: Settings) -> bool:
    # No Origin header: curl, mobile apps, server-to-server
    if not origin:
        return True
    return origin in settings.ALLOWED_ORIGINS or not settings.is_production


async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler that formats all errors consistently"""
    logger.error(f"Global error handler: {str(exc)}", exc_info=not isinstance(exc, CorsError))

    if isinstance(exc, CorsError):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.error, "message": exc.message}
        )

    # Don't expose internal details
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal Server Error",
            "message": "Something went wrong on the server",
        }
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Unknown paths and unsupported methods are both reported as missing routes
    if exc.status_code in (404, 405):
        route = request.url.path
        if request.url.query:
            route = f"{route}?{request.url.query}"
        return JSONResponse(
            status_code=404,
            content={
                "error": "Route not found",
                "message": f"The requested route {route} does not exist.",
            }
        )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": "HTTP Error", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def api_error_handler(request: Request, exc: ContactFormValidationError | MailConfigurationError | PayloadTooLargeError):
    if isinstance(exc, MailConfigurationError):
        logger.error(f"Error processing form submission: {str(exc)}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.error, "message": exc.message}
    )


def create_app(settings: Settings = default_settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"🚀 Server is running on port {settings.PORT}")
        logger.info(f"📋 Health check: http://localhost:{settings.PORT}/health")
        logger.info(f"📧 Contact API: http://localhost:{settings.PORT}/api/contact")
        logger.info(f"🌍 Environment: {settings.ENVIRONMENT}")
        if not settings.smtp_configured:
            logger.warning("⚠️ SMTP_EMAIL/SMTP_PASSWORD not set - contact submissions will fail")
        yield

    app = FastAPI(
        title="Contact Form API",
        version=VERSION,
        lifespan=lifespan,
        docs_url=None if settings.is_production else "/docs",
        redoc_url=None if settings.is_production else "/redoc"
    )
    app.state.settings = settings

    app.add_exception_handler(Exception, global_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(ContactFormValidationError, api_error_handler)
    app.add_exception_handler(MailConfigurationError, api_error_handler)
    app.add_exception_handler(PayloadTooLargeError, api_error_handler)

    # Middleware added last runs first
    @app.middleware("http")
    async def error_boundary_middleware(request: Request, call_next):
        # Inside CORS and security headers so unexpected 500s still carry them
        try:
            return await call_next(request)
        except Exception as exc:
            return await global_exception_handler(request, exc)

    @app.middleware("http")
    async def body_size_middleware(request: Request, call_next):
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > settings.MAX_BODY_BYTES:
            logger.warning(f"⛔ Rejected {content_length} byte body on {request.url.path}")
            return await api_error_handler(request, PayloadTooLargeError(settings.MAX_BODY_BYTES))
        return await call_next(request)

    if settings.is_production:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.ALLOWED_ORIGINS,
            allow_credentials=True,
            allow_methods=CORS_METHODS,
            allow_headers=CORS_HEADERS,
        )
    else:
        app.add_middleware(
            CORSMiddleware,
            allow_origin_regex=".*",
            allow_credentials=True,
            allow_methods=CORS_METHODS,
            allow_headers=CORS_HEADERS,
        )

    @app.middleware("http")
    async def origin_policy_middleware(request: Request, call_next):
        origin = request.headers.get("origin")
        if not is_origin_allowed(origin, settings):
            logger.warning(f"⛔ Blocked origin {origin} → {request.url.path}")
            return await global_exception_handler(request, CorsError(origin))
        return await call_next(request)

    @app.middleware("http")
    async def security_headers_middleware(request: Request, call_next):
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    app.include_router(contactRoute.router, tags=['contact'], prefix='/api')

    @app.get("/health")
    async def health():
        return {
            "status": "OK",
            "message": "Server is running",
            "timestamp": iso_timestamp(),
            "uptime": uptime_seconds(),
        }

    @app.get("/")
    async def root():
        return {
            "message": "Contact Form API Server",
            "version": VERSION,
            "endpoints": {
                "health": "GET /health",
                "contact": "POST /api/contact",
            },
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("src.main:app", host="0.0.0.0", port=default_settings.PORT,
                proxy_headers=True, forwarded_allow_ips="*", log_level="info")
