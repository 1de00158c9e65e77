import sys
import time
import uuid
from typing import List, Optional

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from loguru import logger
from prometheus_client import Counter, Gauge, Histogram, generate_latest, CONTENT_TYPE_LATEST

import config
from errors import InvalidFormat, MissingField, NotFound, UserServiceError
from models import User
from schemas import RegistrationRequest, UserResponse
from store import UserStore, seeded_store
from validation import build_user, validate_registration


def setup_logging():
    # Config logging JSON (niveaux INFO, WARNING, ERROR)
    logger.remove()  # Supprime le handler par défaut
    logger.add(
        sink=config.LOG_FILE,
        format="{time:YYYY-MM-DDTHH:mm:ss.SSSZ} | {level} | {message} | {extra}",
        level=config.LOG_LEVEL,
        serialize=True,  # Format JSON
        rotation="1 day",  # Rotation quotidienne
    )
    if not config.is_production():
        # Console lisible pour l'opérateur hors production
        logger.add(sys.stderr, level=config.LOG_LEVEL)


setup_logging()

# Prometheus metrics
REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "method", "endpoint", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["service", "method", "endpoint"]
)
ERROR_COUNT = Counter(
    "http_errors_total",
    "Total HTTP errors",
    ["service", "endpoint", "error_type"]
)
USERS_IN_STORE = Gauge(
    "users_in_store",
    "Number of users currently held in memory",
    ["service"]
)

app = FastAPI(title="Users Service")
app.state.user_store = seeded_store()

# En-têtes de sécurité ajoutés à chaque réponse
SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
}


def get_user_store(request: Request) -> UserStore:
    return request.app.state.user_store


def internal_fault_response(exc: Exception, endpoint: str) -> JSONResponse:
    """Boundary layer: turn an unexpected exception into a 500."""
    ERROR_COUNT.labels(service=config.SERVICE_NAME, endpoint=endpoint, error_type="internal_fault").inc()
    if config.is_production():
        logger.error(f"Unhandled error: {exc.__class__.__name__}")
        body = {"error": {"message": "server error"}}
    else:
        logger.opt(exception=exc).error(f"Unhandled error: {exc}")
        body = {
            "message": str(exc),
            "error": {"type": exc.__class__.__name__, "detail": [str(arg) for arg in exc.args]},
        }
    return JSONResponse(status_code=500, content=body)


def client_error_response(exc: UserServiceError, endpoint: str, error_type: str) -> PlainTextResponse:
    logger.warning(exc.message, extra={"error_type": error_type})
    ERROR_COUNT.labels(service=config.SERVICE_NAME, endpoint=endpoint, error_type=error_type).inc()
    return PlainTextResponse(exc.message, status_code=exc.status_code)


# Middleware pour logger les requests avec correlation ID (observabilité)
@app.middleware("http")
async def log_requests(request: Request, call_next):
    # Generate or propagate correlation ID (trace-id)
    trace_id = request.headers.get("X-Trace-ID", str(uuid.uuid4()))
    start_time = time.time()

    # Bind trace_id to logger context
    with logger.contextualize(trace_id=trace_id, service=config.SERVICE_NAME):
        if config.is_production():
            logger.info(f"Request: {request.method} {request.url.path}")
        else:
            client = request.client.host if request.client else None
            # bind plutôt que kwargs: le chemin peut contenir des accolades
            logger.bind(method=request.method, url=str(request.url), client=client).info(
                f"Request: {request.method} {request.url.path}"
            )

        try:
            response = await call_next(request)
        except Exception as exc:
            response = internal_fault_response(exc, request.url.path)

        # Calculate latency
        latency = time.time() - start_time

        # Record metrics
        REQUEST_COUNT.labels(
            service=config.SERVICE_NAME,
            method=request.method,
            endpoint=request.url.path,
            status=response.status_code
        ).inc()
        REQUEST_LATENCY.labels(
            service=config.SERVICE_NAME,
            method=request.method,
            endpoint=request.url.path
        ).observe(latency)

        logger.info(
            f"Response status: {response.status_code}",
            extra={"status": response.status_code, "latency": latency}
        )

        # Add trace_id to response headers for tracing
        response.headers["X-Trace-ID"] = trace_id
        response.headers.update(SECURITY_HEADERS)
        return response


# CORS ouvert; ajouté en dernier, il enveloppe le middleware de log
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/metrics")
async def metrics(store: UserStore = Depends(get_user_store)):
    """Endpoint /metrics compatible Prometheus"""
    USERS_IN_STORE.labels(service=config.SERVICE_NAME).set(len(store))
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy", "service": config.SERVICE_NAME}


@app.get("/", response_class=PlainTextResponse)
async def root():
    return "GET request received"


@app.get("/book/{book_id}", status_code=204)
async def get_book(book_id: str):
    """Réservé: aucune ressource livre n'est gérée par ce service."""
    return Response(status_code=204)


@app.get("/user", response_model=List[UserResponse])
async def list_users(store: UserStore = Depends(get_user_store)):
    logger.info("Fetching all users")
    return store.list_all()


@app.delete("/user/{user_id}", status_code=204)
async def delete_user(user_id: str, store: UserStore = Depends(get_user_store)):
    logger.info(f"Deleting user {user_id}")
    if not store.delete_by_id(user_id):
        return client_error_response(NotFound(user_id), "/user/{user_id}", "not_found")
    logger.info(f"User {user_id} deleted")
    return Response(status_code=204)


@app.post("/register", response_model=UserResponse, status_code=201)
async def register_user(
    request: Request,
    response: Response,
    payload: Optional[RegistrationRequest] = None,
    store: UserStore = Depends(get_user_store),
):
    fields = payload.model_dump() if payload is not None else {}
    try:
        cleaned = validate_registration(fields)
    except MissingField as exc:
        return client_error_response(exc, "/register", "missing_field")
    except InvalidFormat as exc:
        return client_error_response(exc, "/register", exc.rule.replace(" ", "_"))

    user: User = build_user(cleaned)
    store.append(user)
    logger.info(f"User created with ID {user.id}")

    response.headers["Location"] = str(request.url_for("delete_user", user_id=user.id))
    return user


if __name__ == "__main__":
    logger.info(f"Starting Users Service on port {config.PORT}")
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
