import time
import uuid
from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from loguru import logger
from typing import List
from prometheus_client import Counter, Gauge, Histogram, generate_latest, CONTENT_TYPE_LATEST
from config import Settings, settings
from logging_config import setup_logging
from schemas import ProductCreate, ProductUpdate, ProductResponse
from store import ProductNotFoundError, ProductStore

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
PRODUCTS_IN_STORE = Gauge(
    "products_in_store",
    "Number of products currently held in memory",
    ["service"]
)


def build_store(service_name: str) -> ProductStore:
    """Seeded store keeping the products_in_store gauge up to date."""
    return ProductStore.seeded(on_change=PRODUCTS_IN_STORE.labels(service=service_name).set)


def get_store(request: Request) -> ProductStore:
    return request.app.state.product_store


def _route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


# Middleware pour logger les requests avec correlation ID
async def log_requests(request: Request, call_next):
    service_name = request.app.state.settings.service_name
    # Generate or propagate correlation ID (trace-id)
    trace_id = request.headers.get("X-Trace-ID", str(uuid.uuid4()))
    start_time = time.time()

    # Bind trace_id to logger context
    with logger.contextualize(trace_id=trace_id, service=service_name):
        logger.info(
            f"Request: {request.method} {request.url.path}",
            extra={"method": request.method, "url": str(request.url), "trace_id": trace_id}
        )

        response = await call_next(request)

        latency = time.time() - start_time
        endpoint = _route_template(request)

        REQUEST_COUNT.labels(
            service=service_name,
            method=request.method,
            endpoint=endpoint,
            status=response.status_code
        ).inc()
        REQUEST_LATENCY.labels(
            service=service_name,
            method=request.method,
            endpoint=endpoint
        ).observe(latency)

        logger.info(
            f"Response status: {response.status_code}",
            extra={"status": response.status_code, "latency": latency, "trace_id": trace_id}
        )

        # Add trace_id to response headers for tracing
        response.headers["X-Trace-ID"] = trace_id
        return response


async def product_not_found_handler(request: Request, exc: ProductNotFoundError):
    """404 sans corps, comme pour tout identifiant inconnu."""
    logger.warning(f"Product {exc.product_id} not found")
    ERROR_COUNT.labels(service=request.app.state.settings.service_name, endpoint=_route_template(request), error_type="not_found").inc()
    return Response(status_code=status.HTTP_404_NOT_FOUND)


async def metrics():
    """Endpoint /metrics compatible Prometheus"""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


async def health(request: Request):
    """Health check endpoint"""
    return {"status": "healthy", "service": request.app.state.settings.service_name}


router = APIRouter(prefix="/products", tags=["products"])


@router.get("", response_model=List[ProductResponse])
async def get_products(store: ProductStore = Depends(get_store)):
    logger.info("Fetching all products")
    return store.list()


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: int, store: ProductStore = Depends(get_store)):
    logger.info(f"Fetching product {product_id}")
    return store.get(product_id)


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product: ProductCreate,
    request: Request,
    response: Response,
    store: ProductStore = Depends(get_store),
):
    logger.info(f"Creating product: {product.name}")
    new_product = store.create(product.name, product.price)
    response.headers["Location"] = str(request.url_for("get_product", product_id=new_product.id))
    return new_product


@router.put("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_product(product_id: int, product: ProductUpdate, store: ProductStore = Depends(get_store)):
    logger.info(f"Updating product {product_id}")
    store.update(product_id, product.name, product.price)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: int, store: ProductStore = Depends(get_store)):
    logger.info(f"Deleting product {product_id}")
    store.delete(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def create_app(app_settings: Settings = settings) -> FastAPI:
    """Build the service from ``app_settings``: logging, store and routes."""
    # Config logging JSON (niveaux INFO, WARNING, ERROR)
    setup_logging(app_settings.log_level, app_settings.log_file, app_settings.log_to_stderr)

    # Documentation interactive uniquement en développement
    docs = app_settings.is_development
    application = FastAPI(
        title="Products Service",
        docs_url="/docs" if docs else None,
        redoc_url="/redoc" if docs else None,
        openapi_url="/openapi.json" if docs else None,
    )
    application.state.settings = app_settings
    application.state.product_store = build_store(app_settings.service_name)

    application.middleware("http")(log_requests)
    application.add_exception_handler(ProductNotFoundError, product_not_found_handler)
    application.add_api_route("/metrics", metrics, methods=["GET"])
    application.add_api_route("/health", health, methods=["GET"])
    application.include_router(router, prefix=app_settings.api_prefix)
    return application


app = create_app()


def run():
    import uvicorn
    logger.info(f"Starting Products Service on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
