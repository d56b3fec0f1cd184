from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from pydantic import ValidationError
import json
import logging

from config import get_settings
from models import RPCRequest, HealthResponse
from plan_execution import ErrorCode, ResultNormalizer
from server import get_server, shutdown_server

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

_normalizer = ResultNormalizer()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logging.getLogger().setLevel(get_settings().log_level.upper())
    logger.info("Starting Docker Planner JSON-RPC server...")
    await get_server()

    yield

    # Shutdown
    logger.info("Shutting down...")
    await shutdown_server()


app = FastAPI(
    title="Docker Planner",
    description="Turns natural-language instructions into executed Docker plans over JSON-RPC",
    version="0.1.0",
    lifespan=lifespan,
)


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    server = await get_server()
    return HealthResponse(
        status="ok",
        service="docker-planner",
        tools=server.registry.tool_count,
        runtime=await server.runtime.health_check(),
    )


@app.post("/rpc")
async def rpc(request: Request):
    """
    JSON-RPC 2.0 endpoint.

    Execution errors are returned as error envelopes with HTTP 200;
    they never take the server down.
    """
    body = await request.body()
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Unparseable JSON-RPC request: {e}")
        envelope = _normalizer.error(ErrorCode.PARSE_ERROR, f"parse error: {e}")
        return JSONResponse(envelope.model_dump())

    try:
        rpc_request = RPCRequest.model_validate(payload)
    except ValidationError as e:
        request_id = payload.get("id") if isinstance(payload, dict) else None
        if not isinstance(request_id, (int, str)):
            request_id = None
        envelope = _normalizer.error(
            ErrorCode.INVALID_REQUEST,
            f"invalid request: {e.errors()[0]['msg']}",
            request_id,
        )
        return JSONResponse(envelope.model_dump())

    logger.info(f"RPC call {rpc_request.method} (id={rpc_request.id})")
    server = await get_server()
    envelope = await server.dispatch(rpc_request)
    return JSONResponse(envelope.model_dump())


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
