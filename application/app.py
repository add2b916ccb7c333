import sys
from pathlib import Path

# Load environment variables FIRST, before any other imports
from dotenv import load_dotenv
load_dotenv()

# Add project root to path (for IDE compatibility when running directly)
project_root = Path(__file__).parent.parent.resolve()
project_root_str = str(project_root)

if sys.path and Path(sys.path[0]).name == 'application':
    sys.path[0] = project_root_str
elif project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

import asyncio
import logging
import os
from typing import Dict

from quart import Quart, Response, jsonify
from quart_rate_limiter import RateLimiter
from quart_schema import QuartSchema, ResponseSchemaValidationError, hide

from application.repositories.database import get_database, init_database
from application.routes import crud_bp, images_bp, list_create_bp, stream_bp, token_bp
from application.routes.common.error_handlers import register_error_handlers
from common.config.config import DATABASE_ECHO, DATABASE_URL

# Configure root logging to both stdout and a file for debugging/triage.
# Default file is app-log.log in the current working directory; override with APP_LOG_FILE.
log_file = os.getenv("APP_LOG_FILE", "app-log.log")
log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logging.basicConfig(
    level=logging.INFO,
    format=log_format,
    handlers=[
        logging.StreamHandler(sys.stdout),
        logging.FileHandler(log_file, mode="a"),
    ],
)

# The Gemini SDK logs every HTTP exchange at INFO
logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def _apply_cors(response: Response) -> Response:
    # Allow all origins (bearer tokens, not cookies)
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "GET, POST, DELETE, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "*"
    return response


def create_app() -> Quart:
    """Build the Quart application with all blueprints and handlers."""
    app = Quart(__name__)

    # RESPONSE_TIMEOUT bounds how long a streamed reply may keep the handler alive
    app.config["RESPONSE_TIMEOUT"] = int(os.getenv("QUART_RESPONSE_TIMEOUT", "600"))
    app.config["BODY_TIMEOUT"] = int(os.getenv("QUART_BODY_TIMEOUT", "600"))

    RateLimiter(app)

    QuartSchema(
        app,
        info={"title": "Zak Chat", "version": "1.0.0"},
        tags=[
            {"name": "Chat", "description": "Conversation and message endpoints"},
            {"name": "Images", "description": "Image generation endpoints"},
            {"name": "Auth", "description": "Token and identity endpoints"},
            {"name": "System", "description": "System and health endpoints"},
        ],
        security=[{"bearerAuth": []}],
        security_schemes={
            "bearerAuth": {
                "type": "http",
                "scheme": "bearer",
            }
        },
    )

    @app.errorhandler(ResponseSchemaValidationError)
    async def handle_response_validation_error(
        error: ResponseSchemaValidationError,
    ) -> tuple[Dict[str, str], int]:
        return {"error": "VALIDATION"}, 500

    register_error_handlers(app)

    # Register blueprints
    app.register_blueprint(list_create_bp, url_prefix="/api/conversations")
    app.register_blueprint(crud_bp, url_prefix="/api/conversations")
    app.register_blueprint(stream_bp, url_prefix="/api/conversations")
    app.register_blueprint(images_bp, url_prefix="/api")
    app.register_blueprint(token_bp, url_prefix="/api/auth")

    @app.route("/health", methods=["GET"])
    async def health() -> Response:
        return jsonify({"status": "ok"})

    @app.route("/favicon.ico")
    @hide
    def favicon() -> tuple[str, int]:
        return "", 200

    @app.before_serving
    async def startup() -> None:
        logger.info("Initializing database at application startup...")
        database = init_database(DATABASE_URL, echo=DATABASE_ECHO)
        await database.create_all()

    @app.after_serving
    async def shutdown() -> None:
        logger.info("Shutting down application...")
        await get_database().dispose()
        logger.info("Application shutdown complete")

    @app.after_request
    async def add_cors_headers(response: Response) -> Response:
        return _apply_cors(response)

    # Handle OPTIONS preflight requests for CORS
    @app.route("/<path:path>", methods=["OPTIONS"])
    async def handle_options(path: str) -> tuple[Response, int]:
        return _apply_cors(jsonify({"status": "ok"})), 200

    return app


app = create_app()


if __name__ == "__main__":
    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    host = os.getenv("APP_HOST", "127.0.0.1")
    port = int(os.getenv("APP_PORT", "8000"))

    config = Config()
    config.bind = [f"{host}:{port}"]

    logger.info(f"Starting Zak Chat on {host}:{port}")
    asyncio.run(serve(app, config))
