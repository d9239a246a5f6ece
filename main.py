import argparse
import logging
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from contextlib import asynccontextmanager

import sys
from pathlib import Path

# Add project root to path for package imports
base_dir = Path(__file__).parent
sys.path.insert(0, str(base_dir))

from db.database import init_db
from config import load_config, get_auth_settings
from routes import accounts, initial_data, folders, decks, flashcards  # Import routers
from utils.errors import MedRecallError, StoreUnavailable

logger = logging.getLogger("medrecall")

# First-run init
@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: config, signing secret (loaded once), DB
    load_config()
    get_auth_settings()
    init_db()
    yield

app = FastAPI(title="MedRecall", description="Study manager API: folders, decks and flashcards", lifespan=lifespan)

# Include routers
app.include_router(accounts.router, prefix="/api", tags=["accounts"])
app.include_router(initial_data.router, prefix="/api", tags=["initial-data"])
app.include_router(folders.router, prefix="/api/folders", tags=["folders"])
app.include_router(decks.router, prefix="/api/decks", tags=["decks"])
app.include_router(flashcards.router, prefix="/api/flashcards", tags=["flashcards"])

@app.exception_handler(MedRecallError)
async def medrecall_error_handler(request: Request, exc: MedRecallError):
    if isinstance(exc, StoreUnavailable):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.detail, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"message": "Invalid request", "errors": errors})

@app.get("/", response_class=PlainTextResponse)
async def home():
    return "MedRecall API running"

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="MedRecall API")
    parser.add_argument("--init", action="store_true", help="Initialize DB and config")
    parser.add_argument("--dev", action="store_true", help="Run in dev mode with reload")
    args = parser.parse_args()
    config = load_config()
    server_cfg = config["server"]
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=server_cfg["log_level"].upper(),
    )
    if args.init:
        get_auth_settings()  # Generates the signing secret if missing
        init_db()
        print("DB initialized and config copied to ~/.medrecall/")
        exit(0)
    # Run server
    uvicorn.run(
        "main:app",
        host=server_cfg["host"],
        port=server_cfg["port"],
        reload=args.dev,
        log_level=server_cfg["log_level"],
    )
