"""FastAPI application for compiling workflow graphs and generating code."""

import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from flowspec.sdk.codegen_client import DEFAULT_SERVER_URL
from server.codegen_routes import router as codegen_router
from server.spec_routes import router as spec_router

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# comma-separated list, "*" allows any origin
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",")]

API_VERSION = "0.1.0"

app = FastAPI(
    title="Flowspec API",
    description="Graph <-> specification compilation and langgraph-gen code generation",
    version=API_VERSION,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in (spec_router, codegen_router):
    app.include_router(router, prefix="/api")


@app.get("/")
def health():
    """report the API version and which code generation server is used."""
    return {
        "status": "ok",
        "version": API_VERSION,
        "codegen_server": os.getenv("CODEGEN_SERVER_URL", DEFAULT_SERVER_URL),
    }


def main() -> None:
    import uvicorn
    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8000")))


if __name__ == "__main__":
    main()
