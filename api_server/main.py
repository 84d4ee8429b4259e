"""FastAPI application entry point"""

import os
from dotenv import load_dotenv
from fastapi import FastAPI

# Load environment variables before the debate config reads them
load_dotenv()

from api_server.middleware import (
    setup_cors,
    setup_rate_limit,
    setup_logging,
    setup_error_handlers,
    LoggingMiddleware,
)
from api_server.routes import ROUTERS

# Setup logging
logger = setup_logging()

# Create FastAPI app
app = FastAPI(
    title="Coach Debate API",
    description="Turn-based debate between a CrossFit coach and a HEROS coach",
    version="1.0.0",
)

# Setup middleware
setup_cors(app)
setup_rate_limit(app)
setup_error_handlers(app)
app.add_middleware(LoggingMiddleware)

# Include routers
for router in ROUTERS:
    app.include_router(router)


@app.get("/")
async def root():
    """API banner"""
    return {
        "message": "Coach Debate API",
        "docs": "/docs",
        "health": "/health",
    }


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))

    uvicorn.run(
        "api_server.main:app",
        host=host,
        port=port,
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )
