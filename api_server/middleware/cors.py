"""CORS configuration"""

import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


def setup_cors(app: FastAPI) -> None:
    """Configure CORS middleware

    Reads ALLOWED_ORIGINS (comma separated) from the environment.
    Without it every origin is allowed, which suits local use.
    """
    origins_str = os.getenv("ALLOWED_ORIGINS", "")
    origins = [origin.strip() for origin in origins_str.split(",") if origin.strip()]

    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=ALLOWED_METHODS,
            allow_headers=["Content-Type", "Authorization"],
        )
    else:
        # credentials cannot be combined with a wildcard origin
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=False,
            allow_methods=ALLOWED_METHODS,
            allow_headers=["Content-Type", "Authorization"],
        )
