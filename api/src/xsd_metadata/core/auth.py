#!/usr/bin/env python3
"""Bearer token check for the metadata routes."""

import logging
import secrets

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .config import metadata_config

logger = logging.getLogger(__name__)
bearer_scheme = HTTPBearer()


def verify_token(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> str:
    """Accept the request only when its bearer token equals ``metadata_config.DEV_TOKEN``."""
    if metadata_config.uses_default_token:
        logger.warning("Metadata routes are protected by the default DEV_TOKEN; set DEV_TOKEN outside development")

    if not secrets.compare_digest(credentials.credentials.encode(), metadata_config.DEV_TOKEN.encode()):
        raise HTTPException(status_code=401, detail="Invalid authentication token")

    return credentials.credentials
