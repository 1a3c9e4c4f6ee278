#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Task Board - Dependencies
Providers for FastAPI route dependencies
"""

import logging

from fastapi import Request

from taskboard.config import Settings
from taskboard.core.store import RowStore

logger = logging.getLogger(__name__)


# ===== DEPENDENCY PROVIDERS =====

def get_store(request: Request) -> RowStore:
    """Row store attached to the running application"""
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    """Settings the application was built with"""
    return request.app.state.settings


def get_client_ip(request: Request) -> str:
    """Client IP, honouring proxy headers"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"
