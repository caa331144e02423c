# SPDX-License-Identifier: GPL-3.0-or-later
# This file is part of KollaPlan.
#
# KollaPlan is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# KollaPlan is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with KollaPlan.  If not, see <https://www.gnu.org/licenses/>.

"""FastAPI application factory."""
from __future__ import annotations

import logging
from time import perf_counter

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from kollaplan.application_version import __version__
from kollaplan.common.config import load_config
from kollaplan.common.logging_config import setup_logging

from .routers import planning_routes

logger = logging.getLogger("kollaplan.web")


def create_app() -> FastAPI:
    cfg = load_config()
    setup_logging(cfg.get("logging", {}).get("level", "INFO"))
    app = FastAPI(title="KollaPlan Service", version=__version__)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):  # pragma: no cover - side-effect logging
        path = request.url.path
        is_health = path.startswith("/api/health")

        if is_health:
            logger.debug("-> %s %s", request.method, path)
        else:
            logger.info("-> %s %s", request.method, path)
        start = perf_counter()
        try:
            response = await call_next(request)
        except Exception:  # pragma: no cover - logged and re-raised
            logger.exception("<- %s %s failed", request.method, path)
            raise
        duration = (perf_counter() - start) * 1000
        status_code = response.status_code
        if status_code >= 400:
            logger.warning("<- %s %s %s %.2fms", request.method, path, status_code, duration)
        elif is_health:
            logger.debug("<- %s %s %s %.2fms", request.method, path, status_code, duration)
        else:
            logger.info("<- %s %s %s %.2fms", request.method, path, status_code, duration)
        return response

    app.include_router(planning_routes.router, prefix="/api")
    return app


app = create_app()
