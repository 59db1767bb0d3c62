"""
Bearer-token auth gate.

Every protected route depends on ``get_current_identity``.  Missing header,
wrong scheme, bad signature and expired token all produce the same 401.
Routers whose endpoints take a body also use ``AuthenticatedRoute`` so the
gate runs before the body is parsed.
"""

from __future__ import annotations

import logging
from typing import Callable, Coroutine, Optional

from fastapi import Depends, Request, Response
from fastapi.routing import APIRoute

from api.dependencies import get_context
from auth.tokens import TokenIdentity
from core.context import AppContext
from core.errors import AuthenticationError

logger = logging.getLogger(__name__)

_SCHEME = "bearer"


def _extract_bearer(authorization: Optional[str]) -> str:
    if not authorization:
        raise AuthenticationError()
    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != _SCHEME:
        raise AuthenticationError()
    return parts[1]


def authenticate_request(request: Request, ctx: AppContext) -> TokenIdentity:
    """Resolve the caller's identity once per request."""
    identity = getattr(request.state, "identity", None)
    if identity is not None:
        return identity

    try:
        token = _extract_bearer(request.headers.get("Authorization"))
    except AuthenticationError:
        logger.info("Rejected %s %s: missing or malformed Authorization header",
                    request.method, request.url.path)
        raise

    identity = ctx.tokens.verify(token)
    request.state.identity = identity
    return identity


async def get_current_identity(
    request: Request,
    ctx: AppContext = Depends(get_context),
) -> TokenIdentity:
    """
    Verify the ``Authorization: Bearer <token>`` header and return the
    identity it was issued for.  The identity is also left on
    ``request.state.identity`` for anything downstream.
    """
    return authenticate_request(request, ctx)


class AuthenticatedRoute(APIRoute):
    """Route class that rejects unauthenticated requests before body parsing."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[None, None, Response]]:
        handler = super().get_route_handler()

        async def gated_handler(request: Request) -> Response:
            authenticate_request(request, get_context(request))
            return await handler(request)

        return gated_handler
