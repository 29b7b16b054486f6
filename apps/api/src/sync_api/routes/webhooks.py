"""Clerk webhook routes."""

import logging

from fastapi import APIRouter, Depends, Header, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from sync_api.models.webhook import WebhookResponse
from sync_api.services import get_user_sync_service, get_webhook_verifier
from sync_common.models.user import WebhookEvent
from sync_common.services.user_sync import UserSyncService
from sync_common.services.webhook_verifier import (
    SVIX_ID_HEADER,
    SVIX_SIGNATURE_HEADER,
    SVIX_TIMESTAMP_HEADER,
    WebhookVerifier,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])


async def get_verified_event(
    request: Request,
    svix_id: str | None = Header(None, alias=SVIX_ID_HEADER),
    svix_timestamp: str | None = Header(None, alias=SVIX_TIMESTAMP_HEADER),
    svix_signature: str | None = Header(None, alias=SVIX_SIGNATURE_HEADER),
    verifier: WebhookVerifier = Depends(get_webhook_verifier),
) -> WebhookEvent:
    """Verify the raw body against the Svix headers.

    The raw body is verified before it is parsed, so it must be read
    untouched.
    """
    body = await request.body()
    event = verifier.verify(
        body,
        {
            SVIX_ID_HEADER: svix_id,
            SVIX_TIMESTAMP_HEADER: svix_timestamp,
            SVIX_SIGNATURE_HEADER: svix_signature,
        },
    )
    logger.info("Received webhook %s of type %s", svix_id, event.type)
    return event


@router.post("/clerk", response_model=WebhookResponse)
async def receive_clerk_webhook(
    # Resolved in order: a rejected webhook never reaches the store dependencies
    event: WebhookEvent = Depends(get_verified_event),
    sync_service: UserSyncService = Depends(get_user_sync_service),
) -> JSONResponse:
    """Receive a Clerk user event delivered by Svix."""
    result = await run_in_threadpool(sync_service.handle, event)
    return JSONResponse(
        status_code=result.status_code,
        content=WebhookResponse.from_result(result).to_content(),
    )
