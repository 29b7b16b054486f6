"""Projection of Clerk user payloads onto local user records."""

from sync_common.models.user import ClerkUserPayload, UserRecord


def map_user_payload(payload: ClerkUserPayload) -> UserRecord:
    """Build the local record for a Clerk user.

    Only the first email address is kept. Absent optional fields become
    empty strings.
    """
    email = payload.email_addresses[0].email_address if payload.email_addresses else ""
    return UserRecord(
        clerk_id=payload.id,
        email=email,
        username=payload.username or "",
        photo=payload.image_url or "",
        first_name=payload.first_name or "",
        last_name=payload.last_name or "",
    )
