"""User record and Clerk payload models."""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field


class UserRecord(BaseModel):
    """User entity persisted in the users container."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "id": "0f8fad5b-d9cb-469f-a165-70867728950e",
                "clerkId": "user_2abc",
                "email": "jane.doe@example.com",
                "username": "jane",
                "photo": "https://img.clerk.com/jane.png",
                "firstName": "Jane",
                "lastName": "Doe",
            }
        },
    )

    id: str | None = Field(default=None, description="Identifier generated by the store")
    clerk_id: str = Field(..., alias="clerkId", description="Clerk user ID")
    email: str = ""
    username: str = ""
    photo: str = Field(default="", description="Avatar URL")
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")

    def to_document(self) -> dict[str, Any]:
        """Serialize with camelCase keys as stored in Cosmos DB."""
        return self.model_dump(mode="json", by_alias=True)


class EmailAddress(BaseModel):
    """Email entry of a Clerk user."""

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    email_address: str


class ClerkUserPayload(BaseModel):
    """The ``data`` object of ``user.created`` and ``user.updated`` events."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    email_addresses: list[EmailAddress] | None = None
    username: str | None = None
    image_url: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class ClerkDeletedObject(BaseModel):
    """The ``data`` object of ``user.deleted`` events."""

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., min_length=1)
    deleted: bool = True


class WebhookEvent(BaseModel):
    """A verified Clerk webhook event."""

    USER_CREATED: ClassVar[str] = "user.created"
    USER_UPDATED: ClassVar[str] = "user.updated"
    USER_DELETED: ClassVar[str] = "user.deleted"

    model_config = ConfigDict(extra="ignore")

    type: str
    data: dict[str, Any] = Field(default_factory=dict)
    object: str | None = None
