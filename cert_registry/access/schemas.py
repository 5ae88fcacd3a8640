from pydantic import BaseModel, Field


class IssuerAuthorize(BaseModel):
    principal: str = Field(description="Principal to grant issuing rights to")


class IssuerStatusRead(BaseModel):
    principal: str
    is_authorized: bool


class OwnerRead(BaseModel):
    owner: str
