from __future__ import annotations

from pydantic import BaseModel, Field


class MetadataAttribute(BaseModel):
    trait_type: str
    value: str | int | float


class CredentialMetadata(BaseModel):
    """Off-chain JSON document a credential's metadata_uri points at.

    Shape follows the common NFT metadata convention. Unknown keys are
    ignored so issuers can add their own.
    """

    name: str
    description: str = ""
    image: str = ""
    attributes: list[MetadataAttribute] = Field(default_factory=list)
