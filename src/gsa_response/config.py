"""Configuration models for the GSA response writer."""

from __future__ import annotations

import os
import socket
from base64 import urlsafe_b64encode
from hashlib import blake2b

from pydantic import BaseModel, ConfigDict, Field


class PositionalAttribute(BaseModel):
    """Extra attribute placed on the `<R>` element of one local hit index."""

    index: int = Field(ge=0)
    name: str = Field(pattern=r"^[A-Za-z_][\w.-]*$")
    value: str


class WriterConfig(BaseModel):
    """Configures the wire-level quirks of the result writer.

    The defaults reproduce the appliance-compatible output byte for byte,
    including the unencoded `UE` value and the unescaped `original_value`.
    """

    encode_ue_url: bool = False
    escape_param_original: bool = False
    strict_numeric_fields: bool = True
    next_page_path: str = "/search"
    positional_attributes: list[PositionalAttribute] = Field(
        default_factory=lambda: [PositionalAttribute(index=1, name="L", value="2")]
    )


class EngineConfig(BaseModel):
    """Configures paging limits of the search host."""

    default_rows: int = Field(default=10, ge=1)
    max_rows: int = Field(default=1000, ge=1)


def _default_node_id() -> str:
    digest = blake2b(socket.gethostname().encode("utf-8"), digest_size=9).digest()
    return urlsafe_b64encode(digest).decode("ascii")


class ServiceSettings(BaseModel):
    """Identity of the serving node, embedded in every result."""

    model_config = ConfigDict(frozen=True)

    release_name: str = Field(default="gsa-response-0.1.0", min_length=1)
    node_id: str = Field(default_factory=_default_node_id, min_length=1)

    @classmethod
    def from_env(cls) -> "ServiceSettings":
        values: dict[str, str] = {}
        release_name = os.getenv("GSA_RELEASE_NAME")
        if release_name:
            values["release_name"] = release_name
        node_id = os.getenv("GSA_NODE_ID")
        if node_id:
            values["node_id"] = node_id
        return cls(**values)
