"""
Key-value records as the agent returns them from /v1/kv.

The agent sends the stored bytes base64-encoded in the "Value" field, or
null when the key was written without a body.
"""
import base64
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Value(BaseModel):
    """
    A single key's entry.

    Usage:
        value = kv.get_value("service/config")
        if value is not None:
            text = value.value_as_string()
            holder = value.session
    """
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    create_index: int = Field(default=0, alias="CreateIndex")
    modify_index: int = Field(default=0, alias="ModifyIndex")
    lock_index: int = Field(default=0, alias="LockIndex")
    key: str = Field(alias="Key")
    flags: int = Field(default=0, alias="Flags", ge=0)
    value: Optional[str] = Field(default=None, alias="Value")
    session: Optional[str] = Field(default=None, alias="Session")

    def value_as_bytes(self) -> Optional[bytes]:
        """
        Decode the stored bytes.

        Returns:
            The raw bytes, or None if the key has no value
        """
        if self.value is None:
            return None
        return base64.b64decode(self.value)

    def value_as_string(self, encoding: str = "utf-8") -> Optional[str]:
        raw = self.value_as_bytes()
        if raw is None:
            return None
        return raw.decode(encoding)
