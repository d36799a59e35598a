"""
Data Models for the Tracker

Defines the transaction item model, the unstructured event data variant and
the result returned for every submitted payload.
"""

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, Field

from .contracts import ContractError
from .json_utils import parse_json, serialize_json


class TransactionItem(BaseModel):
    """One line item of an e-commerce transaction."""
    sku: str = Field(min_length=1, description="Stock keeping unit of the item")
    price: Optional[float] = Field(default=None, description="Unit price of the item")
    quantity: Optional[int] = Field(default=None, description="Number of units purchased")
    name: Optional[str] = Field(default=None, description="Item name")
    category: Optional[str] = Field(default=None, description="Item category")
    currency: Optional[str] = Field(default=None, description="Currency code of the price")
    item_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("item_id", "id"),
        description="Order id sent with the item; falls back to the transaction's order id",
    )


@dataclass(frozen=True)
class EventData:
    """Unstructured event properties, either a parsed tree or validated raw JSON text.

    Raw text is checked by parsing once and is then sent exactly as given.
    """

    tree: Any
    raw: Optional[str] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EventData":
        return cls(tree=dict(data))

    @classmethod
    def from_json(cls, text: str) -> "EventData":
        """Validate JSON text, raising ``MalformedJsonError`` if it does not parse."""
        return cls(tree=parse_json(text), raw=text)

    @classmethod
    def coerce(cls, value: Union["EventData", Mapping[str, Any], str]) -> "EventData":
        if isinstance(value, EventData):
            return value
        if isinstance(value, Mapping):
            return cls.from_mapping(value)
        if isinstance(value, str):
            return cls.from_json(value)
        raise ContractError(f"Unsupported event data type: {type(value).__name__}")

    def to_json(self) -> str:
        if self.raw is not None:
            return self.raw
        return serialize_json(self.tree)


class SendResult(BaseModel):
    """Outcome of handing one payload to an emitter."""
    success: bool = Field(description="Whether the collector accepted the payload")
    status_code: Optional[int] = Field(default=None, description="HTTP status code, if a response was received")
    error: Optional[str] = Field(default=None, description="Failure description")
    skipped: bool = Field(default=False, description="True when tracking is disabled and nothing was sent")
    payload: Dict[str, str] = Field(default_factory=dict, description="The parameters that were submitted")

    @classmethod
    def ok(cls, payload: Dict[str, str], status_code: Optional[int] = None) -> "SendResult":
        """Create a successful result."""
        return cls(success=True, status_code=status_code, payload=payload)

    @classmethod
    def failure(cls, payload: Dict[str, str], error: str,
                status_code: Optional[int] = None) -> "SendResult":
        """Create a failed result."""
        return cls(success=False, status_code=status_code, error=error, payload=payload)

    @classmethod
    def skipped_result(cls, payload: Dict[str, str]) -> "SendResult":
        """Create a result for a payload that was built but not sent."""
        return cls(success=True, skipped=True, payload=payload)
