from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TransactionAction(str, Enum):
    """Direction of a stock adjustment."""
    ADD = "add"
    DEDUCT = "deduct"


class Transaction(BaseModel):
    """
    One historical stock adjustment.

    ``product_name`` is a copy of the product's name at the time of the
    event, not a reference, so history still renders after renames.
    """
    product_name: str = Field("", alias="productName")
    quantity_changed: int = Field(0, ge=0, alias="quantityChanged")
    action: TransactionAction = TransactionAction.DEDUCT
    date: str = Field("", description="Display-formatted timestamp")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("action", mode="before")
    @classmethod
    def normalize_action(cls, value: Any) -> TransactionAction:
        # Anything other than "add" counts as a deduction
        if isinstance(value, str) and value.strip().lower() == TransactionAction.ADD.value:
            return TransactionAction.ADD
        return TransactionAction.DEDUCT
