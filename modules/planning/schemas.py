from typing import Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ProductIn(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    # Older clients send the key as "product_id"
    id: str = Field(..., validation_alias=AliasChoices("id", "product_id"))
    name: str
    profit: float


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    profit: float


class ResourceIn(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str = Field(..., validation_alias=AliasChoices("id", "resource_id"))
    name: str
    stock: float


class ResourceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    stock: float


class ConsumptionRecord(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    resource_id: str
    product_id: str
    amount: float


class SnapshotIn(BaseModel):
    """Full dataset submitted for a replace.

    Every field is optional at the schema level so that a missing one is
    reported as a 400 by the service instead of a 422 request validation error.
    ``consumption`` is either the ``"{resource_id}_{product_id}" -> amount``
    mapping or a list of explicit records.
    """

    products: Optional[List[ProductIn]] = None
    resources: Optional[List[ResourceIn]] = None
    consumption: Optional[Union[Dict[str, float], List[ConsumptionRecord]]] = None


class Snapshot(BaseModel):
    products: List[ProductRead] = Field(default_factory=list)
    resources: List[ResourceRead] = Field(default_factory=list)
    consumption: Dict[str, float] = Field(default_factory=dict)


class SaveResult(BaseModel):
    message: str
