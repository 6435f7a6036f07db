from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Stored as fixed-point, sent to clients as a JSON number.
Price = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ProductWrite(BaseModel):
    """
    Incoming product payload (`{nombre, precio, cantidad}`).

    Only types are checked here; business rules (non-empty name, positive price,
    non-negative quantity) belong to the service so they come back as failure
    envelopes.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = Field(default=None, alias="nombre")
    price: Decimal | None = Field(default=None, alias="precio")
    quantity: int | None = Field(default=None, alias="cantidad")


class ProductCreate(ProductWrite):
    pass


class ProductUpdate(ProductWrite):
    # Must match the id in the path
    id: int | None = Field(default=None, alias="productoId")
    # Version the client last saw; a stale value is rejected with 409
    version: int | None = None


class ProductRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int = Field(alias="productoId")
    name: str = Field(alias="nombre")
    price: Price = Field(alias="precio")
    quantity: int = Field(alias="cantidad")
    version: int
