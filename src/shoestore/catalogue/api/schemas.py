"""Pydantic request/response schemas for the Catalogue API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

# --- Shared sub-models ---


class SizeStockSchema(BaseModel):
    size: float
    stock: int = Field(0, ge=0)


# --- Request Schemas ---


class CreateProductRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Trail Runner",
                    "brand": "Stride",
                    "description": "Lightweight trail running shoe",
                    "category": "sports",
                    "color": "Blue",
                    "price": 4999.0,
                    "images": ["/uploads/trail-runner.jpg"],
                    "sizes": [{"size": 8, "stock": 10}, {"size": 8.5, "stock": 4}],
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=255)
    brand: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    category: str
    color: str | None = Field(None, max_length=50)
    price: float = Field(..., gt=0)
    images: list[str] = Field(default_factory=list)
    sizes: list[SizeStockSchema] = Field(default_factory=list)


class UpdateProductRequest(BaseModel):
    name: str | None = Field(None, max_length=255)
    brand: str | None = Field(None, max_length=100)
    description: str | None = None
    category: str | None = None
    color: str | None = Field(None, max_length=50)
    price: float | None = Field(None, gt=0)
    images: list[str] | None = None
    sizes: list[SizeStockSchema] | None = None


# --- Response Schemas ---


class ProductResponse(BaseModel):
    id: str
    name: str
    brand: str
    description: str | None = None
    category: str
    color: str | None = None
    price: float
    images: list[str] = Field(default_factory=list)
    sizes: list[SizeStockSchema] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductIdResponse(BaseModel):
    product_id: str


class StatusResponse(BaseModel):
    status: str = "ok"
