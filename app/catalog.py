"""
Sample automobile catalog.

Descriptors for a small vehicle-and-feature schema, registered once and
shared by the demo endpoint. The sample collections reproduce a typical
inventory edit: one car sold, one car listed, one car repriced and the
only truck removed.
"""

from typing import Literal, Optional

from pydantic import BaseModel

from src.object_diff import (
    DescriptorRegistry,
    boolean,
    complex_,
    create_type_descriptor,
    number,
    string,
)


# --- Domain Models ---

class AutomobileFeature(BaseModel):
    """An installed or optional feature."""

    id: str
    name: str
    optional: bool
    cost: float
    tags: list[str]


class Automobile(BaseModel):
    """A vehicle in the inventory."""

    id: str
    make: Literal["ford", "honda", "toyota"]
    model: str
    year: int
    msrp: float
    features: list[AutomobileFeature]
    salePrice: Optional[float] = None


class AutomobileCollection(BaseModel):
    """The inventory, split by body type."""

    cars: list[Automobile]
    trucks: list[Automobile]


# --- Descriptors ---

def build_catalog() -> DescriptorRegistry:
    """Build and register the automobile descriptors."""
    registry = DescriptorRegistry()

    feature = registry.register(create_type_descriptor(
        "AutomobileFeature",
        model=AutomobileFeature,
        primary_key="id",
        properties={
            "id": string(),
            "name": string(),
            "optional": boolean(),
            "cost": number(),
            "tags": string(),
        },
    ))

    automobile = registry.register(create_type_descriptor(
        "Automobile",
        model=Automobile,
        primary_key="id",
        properties={
            "id": string(),
            "make": string(),
            "model": string(),
            "year": number(),
            "msrp": number(),
            "features": complex_(feature),
            "salePrice": number(),
        },
    ))

    registry.register(create_type_descriptor(
        "AutomobileCollection",
        model=AutomobileCollection,
        properties={
            "cars": complex_(automobile),
            "trucks": complex_(automobile),
        },
    ))

    return registry


catalog = build_catalog()


# --- Sample Data ---

def _car(car_id: str, make: str, model: str) -> dict:
    return {
        "id": car_id,
        "make": make,
        "model": model,
        "year": 2022,
        "msrp": 15000,
        "features": [
            {
                "id": "feature_1",
                "name": "Power Windows",
                "optional": True,
                "cost": 2000,
                "tags": ["tag_1"],
            }
        ],
    }


def sample_collections() -> tuple[dict, dict]:
    """
    Return (from, to) inventory versions.

    Returns:
        Tuple of plain dicts shaped like AutomobileCollection
    """
    added_car = _car("added_car", "ford", "fiesta")
    removed_car = _car("removed_car", "honda", "civic")
    modified_car = _car("modified_car", "toyota", "corolla")
    truck = _car("truck_1", "toyota", "tacoma")

    before = {
        "cars": [removed_car, modified_car],
        "trucks": [truck],
    }
    after = {
        "cars": [
            added_car,
            {**modified_car, "msrp": 16000, "salePrice": 14000},
        ],
        "trucks": [],
    }

    return before, after
