"""Shared descriptors and documents for diff engine tests."""

import pytest

from src.object_diff import (
    boolean,
    complex_,
    create_type_descriptor,
    number,
    string,
)

from car_factories import make_car


@pytest.fixture
def feature_descriptor():
    return create_type_descriptor(
        "AutomobileFeature",
        primary_key="id",
        properties={
            "id": string(),
            "name": string(),
            "optional": boolean(),
            "cost": number(),
            "tags": string(),
        },
    )


@pytest.fixture
def automobile_descriptor(feature_descriptor):
    return create_type_descriptor(
        "Automobile",
        primary_key="id",
        properties={
            "id": string(),
            "make": string(),
            "model": string(),
            "year": number(),
            "msrp": number(),
            "features": complex_(feature_descriptor),
            "salePrice": number(),
        },
    )


@pytest.fixture
def collection_descriptor(automobile_descriptor):
    return create_type_descriptor(
        "AutomobileCollection",
        properties={
            "cars": complex_(automobile_descriptor),
            "trucks": complex_(automobile_descriptor),
        },
    )


@pytest.fixture
def inventory():
    return {
        "cars": [
            make_car("car_1", "honda", "civic"),
            make_car("car_2"),
            make_car("car_3", "ford", "fiesta", salePrice=14000),
        ],
        "trucks": [make_car("truck_1", model="tacoma")],
    }
