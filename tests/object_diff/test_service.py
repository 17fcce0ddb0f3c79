"""Tests for the object diff service."""

import json
import logging
import uuid
from copy import deepcopy
from unittest.mock import Mock

import pytest

from src.object_diff import (
    ADDED_MARKER,
    REMOVED_MARKER,
    DataShapeError,
    DuplicateKeyError,
    PropertyDescriptor,
    PropertyKind,
    TypeDescriptor,
    __engine_version__,
    complex_,
    compute_diff,
    create_change_record,
    create_type_descriptor,
    number,
    string,
    to_json,
)
from src.object_diff.service import diff_primitive

from car_factories import make_car


def swap_markers(value):
    """Swap removed/added markers throughout a change result."""
    if isinstance(value, list):
        return [swap_markers(v) for v in value]
    if isinstance(value, dict):
        swapped = {}
        for key, item in value.items():
            if key == REMOVED_MARKER:
                key = ADDED_MARKER
            elif key == ADDED_MARKER:
                key = REMOVED_MARKER
            swapped[key] = swap_markers(item)
        return swapped
    return value


class TestMotivatingScenario:
    """The inventory edit: sold car, new car, repriced car, removed truck."""

    @pytest.fixture
    def versions(self):
        added_car = make_car("added_car", "ford", "fiesta")
        removed_car = make_car("removed_car", "honda", "civic")
        modified_car = make_car("modified_car", "toyota", "corolla")
        truck = make_car("truck_1", "toyota", "tacoma")

        before = {"cars": [removed_car, modified_car], "trucks": [truck]}
        after = {
            "cars": [added_car, {**modified_car, "msrp": 16000, "salePrice": 14000}],
            "trucks": [],
        }
        return before, after

    def test_result(self, versions, collection_descriptor):
        before, after = versions
        changes = compute_diff(before, after, collection_descriptor)

        feature = {
            "cost": 2000,
            "id": "feature_1",
            "name": "Power Windows",
            "optional": True,
            "tags": ["tag_1"],
        }

        assert changes == {
            "cars": [
                {"-": {
                    "features": [feature],
                    "id": "removed_car",
                    "make": "honda",
                    "model": "civic",
                    "msrp": 15000,
                    "year": 2022,
                }},
                {"+": {
                    "features": [feature],
                    "id": "added_car",
                    "make": "ford",
                    "model": "fiesta",
                    "msrp": 15000,
                    "year": 2022,
                }},
                {
                    "id": "modified_car",
                    "msrp": {"-": 15000, "+": 16000},
                    "salePrice": {"+": 14000},
                },
            ],
            "trucks": [
                {"-": {
                    "features": [feature],
                    "id": "truck_1",
                    "make": "toyota",
                    "model": "tacoma",
                    "msrp": 15000,
                    "year": 2022,
                }},
            ],
        }

    def test_matched_entry_key_order(self, versions, collection_descriptor):
        """Primary key first, then changed properties."""
        changes = compute_diff(*versions, collection_descriptor)
        assert list(changes["cars"][2]) == ["id", "msrp", "salePrice"]

    def test_serialized_output(self, versions, collection_descriptor):
        changes = compute_diff(*versions, collection_descriptor)
        payload = to_json(changes, indent=None)

        assert payload.startswith('{"cars": [{"-": {"features"')
        assert '{"id": "modified_car", "msrp": {"-": 15000, "+": 16000}, "salePrice": {"+": 14000}}' in payload


class TestDiffProperties:
    """Properties every diff must satisfy."""

    def test_identity(self, inventory, collection_descriptor):
        assert compute_diff(inventory, deepcopy(inventory), collection_descriptor) == {}

    def test_antisymmetry(self, inventory, collection_descriptor):
        """Swapping sides swaps every marker and nothing else."""
        modified = deepcopy(inventory)
        modified["cars"].pop(0)
        modified["cars"][0]["msrp"] = 17000
        modified["cars"][1]["features"][0]["tags"] = ["tag_2", "tag_1"]
        modified["trucks"].append(make_car("truck_2"))

        forward = compute_diff(inventory, modified, collection_descriptor)
        backward = compute_diff(modified, inventory, collection_descriptor)

        assert backward == swap_markers(forward)

    def test_order_independence(self, inventory, collection_descriptor):
        reordered = deepcopy(inventory)
        reordered["cars"].reverse()
        assert compute_diff(inventory, reordered, collection_descriptor) == {}

    def test_case_insensitive_keys(self, inventory, collection_descriptor):
        """Elements whose keys differ only in case are the same entity."""
        renamed = deepcopy(inventory)
        renamed["cars"][0]["id"] = "CAR_1"
        renamed["cars"][0]["year"] = 2023

        changes = compute_diff(inventory, renamed, collection_descriptor)

        assert changes == {
            "cars": [{
                "id": {"-": "car_1", "+": "CAR_1"},
                "year": {"-": 2022, "+": 2023},
            }],
        }

    def test_case_changed_key_leads_entry(self, inventory, collection_descriptor):
        """A key changed only in case stays first, rendered as a marker."""
        renamed = deepcopy(inventory)
        renamed["cars"][1]["id"] = "Car_2"
        renamed["cars"][1]["make"] = "honda"

        entry = compute_diff(inventory, renamed, collection_descriptor)["cars"][0]

        assert list(entry) == ["id", "make"]
        assert entry["id"] == {"-": "car_2", "+": "Car_2"}

    def test_sparse_snapshots(self, inventory, collection_descriptor):
        """Added snapshots carry no key for nil properties."""
        extended = deepcopy(inventory)
        extended["cars"].append(make_car("car_4", model=None, salePrice=None))

        changes = compute_diff(inventory, extended, collection_descriptor)
        snapshot = changes["cars"][0][ADDED_MARKER]

        assert "model" not in snapshot
        assert "salePrice" not in snapshot

    def test_deterministic_output(self, inventory, collection_descriptor):
        modified = deepcopy(inventory)
        modified["cars"][1]["features"].append({"id": "f2", "name": "Sunroof"})
        modified["trucks"] = []

        outputs = {
            to_json(compute_diff(inventory, modified, collection_descriptor))
            for _ in range(5)
        }

        assert len(outputs) == 1

    def test_key_order_independent_of_input_order(self, collection_descriptor):
        """Output key order follows property names, not input dict order."""
        before = {"trucks": [make_car("t")], "cars": [make_car("c")]}
        after = {"cars": [], "trucks": []}

        changes = compute_diff(before, after, collection_descriptor)

        assert list(changes) == ["cars", "trucks"]

    def test_result_does_not_alias_inputs(self, inventory, collection_descriptor):
        modified = deepcopy(inventory)
        modified["cars"].pop()

        changes = compute_diff(inventory, modified, collection_descriptor)
        changes["cars"][0][REMOVED_MARKER]["features"][0]["tags"].append("x")

        assert inventory["cars"][2]["features"][0]["tags"] == ["tag_1"]


class TestNilSemantics:
    """Absent and null are one nil, distinct from every defined value."""

    @pytest.fixture
    def descriptor(self):
        return create_type_descriptor(
            "Car",
            properties={"id": string(), "salePrice": number()},
        )

    def test_absent_equals_null(self, descriptor):
        assert compute_diff({"id": "a"}, {"id": "a", "salePrice": None}, descriptor) == {}

    def test_added_value_has_no_removed_side(self, descriptor):
        changes = compute_diff({"id": "a"}, {"id": "a", "salePrice": 0}, descriptor)
        assert changes == {"salePrice": {"+": 0}}

    def test_removed_value_has_no_added_side(self, descriptor):
        changes = compute_diff({"id": "a", "salePrice": 10}, {"id": "a"}, descriptor)
        assert changes == {"salePrice": {"-": 10}}

    def test_numeric_equality(self, descriptor):
        assert compute_diff({"salePrice": 10}, {"salePrice": 10.0}, descriptor) == {}


class TestPrimitiveArrays:
    """Primitive arrays are compared as unordered sets."""

    def test_reorder_is_no_change(self):
        assert diff_primitive(["a", "b"], ["b", "a"]) is None

    def test_removed_and_added_sorted(self):
        assert diff_primitive(["z", "b", "x"], ["y", "a", "x"]) == [
            {"-": ["b", "z"]},
            {"+": ["a", "y"]},
        ]

    def test_only_added(self):
        assert diff_primitive([1], [1, 3, 2]) == [{"+": [2, 3]}]

    def test_structural_values(self):
        """Nested values compare regardless of key order."""
        assert diff_primitive([{"a": 1, "b": 2}], [{"b": 2, "a": 1}]) is None

    def test_duplicates_preserved(self):
        assert diff_primitive(["a", "a", "b"], ["b"]) == [{"-": ["a", "a"]}]

    def test_array_against_nil_is_scalar_change(self):
        assert diff_primitive(None, ["a"]) == {"+": ["a"]}

    def test_nested_tags(self, inventory, collection_descriptor):
        modified = deepcopy(inventory)
        modified["cars"][0]["features"][0]["tags"] = ["tag_2"]

        changes = compute_diff(inventory, modified, collection_descriptor)

        assert changes == {
            "cars": [{
                "id": "car_1",
                "features": [{
                    "id": "feature_1",
                    "tags": [{"-": ["tag_1"]}, {"+": ["tag_2"]}],
                }],
            }],
        }


class TestDataShapeErrors:
    """Input that contradicts the descriptor aborts the diff."""

    def test_non_array_complex(self, collection_descriptor):
        with pytest.raises(DataShapeError, match="non-array complex type"):
            compute_diff({"cars": {"id": "a"}}, {"cars": []}, collection_descriptor)

    def test_array_against_nil(self, collection_descriptor):
        with pytest.raises(DataShapeError):
            compute_diff({"cars": None}, {"cars": [make_car("a")]}, collection_descriptor)

    def test_both_nil(self, collection_descriptor):
        assert compute_diff({"cars": None}, {}, collection_descriptor) == {}

    def test_duplicate_keys(self, collection_descriptor):
        cars = [make_car("a"), make_car("A")]
        with pytest.raises(DuplicateKeyError):
            compute_diff({"cars": cars}, {"cars": []}, collection_descriptor)

    def test_nested_shape_error_in_snapshot(self, collection_descriptor):
        car = make_car("a", features="none")
        with pytest.raises(DataShapeError):
            compute_diff({"cars": []}, {"cars": [car]}, collection_descriptor)


class TestConfigurationErrors:
    """Misconfigured properties are logged and skipped, siblings still diffed."""

    def test_missing_name_skips_only_that_property(self):
        descriptor = TypeDescriptor(
            name="Car",
            properties={
                "id": PropertyDescriptor(kind=PropertyKind.STRING, name="id"),
                "make": PropertyDescriptor(kind=PropertyKind.STRING),
                "year": PropertyDescriptor(kind=PropertyKind.NUMBER, name="year"),
            },
        )
        log = Mock()

        changes = compute_diff(
            {"id": "a", "make": "ford", "year": 2022},
            {"id": "b", "make": "honda", "year": 2023},
            descriptor,
            log=log,
        )

        assert changes == {"id": {"-": "a", "+": "b"}, "year": {"-": 2022, "+": 2023}}
        log.error.assert_called_once()
        assert "Car.make" in log.error.call_args.args[0]

    def test_complex_without_descriptor(self, caplog):
        descriptor = TypeDescriptor.model_construct(
            name="Fleet",
            properties={
                "cars": PropertyDescriptor.model_construct(
                    kind=PropertyKind.COMPLEX, descriptor=None, name="cars"
                ),
                "name": PropertyDescriptor(kind=PropertyKind.STRING, name="name"),
            },
        )

        with caplog.at_level(logging.ERROR, logger="src.object_diff.service"):
            changes = compute_diff(
                {"name": "a", "cars": [1]}, {"name": "b", "cars": [2]}, descriptor
            )

        assert changes == {"name": {"-": "a", "+": "b"}}
        assert "need a type descriptor" in caplog.text

    def test_complex_without_primary_key(self):
        keyless = create_type_descriptor("Part", properties={"sku": string()})
        descriptor = create_type_descriptor(
            "Car",
            properties={
                "id": string(),
                "parts": PropertyDescriptor(kind=PropertyKind.COMPLEX, descriptor=keyless),
            },
        )
        log = Mock()

        changes = compute_diff(
            {"id": "a", "parts": [{"sku": "1"}]},
            {"id": "a", "parts": [{"sku": "2"}]},
            descriptor,
            log=log,
        )

        assert changes == {}
        assert "need a primary key" in log.error.call_args.args[0]

    def test_logging_logger_accepted(self, collection_descriptor, inventory):
        """A standard logging.Logger satisfies the error sink."""
        log = logging.getLogger("audit")
        assert compute_diff(inventory, inventory, collection_descriptor, log=log) == {}


class TestAttributeObjects:
    """Pydantic model instances can be diffed directly."""

    def test_uuid_primary_keys(self):
        """Non-JSON key values are matched by their string form."""
        from pydantic import BaseModel

        class Part(BaseModel):
            id: uuid.UUID
            label: str

        part = create_type_descriptor(
            "Part", primary_key="id", properties={"id": string(), "label": string()}
        )
        kit = create_type_descriptor("Kit", properties={"parts": complex_(part)})
        part_id = uuid.uuid4()

        changes = compute_diff(
            {"parts": [Part(id=part_id, label="bolt")]},
            {"parts": [Part(id=part_id, label="nut")]},
            kit,
        )

        assert changes == {"parts": [{"id": part_id, "label": {"-": "bolt", "+": "nut"}}]}

    def test_models(self, collection_descriptor):
        from app.catalog import AutomobileCollection

        before = AutomobileCollection(cars=[make_car("a")], trucks=[])
        after = AutomobileCollection(cars=[make_car("a", msrp=15500)], trucks=[])

        changes = compute_diff(before, after, collection_descriptor)

        assert changes == {"cars": [{"id": "a", "msrp": {"-": 15000.0, "+": 15500.0}}]}


class TestChangeRecord:
    """Tests for create_change_record()."""

    def test_envelope(self, inventory, collection_descriptor):
        modified = deepcopy(inventory)
        modified["trucks"] = []

        record = create_change_record(inventory, modified, collection_descriptor)

        assert record.descriptor == "AutomobileCollection"
        assert record.engine_version == __engine_version__
        assert record.has_changes is True
        assert list(record.changes) == ["trucks"]

    def test_no_changes(self, inventory, collection_descriptor):
        record = create_change_record(inventory, inventory, collection_descriptor)
        assert record.has_changes is False
        assert record.changes == {}

    def test_json_round_trip_is_plain(self, inventory, collection_descriptor):
        modified = deepcopy(inventory)
        modified["cars"][0]["msrp"] = 1
        record = create_change_record(inventory, modified, collection_descriptor)
        assert json.loads(record.model_dump_json())["changes"] == record.changes
