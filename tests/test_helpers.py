import pytest

from radiuskit.dictionary.errors import DictionaryError
from radiuskit.dictionary.helpers import (
    attribute_by_name,
    attribute_by_oid,
    merge,
    values_by_attribute,
    vendor_by_name,
    vendor_by_number,
)
from radiuskit.dictionary.types import (
    Attribute,
    AttributeType,
    Dictionary,
    Value,
    Vendor,
)


def _merge_inputs():
    d1 = Dictionary(
        vendors=[
            Vendor(
                name="Test",
                number=32473,
                attributes=[Attribute("Test-Vendor-Name", (5,), AttributeType.STRING)],
            )
        ]
    )
    d2 = Dictionary(
        vendors=[
            Vendor(
                name="Test",
                number=32473,
                attributes=[Attribute("Test-Vendor-Int", (10,), AttributeType.INTEGER)],
            )
        ]
    )
    return d1, d2


def test_merge_combines_vendor_attributes():
    d1, d2 = _merge_inputs()
    merged = merge(d1, d2)
    expected = Dictionary(
        vendors=[
            Vendor(
                name="Test",
                number=32473,
                attributes=[
                    Attribute("Test-Vendor-Name", (5,), AttributeType.STRING),
                    Attribute("Test-Vendor-Int", (10,), AttributeType.INTEGER),
                ],
            )
        ]
    )
    assert merged == expected


def test_merge_concatenates_attributes_and_values():
    d1 = Dictionary(
        attributes=[Attribute("User-Name", (1,), AttributeType.STRING)],
        values=[Value("Mode", "Full", 1)],
    )
    d2 = Dictionary(
        attributes=[Attribute("Mode", (127,), AttributeType.INTEGER)],
        values=[Value("Mode", "Half", 2)],
        vendors=[Vendor("Other", 9)],
    )
    merged = merge(d1, d2)
    assert [a.name for a in merged.attributes] == ["User-Name", "Mode"]
    assert [v.name for v in merged.values] == ["Full", "Half"]
    assert [v.name for v in merged.vendors] == ["Other"]


def test_merge_duplicate_attribute_by_name():
    d1 = Dictionary(attributes=[Attribute("User-Name", (1,), AttributeType.STRING)])
    d2 = Dictionary(attributes=[Attribute("User-Name", (200,), AttributeType.STRING)])
    with pytest.raises(DictionaryError, match="duplicate attribute User-Name"):
        merge(d1, d2)


def test_merge_duplicate_attribute_by_oid():
    d1 = Dictionary(attributes=[Attribute("User-Name", (1,), AttributeType.STRING)])
    d2 = Dictionary(attributes=[Attribute("Login", (1,), AttributeType.STRING)])
    with pytest.raises(DictionaryError, match=r"duplicate attribute Login \(1\)"):
        merge(d1, d2)


def test_merge_conflicting_vendor():
    d1 = Dictionary(vendors=[Vendor("Test", 32473)])
    d2 = Dictionary(vendors=[Vendor("Test", 9)])
    with pytest.raises(DictionaryError, match="conflicting vendor: Test"):
        merge(d1, d2)


def test_merge_duplicate_vendor_attribute():
    d1, d2 = _merge_inputs()
    d2.vendors[0].attributes.append(
        Attribute("Test-Vendor-Name", (6,), AttributeType.STRING)
    )
    with pytest.raises(DictionaryError, match="duplicate vendor attribute"):
        merge(d1, d2)


def test_merge_leaves_inputs_unchanged():
    d1, d2 = _merge_inputs()
    merge(d1, d2)
    assert [a.name for a in d1.vendors[0].attributes] == ["Test-Vendor-Name"]
    assert [a.name for a in d2.vendors[0].attributes] == ["Test-Vendor-Int"]


def test_attribute_lookups():
    attrs = [
        Attribute("User-Name", (1,), AttributeType.STRING),
        Attribute("User-Password", (2,), AttributeType.OCTETS),
    ]
    assert attribute_by_name(attrs, "User-Password") is attrs[1]
    assert attribute_by_name(attrs, "Missing") is None
    assert attribute_by_oid(attrs, [1]) is attrs[0]
    assert attribute_by_oid(attrs, (1, 1)) is None


def test_values_by_attribute_keeps_order():
    values = [
        Value("Mode", "Full", 1),
        Value("Service-Type", "Login-User", 1),
        Value("Mode", "Half", 2),
    ]
    assert values_by_attribute(values, "Mode") == [values[0], values[2]]
    assert values_by_attribute(values, "Nothing") == []


def test_vendor_lookups():
    vendors = [Vendor("Test", 32473), Vendor("Other", 9)]
    assert vendor_by_name(vendors, "Other") is vendors[1]
    assert vendor_by_number(vendors, 32473) is vendors[0]
    assert vendor_by_name(vendors, "Nope") is None
    assert vendor_by_number(vendors, 1) is None