from __future__ import annotations

from copy import deepcopy

from shipping_profiles.domain.model import new_id
from tests.helpers.profiles import make_profile


def test_membership_helpers_are_idempotent() -> None:
    profile = make_profile()
    product_id = new_id()
    option_id = new_id()

    assert profile.add_product(product_id) is True
    assert profile.add_product(product_id) is False
    assert profile.add_shipping_option(option_id) is True
    assert profile.add_shipping_option(option_id) is False

    assert profile.products == [product_id]
    assert profile.shipping_options == [option_id]


def test_removing_a_non_member_is_a_no_op() -> None:
    kept = new_id()
    profile = make_profile(products=[kept])

    assert profile.remove_product(new_id()) is False
    assert profile.remove_shipping_option(new_id()) is False
    assert profile.products == [kept]


def test_membership_keeps_insertion_order() -> None:
    first, second, third = new_id(), new_id(), new_id()
    profile = make_profile()
    for product_id in (first, second, third):
        profile.add_product(product_id)
    profile.remove_product(second)
    profile.add_product(second)

    assert profile.products == [first, third, second]


def test_set_metadata_keeps_other_keys() -> None:
    profile = make_profile(metadata={"carrier": "dhl"})

    profile.set_metadata("fragile", True)

    assert profile.metadata == {"carrier": "dhl", "fragile": True}


def test_profiles_compare_by_identity() -> None:
    profile = make_profile("Same")
    duplicate = deepcopy(profile)

    assert duplicate.id == profile.id
    assert duplicate != profile
