from dataclasses import replace

import pytest

from backend.core.filtering import apply_filters, matches_all, matches_any, reset_filters, toggle_selection
from backend.core.models import (
    BuildingHeight,
    ConstructionStatus,
    Facing,
    FilterSpecification,
    FloorBand,
    ListedBy,
    ListingType,
    ParkingType,
    PriceFilterMode,
    Property,
    PropertyType,
    ViewType,
)


def _prop(**overrides):
    base = {
        "id": "p1",
        "title": "Sea facing 2BHK",
        "price": 5_000_000.0,
        "listing_type": ListingType.SALE,
        "property_type": PropertyType.APARTMENT,
        "location": "Andheri West",
        "city": "Mumbai",
        "bedrooms": 2,
        "bathrooms": 2,
    }
    base.update(overrides)
    return Property(**base)


def _sale_spec(**overrides):
    return replace(FilterSpecification(listing_type=ListingType.SALE), **overrides)


def _ids(properties):
    return [p.id for p in properties]


def test_default_spec_keeps_every_listing_of_the_type():
    listings = [_prop(id="a"), _prop(id="b", listing_type=ListingType.RENT), _prop(id="c")]
    assert _ids(apply_filters(listings, FilterSpecification())) == ["a", "c"]
    assert _ids(apply_filters(listings, FilterSpecification(listing_type=ListingType.RENT))) == ["b"]


def test_search_term_is_case_insensitive_over_location_city_and_title():
    listings = [
        _prop(id="loc", location="Bandra East", city="Mumbai"),
        _prop(id="city", location="Sector 62", city="Noida"),
        _prop(id="title", title="Noida Expressway villa", city="Greater Noida"),
        _prop(id="none", location="Whitefield", city="Bengaluru", title="Quiet flat"),
    ]
    assert _ids(apply_filters(listings, _sale_spec(search_term="NOIDA"))) == ["city", "title"]
    assert _ids(apply_filters(listings, _sale_spec(search_term="bandra"))) == ["loc"]


def test_list_price_bounds_are_inclusive():
    listings = [_prop(id="low", price=100.0), _prop(id="mid", price=200.0), _prop(id="high", price=300.0)]
    spec = _sale_spec(min_price="200", max_price="300")
    assert _ids(apply_filters(listings, spec)) == ["mid", "high"]


def test_malformed_price_text_leaves_filter_inactive():
    listings = [_prop(id="a", price=100.0), _prop(id="b", price=900.0)]
    spec = _sale_spec(min_price="lots", max_price="")
    assert _ids(apply_filters(listings, spec)) == ["a", "b"]


def test_monthly_mode_uses_emi_for_sale():
    crore = _prop(id="crore", price=10_000_000.0)
    cheap = _prop(id="cheap", price=5_000_000.0)
    spec = _sale_spec(price_filter_mode=PriceFilterMode.MONTHLY, monthly_min=0, monthly_max=50_000)
    assert _ids(apply_filters([crore, cheap], spec)) == ["cheap"]

    spec = replace(spec, monthly_max=100_000)
    assert _ids(apply_filters([crore, cheap], spec)) == ["crore", "cheap"]


def test_rent_ignores_monthly_mode_and_uses_list_price():
    rent = _prop(id="r", price=45_000.0, listing_type=ListingType.RENT)
    spec = FilterSpecification(
        listing_type=ListingType.RENT,
        price_filter_mode=PriceFilterMode.MONTHLY,
        monthly_min=0,
        monthly_max=10,
        max_price="50000",
    )
    assert _ids(apply_filters([rent], spec)) == ["r"]


def test_boolean_gates_treat_missing_flags_as_false():
    flagged = _prop(id="yes", rera_approved=True, has_showcase=True, price_negotiable=True)
    plain = _prop(id="no")
    assert _ids(apply_filters([flagged, plain], _sale_spec(rera_only=True))) == ["yes"]
    assert _ids(apply_filters([flagged, plain], _sale_spec(showcase_only=True, negotiable_only=True))) == ["yes"]
    assert _ids(apply_filters([flagged, plain], _sale_spec(video_3d_only=True))) == []


@pytest.mark.parametrize(
    ("spec_flag", "property_flag"),
    [
        ("all_inclusive_only", "all_inclusive_price"),
        ("negotiable_only", "price_negotiable"),
        ("tax_excluded_only", "tax_excluded"),
        ("rera_only", "rera_approved"),
        ("showcase_only", "has_showcase"),
        ("video_3d_only", "has_3d_video"),
    ],
)
def test_each_boolean_gate_requires_its_own_flag(spec_flag, property_flag):
    flagged = _prop(id="yes", **{property_flag: True})
    plain = _prop(id="no")
    assert _ids(apply_filters([flagged, plain], _sale_spec(**{spec_flag: True}))) == ["yes"]
    assert _ids(apply_filters([flagged, plain], _sale_spec(**{spec_flag: False}))) == ["yes", "no"]


def test_property_type_is_any_of():
    listings = [
        _prop(id="apt"),
        _prop(id="villa", property_type=PropertyType.VILLA),
        _prop(id="land", property_type=PropertyType.RESIDENTIAL_LAND),
    ]
    spec = _sale_spec(property_types=(PropertyType.VILLA, PropertyType.APARTMENT))
    assert _ids(apply_filters(listings, spec)) == ["apt", "villa"]


def test_bedroom_five_plus_band_matches_four_and_more():
    seven = _prop(id="seven", bedrooms=7)
    four = _prop(id="four", bedrooms=4)
    three = _prop(id="three", bedrooms=3)
    assert _ids(apply_filters([seven, four, three], _sale_spec(bedrooms=(5,)))) == ["seven", "four"]
    assert _ids(apply_filters([seven, four, three], _sale_spec(bedrooms=(3,)))) == ["three"]
    assert _ids(apply_filters([seven, four, three], _sale_spec(bedrooms=(3, 5)))) == ["seven", "four", "three"]


def test_bathroom_four_plus_band():
    listings = [_prop(id="b5", bathrooms=5), _prop(id="b4", bathrooms=4), _prop(id="b3", bathrooms=3)]
    assert _ids(apply_filters(listings, _sale_spec(bathrooms=(4,)))) == ["b5", "b4"]


def test_balcony_four_plus_band_starts_at_three_unlike_bathrooms():
    # Product behaviour pending confirmation: balconies "4+" admits 3, bathrooms "4+" does not.
    balcony_three = _prop(id="balc3", balconies=3)
    bath_three = _prop(id="bath3", bathrooms=3)
    assert _ids(apply_filters([balcony_three], _sale_spec(balconies=(4,)))) == ["balc3"]
    assert _ids(apply_filters([bath_three], _sale_spec(bathrooms=(4,)))) == []


def test_missing_balconies_count_as_zero():
    listings = [_prop(id="none"), _prop(id="one", balconies=1)]
    assert _ids(apply_filters(listings, _sale_spec(balconies=(0,)))) == ["none"]


def test_additional_rooms_require_every_selection():
    both = _prop(id="both", additional_rooms=("Pooja Room", "Study Room", "Servant Room"))
    pooja = _prop(id="pooja", additional_rooms=("Pooja Room",))
    missing = _prop(id="missing")
    spec = _sale_spec(additional_rooms=("Pooja Room", "Study Room"))
    assert _ids(apply_filters([both, pooja, missing], spec)) == ["both"]


def test_enum_groups_fail_when_property_field_is_missing():
    ready = _prop(id="ready", construction_status=ConstructionStatus.READY_TO_MOVE, listed_by=ListedBy.OWNER)
    unknown = _prop(id="unknown", listed_by=ListedBy.OWNER)
    spec = _sale_spec(construction_statuses=(ConstructionStatus.READY_TO_MOVE, ConstructionStatus.NEW_LAUNCH))
    assert _ids(apply_filters([ready, unknown], spec)) == ["ready"]
    spec = _sale_spec(listed_by=(ListedBy.AGENT,))
    assert _ids(apply_filters([ready, unknown], spec)) == []


def test_amenities_match_by_substring_and_require_all():
    listing = _prop(id="p", amenities=("24x7 Power Backup", "Covered Parking", "Lift"))
    assert _ids(apply_filters([listing], _sale_spec(amenities=("Power Backup",)))) == ["p"]
    assert _ids(apply_filters([listing], _sale_spec(amenities=("power backup", "parking")))) == ["p"]
    assert _ids(apply_filters([listing], _sale_spec(amenities=("Gym",)))) == []
    assert _ids(apply_filters([listing], _sale_spec(amenities=("Lift", "Gym")))) == []


def test_floor_bands_with_boundaries():
    listings = [
        _prop(id="f0", floor=0),
        _prop(id="f5", floor=5),
        _prop(id="f6", floor=6),
        _prop(id="f30", floor=30),
        _prop(id="unknown"),
    ]
    spec = _sale_spec(floor_bands=(FloorBand.GROUND_TO_5,))
    assert _ids(apply_filters(listings, spec)) == ["f0", "f5", "unknown"]
    spec = _sale_spec(floor_bands=(FloorBand.FLOOR_5_TO_10, FloorBand.ABOVE_25))
    assert _ids(apply_filters(listings, spec)) == ["f6", "f30", "unknown"]


def test_building_heights_and_all_sentinel():
    listings = [
        _prop(id="low", total_floors=4),
        _prop(id="mid", total_floors=12),
        _prop(id="high", total_floors=13),
        _prop(id="unknown"),
    ]
    assert _ids(apply_filters(listings, _sale_spec(building_heights=(BuildingHeight.LOW_RISE,)))) == [
        "low",
        "unknown",
    ]
    spec = _sale_spec(building_heights=(BuildingHeight.MID_RISE, BuildingHeight.HIGH_RISE))
    assert _ids(apply_filters(listings, spec)) == ["mid", "high", "unknown"]
    spec = _sale_spec(building_heights=(BuildingHeight.LOW_RISE, BuildingHeight.ALL))
    assert _ids(apply_filters(listings, spec)) == ["low", "mid", "high", "unknown"]


def test_facing_applies_only_when_property_declares_it():
    listings = [
        _prop(id="east", facing=Facing.EAST),
        _prop(id="north", facing=Facing.NORTH, exit_facing=Facing.SOUTH),
        _prop(id="unknown"),
    ]
    assert _ids(apply_filters(listings, _sale_spec(entry_facing=(Facing.NORTH,)))) == ["north", "unknown"]
    assert _ids(apply_filters(listings, _sale_spec(exit_facing=(Facing.EAST,)))) == ["east", "unknown"]


def test_parking_minimum_treats_missing_as_zero():
    listings = [_prop(id="two", parking_spaces=2), _prop(id="one", parking_spaces=1), _prop(id="none")]
    assert _ids(apply_filters(listings, _sale_spec(min_parking=2))) == ["two"]
    assert _ids(apply_filters(listings, _sale_spec(min_parking=0))) == ["two", "one", "none"]


def test_area_minimums_are_independent_and_conjunctive():
    carpet_only = _prop(id="carpet", carpet_area=500.0)
    full = _prop(id="full", carpet_area=500.0, built_up_area=650.0, super_built_up_area=800.0)
    assert _ids(apply_filters([carpet_only, full], _sale_spec(min_super_area="100"))) == ["full"]
    assert _ids(apply_filters([carpet_only, full], _sale_spec(min_carpet_area="400"))) == ["carpet", "full"]
    spec = _sale_spec(min_carpet_area="400", min_built_up_area="700")
    assert _ids(apply_filters([carpet_only, full], spec)) == []
    assert _ids(apply_filters([carpet_only, full], _sale_spec(min_carpet_area="n/a"))) == ["carpet", "full"]


def test_year_built_range():
    listings = [_prop(id="old", year_built=1995), _prop(id="new", year_built=2021), _prop(id="unknown")]
    assert _ids(apply_filters(listings, _sale_spec(min_year_built="2000"))) == ["new"]
    assert _ids(apply_filters(listings, _sale_spec(max_year_built="2000"))) == ["old"]
    assert _ids(apply_filters(listings, _sale_spec(min_year_built="1990", max_year_built="2030"))) == [
        "old",
        "new",
    ]
    assert _ids(apply_filters(listings, _sale_spec(min_year_built="soon"))) == ["old", "new", "unknown"]


def test_parking_type_views_and_documents():
    listing = _prop(
        id="p",
        parking_type=ParkingType.COVERED,
        views=(ViewType.PARK, ViewType.CORNER),
        documents=("Occupancy Certificate (OC)", "RERA Registration"),
    )
    bare = _prop(id="bare")
    both = [listing, bare]
    assert _ids(apply_filters(both, _sale_spec(parking_types=(ParkingType.COVERED,)))) == ["p"]
    assert _ids(apply_filters(both, _sale_spec(parking_types=(ParkingType.OPEN,)))) == []
    assert _ids(apply_filters(both, _sale_spec(views=(ViewType.CITY, ViewType.PARK)))) == ["p"]
    assert _ids(apply_filters(both, _sale_spec(views=(ViewType.ROAD,)))) == []
    assert _ids(apply_filters(both, _sale_spec(documents=("RERA Registration",)))) == ["p"]
    spec = _sale_spec(documents=("RERA Registration", "Allotment Letter"))
    assert _ids(apply_filters(both, spec)) == []


def _sample_listings():
    return [
        _prop(id="a", bedrooms=1, price=2_000_000.0, amenities=("Gym",), floor=3),
        _prop(id="b", bedrooms=3, price=9_000_000.0, amenities=("Swimming Pool", "Gym"), floor=12),
        _prop(id="c", bedrooms=5, price=30_000_000.0, rera_approved=True, floor=27),
        _prop(id="d", listing_type=ListingType.RENT, price=40_000.0),
        _prop(id="e", bedrooms=2, price=6_500_000.0, city="Pune", amenities=("Lift",)),
    ]


@pytest.mark.parametrize(
    "spec",
    [
        _sale_spec(),
        _sale_spec(amenities=("gym",)),
        _sale_spec(bedrooms=(5, 1), max_price="10000000"),
        _sale_spec(floor_bands=(FloorBand.GROUND_TO_5, FloorBand.ABOVE_25)),
    ],
)
def test_filtering_is_idempotent_and_order_preserving(spec):
    listings = _sample_listings()
    once = apply_filters(listings, spec)
    assert apply_filters(once, spec) == once
    positions = [listings.index(item) for item in once]
    assert positions == sorted(positions)
    assert apply_filters(listings, spec) == once


def test_adding_a_constraint_never_grows_the_result():
    listings = _sample_listings()
    spec = _sale_spec(max_price="20000000")
    baseline = len(apply_filters(listings, spec))
    for extra in (
        {"amenities": ("gym",)},
        {"rera_only": True},
        {"search_term": "mumbai"},
        {"bedrooms": (3,)},
        {"min_carpet_area": "10"},
    ):
        assert len(apply_filters(listings, replace(spec, **extra))) <= baseline


def test_filtering_does_not_mutate_input():
    listings = _sample_listings()
    snapshot = list(listings)
    apply_filters(listings, _sale_spec(amenities=("Gym",)))
    assert listings == snapshot


def test_matches_any_and_matches_all():
    assert matches_any((), None) is True
    assert matches_any(("a",), None) is False
    assert matches_any(("a", "b"), "b") is True
    assert matches_all((), None) is True
    assert matches_all(("a",), None) is False
    assert matches_all(("a", "b"), ("b", "a", "c")) is True
    assert matches_all(("a", "b"), ("a",)) is False


def test_toggle_selection_returns_new_spec():
    spec = FilterSpecification()
    toggled = toggle_selection(spec, "amenities", "Gym")
    assert toggled.amenities == ("Gym",)
    assert spec.amenities == ()
    assert toggle_selection(toggled, "amenities", "Gym").amenities == ()
    with pytest.raises(TypeError):
        toggle_selection(spec, "search_term", "x")


def test_reset_filters_keeps_listing_type():
    spec = FilterSpecification(listing_type=ListingType.RENT, search_term="pune", rera_only=True)
    assert reset_filters(spec) == FilterSpecification(listing_type=ListingType.RENT)
