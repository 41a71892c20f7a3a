from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ListingType(str, Enum):
    SALE = "sale"
    RENT = "rent"


class PropertyType(str, Enum):
    APARTMENT = "Apartment"
    VILLA = "Villa"
    STUDIO = "1 RK/Studio"
    HOUSE = "House"
    RESIDENTIAL_LAND = "Residential Land"
    PENTHOUSE = "Penthouse"
    KOTHI = "Kothi"
    BUILDER_FLOOR = "Builder Floor"
    FARM_HOUSE = "Farm House"
    OTHERS = "Others"


class ConstructionStatus(str, Enum):
    NEW_LAUNCH = "New Launch"
    READY_TO_MOVE = "Ready to Move"
    UNDER_CONSTRUCTION = "Under Construction"


class FurnishedStatus(str, Enum):
    UNFURNISHED = "Unfurnished"
    SEMI_FURNISHED = "Semi-Furnished"
    FULLY_FURNISHED = "Fully Furnished"


class ListedBy(str, Enum):
    AGENT = "Agent"
    OWNER = "Owner"
    BUILDER = "Builder"


class OwnershipType(str, Enum):
    FREEHOLD = "Freehold"
    LEASEHOLD = "Leasehold"
    CO_OPERATIVE_SOCIETY = "Co-operative society"
    POWER_OF_ATTORNEY = "Power of Attorney"


class Facing(str, Enum):
    EAST = "East"
    WEST = "West"
    NORTH = "North"
    SOUTH = "South"
    NORTH_EAST = "North-East"
    NORTH_WEST = "North-West"
    SOUTH_EAST = "South-East"
    SOUTH_WEST = "South-West"


class ParkingType(str, Enum):
    OPEN = "Open"
    COVERED = "Covered"


class ViewType(str, Enum):
    ROAD = "Road"
    PARK = "Park"
    CORNER = "Corner"
    CITY = "City"


class FloorBand(str, Enum):
    GROUND_TO_5 = "Ground - 5th Floor"
    FLOOR_5_TO_10 = "5th - 10th Floor"
    FLOOR_10_TO_15 = "10th - 15th Floor"
    FLOOR_15_TO_20 = "15th - 20th Floor"
    FLOOR_20_TO_25 = "20th - 25th Floor"
    ABOVE_25 = "Above 25th Floor"


class BuildingHeight(str, Enum):
    ALL = "All"  # sentinel: disables the height filter
    LOW_RISE = "Low Rise"
    MID_RISE = "Mid Rise"
    HIGH_RISE = "High Rise"


class PriceFilterMode(str, Enum):
    LIST = "list"
    MONTHLY = "monthly"


class PropertyStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    SOLD = "Sold"
    DRAFT = "Draft"


DEFAULT_MONTHLY_MAX = 1_000_000.0


@dataclass(frozen=True, slots=True)
class Property:
    id: str | None
    title: str
    price: float
    listing_type: ListingType
    property_type: PropertyType | None = None
    location: str = ""
    city: str = ""
    description: str = ""
    bedrooms: int | None = None
    bathrooms: int | None = None
    balconies: int | None = None
    area: float | None = None
    carpet_area: float | None = None
    built_up_area: float | None = None
    super_built_up_area: float | None = None
    amenities: tuple[str, ...] = ()
    additional_rooms: tuple[str, ...] | None = None
    construction_status: ConstructionStatus | None = None
    furnished_status: FurnishedStatus | None = None
    listed_by: ListedBy | None = None
    ownership_type: OwnershipType | None = None
    facing: Facing | None = None
    exit_facing: Facing | None = None
    floor: int | None = None
    total_floors: int | None = None
    parking_spaces: int | None = None
    parking_type: ParkingType | None = None
    year_built: int | None = None
    views: tuple[ViewType, ...] | None = None
    documents: tuple[str, ...] | None = None
    rera_approved: bool = False
    price_negotiable: bool = False
    all_inclusive_price: bool = False
    tax_excluded: bool = False
    has_showcase: bool = False
    has_3d_video: bool = False
    # display only
    images: tuple[str, ...] = ()
    owner_contact: str | None = None
    owner_id: str | None = None
    date_posted: str | None = None
    is_featured: bool = False
    status: PropertyStatus | None = None


@dataclass(frozen=True, slots=True)
class FilterSpecification:
    listing_type: ListingType = ListingType.SALE
    search_term: str = ""
    min_price: str = ""  # raw user text, parsed leniently
    max_price: str = ""
    price_filter_mode: PriceFilterMode = PriceFilterMode.LIST
    monthly_min: float = 0.0
    monthly_max: float = DEFAULT_MONTHLY_MAX
    property_types: tuple[PropertyType, ...] = ()
    bedrooms: tuple[int, ...] = ()
    bathrooms: tuple[int, ...] = ()
    balconies: tuple[int, ...] = ()
    additional_rooms: tuple[str, ...] = ()
    construction_statuses: tuple[ConstructionStatus, ...] = ()
    listed_by: tuple[ListedBy, ...] = ()
    furnished_statuses: tuple[FurnishedStatus, ...] = ()
    ownership_types: tuple[OwnershipType, ...] = ()
    amenities: tuple[str, ...] = ()
    rera_only: bool = False
    all_inclusive_only: bool = False
    negotiable_only: bool = False
    tax_excluded_only: bool = False
    showcase_only: bool = False
    video_3d_only: bool = False
    floor_bands: tuple[FloorBand, ...] = ()
    building_heights: tuple[BuildingHeight, ...] = ()
    entry_facing: tuple[Facing, ...] = ()
    exit_facing: tuple[Facing, ...] = ()
    min_parking: int = 0
    min_carpet_area: str = ""
    min_built_up_area: str = ""
    min_super_area: str = ""
    min_year_built: str = ""
    max_year_built: str = ""
    parking_types: tuple[ParkingType, ...] = ()
    views: tuple[ViewType, ...] = ()
    documents: tuple[str, ...] = ()
