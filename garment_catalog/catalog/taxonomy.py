"""Closed vocabularies that bound every classification field.

Token values are part of the persisted format and of the response schema sent
to the model, so they must never be renamed.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class Department(str, Enum):
    WOMEN = "women"
    MEN = "men"
    UNISEX = "unisex"
    KIDS = "kids"


class MainCategory(str, Enum):
    CLOTHING = "clothing"
    SHOES = "shoes"
    ACCESSORIES = "accessories"
    JEWELRY = "jewelry"
    BAGS = "bags"


class SubCategory(str, Enum):
    TOPS = "tops"
    SHIRTS = "shirts"
    BOTTOMS = "bottoms"
    DRESSES = "dresses"
    PARTY_DRESSES = "party_dresses"
    BRIDAL = "bridal"
    SKIRTS = "skirts"
    SHORTS = "shorts"
    OUTERWEAR = "outerwear"
    KNITWEAR = "knitwear"
    ACTIVEWEAR = "activewear"
    LINGERIE = "lingerie"
    BEACHWEAR = "beachwear"
    TAILORING = "tailoring"
    JUMPSUITS = "jumpsuits"
    VESTS = "vests"
    SETS = "sets"
    RECYCLING = "recycling"


class Shape(str, Enum):
    A_LINE = "a-line"
    SHEATH = "sheath"
    MERMAID = "mermaid"
    WRAP = "wrap"
    EMPIRE = "empire"
    SHIRT_DRESS = "shirt-dress"
    STRAIGHT = "straight"
    FLARE = "flare"
    CIRCLE = "circle"
    ASYMMETRIC = "asymmetric"
    BALLOON = "balloon"
    BOX = "box"
    TRAPEZE = "trapeze"
    OTHER = "other"


class Fit(str, Enum):
    SLIM = "slim"
    REGULAR = "regular"
    RELAXED = "relaxed"
    OVERSIZED = "oversized"
    CROPPED = "cropped"
    ELONGATED = "elongated"
    COMPRESSION = "compression"
    BODYCON = "bodycon"


class SleeveLength(str, Enum):
    SHORT = "short"
    LONG = "long"
    THREE_QUARTER = "3/4"
    SLEEVELESS = "sleeveless"
    STRAPLESS = "strapless"


class SleeveType(str, Enum):
    CLASSIC = "classic"
    PUFF = "puff"
    BELL = "bell"
    BISHOP = "bishop"
    BATWING = "batwing"
    BUTTERFLY = "butterfly"
    CAP = "cap"
    BALOON = "baloon"  # token as shipped in stored data
    FLARE = "flare"
    SPLIT = "split"
    TULIP = "tulip"
    OTHER = "other"


class SleeveConstruction(str, Enum):
    SET_IN = "set-in"
    RAGLAN = "raglan"
    KIMONO = "kimono"
    DOLMAN = "dolman"
    DROPPED = "dropped"


class Neckline(str, Enum):
    V_NECK = "v-neck"
    U_NECK = "u-neck"
    ROUND_NECK = "round-neck"
    BOAT_NECK = "boat-neck"
    SQUARE_NECK = "square-neck"
    SWEETHEART = "sweetheart"
    HALTER = "halter"
    HIGH_NECK = "high-neck"
    OFF_SHOULDER = "off-shoulder"
    ONE_SHOULDER = "one-shoulder"
    COWL_NECK = "cowl-neck"
    STRAPLESS = "strapless"


class Closure(str, Enum):
    BUTTON = "button"
    ZIPPER = "zipper"
    DRAWSTRING = "drawstring"
    ELASTIC = "elastic"
    CLASP = "clasp"
    WRAP = "wrap"
    VELCRO = "velcro"
    NONE = "none"
    SNAP_BUTTON = "snap_button"
    HIDDEN_ZIPPER = "hidden_zipper"


class Aesthetic(str, Enum):
    VINTAGE = "vintage"
    MINIMALIST = "minimalist"
    BOHO = "boho"
    STREETWEAR = "streetwear"
    ROMANTIC = "romantic"
    CLASSIC = "classic"
    GRUNGE = "grunge"
    PREPPY = "preppy"
    GLAM = "glam"
    SPORTY = "sporty"
    RETRO = "retro"
    Y2K = "y2k"
    COTTAGECORE = "cottagecore"
    UTILITY = "utility"


class Occasion(str, Enum):
    CASUAL = "casual"
    WORK = "work"
    FORMAL = "formal"
    PARTY = "party"
    BEACHWEAR = "beachwear"
    ACTIVEWEAR = "activewear"
    LOUNGE = "lounge"
    NIGHT_OUT = "night_out"
    SPECIAL_EVENT = "special_event"


class Condition(str, Enum):
    NEW_WITH_TAGS = "new_with_tags"
    EXCELLENT = "excellent"
    VERY_GOOD = "very_good"
    GOOD = "good"


class BackDetail(str, Enum):
    V_BACK = "v-back"
    U_BACK = "u-back"
    OPEN_BACK = "open-back"
    LOW_BACK = "low-back"
    RACERBACK = "racerback"
    KEYHOLE = "keyhole"
    LACE_UP = "lace-up"
    CLOSED = "closed"
    CROSSED_STRAPS = "crossed-straps"


class Finish(str, Enum):
    TEXTURED = "textured"
    SMOOTH = "smooth"
    GLOSSY = "glossy"
    MATTE = "matte"
    METALLIC = "metallic"
    SHEER = "sheer"
    DISTRESSED = "distressed"
    RIBBED = "ribbed"
    PLEATED = "pleated"
    QUILTED = "quilted"
    COATED = "coated"
    EMBOSSED = "embossed"
    FUZZY = "fuzzy"
    CRINKLED = "crinkled"


class Length(str, Enum):
    MINI = "mini"
    SHORT = "short"
    KNEE_LENGTH = "knee_length"
    MIDI = "midi"
    MAXI = "maxi"
    FLOOR_LENGTH = "floor_length"
    CROPPED = "cropped"
    STANDARD = "standard"
    SEVEN_EIGHTHS = "7_8_length"


class PocketType(str, Enum):
    FRONT = "front_pockets"
    BACK = "back_pockets"
    SIDE = "side_pockets"
    CARGO = "cargo_pockets"
    CHEST = "chest_pockets"
    INTERNAL = "internal_pockets"
    NONE = "none"


class Color(str, Enum):
    BLACK = "black"
    WHITE = "white"
    GREY = "grey"
    BEIGE = "beige"
    BROWN = "brown"
    BLUE = "blue"
    LIGHT_BLUE = "light_blue"
    NAVY_BLUE = "navy_blue"
    RED = "red"
    BURGUNDY = "burgundy"
    PINK = "pink"
    ROSE = "rose"
    GREEN = "green"
    OLIVE = "olive"
    YELLOW = "yellow"
    ORANGE = "orange"
    PURPLE = "purple"
    GOLD = "gold"
    SILVER = "silver"
    MULTI = "multi"


class Pattern(str, Enum):
    SOLID = "solid"
    STRIPED = "striped"
    CHECKERED = "checkered"
    FLORAL = "floral"
    ANIMAL_PRINT = "animal_print"
    POLKA_DOT = "polka_dot"
    GEOMETRIC = "geometric"
    ABSTRACT = "abstract"
    TIE_DYE = "tie_dye"
    PAISLEY = "paisley"
    HERRINGBONE = "herringbone"
    ACID_WASH = "acid_wash"


class FabricFiber(str, Enum):
    COTTON = "cotton"
    LINEN = "linen"
    SILK = "silk"
    WOOL = "wool"
    CASHMERE = "cashmere"
    HEMP = "hemp"
    POLYESTER = "polyester"
    VISCOSE = "viscose"
    ELASTANE = "elastane"
    POLYAMIDE = "polyamide"
    ACRYLIC = "acrylic"
    ACETATE = "acetate"
    RAYON = "rayon"
    LYOCELL = "lyocell"
    LEATHER = "leather"
    SUEDE = "suede"
    FUR = "fur"
    FAUX_LEATHER = "faux_leather"
    DENIM = "denim"
    UNKNOWN = "unknown"


class GarmentRegion(str, Enum):
    """Which part of the body a garment covers, for field applicability."""

    UPPER = "upper"
    LOWER = "lower"
    NON_APPAREL = "non_apparel"


LOWER_BODY_SUBCATEGORIES = frozenset({SubCategory.BOTTOMS, SubCategory.SKIRTS, SubCategory.SHORTS})
NON_APPAREL_CATEGORIES = frozenset(
    {MainCategory.SHOES, MainCategory.ACCESSORIES, MainCategory.JEWELRY, MainCategory.BAGS},
)

# Wire names of the optional fields dropped for each region.
OMITTED_FIELDS: dict[GarmentRegion, tuple[str, ...]] = {
    GarmentRegion.UPPER: (),
    GarmentRegion.LOWER: ("sleeve", "neckline", "backDetails"),
    GarmentRegion.NON_APPAREL: ("sleeve", "neckline", "backDetails", "shape", "fit"),
}


def garment_region(main: MainCategory, subs: Iterable[SubCategory]) -> GarmentRegion:
    """Classify a garment into the region that drives conditional fields."""

    if main in NON_APPAREL_CATEGORIES:
        return GarmentRegion.NON_APPAREL
    subs = list(subs)
    if subs and all(sub in LOWER_BODY_SUBCATEGORIES for sub in subs):
        return GarmentRegion.LOWER
    return GarmentRegion.UPPER


def values(enum_cls: type[Enum]) -> list[str]:
    """Return the wire tokens of an enumeration in declaration order."""

    return [member.value for member in enum_cls]


__all__ = [
    "Aesthetic",
    "BackDetail",
    "Closure",
    "Color",
    "Condition",
    "Department",
    "FabricFiber",
    "Finish",
    "Fit",
    "GarmentRegion",
    "Length",
    "LOWER_BODY_SUBCATEGORIES",
    "MainCategory",
    "Neckline",
    "NON_APPAREL_CATEGORIES",
    "OMITTED_FIELDS",
    "Occasion",
    "Pattern",
    "PocketType",
    "Shape",
    "SleeveConstruction",
    "SleeveLength",
    "SleeveType",
    "SubCategory",
    "garment_region",
    "values",
]
