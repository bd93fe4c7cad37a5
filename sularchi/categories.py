"""Waste categories and their static disposal data."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple


class WasteCategory(str, Enum):
    PLASTIC = "plastic"
    PAPER = "paper"
    GLASS = "glass"
    METAL = "metal"
    ORGANIC = "organic"
    E_WASTE = "e-waste"
    TEXTILE = "textile"
    HAZARDOUS = "hazardous"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class CategoryInfo:
    category: WasteCategory
    label: str
    description: str
    disposal_tip: str
    recyclable: bool
    icon: str
    color: str


CATEGORY_INFO: Dict[WasteCategory, CategoryInfo] = {
    WasteCategory.PLASTIC: CategoryInfo(
        category=WasteCategory.PLASTIC,
        label="Plastic",
        description="Plastic waste including bottles, bags, containers, and packaging materials.",
        disposal_tip="Rinse and place in the recycling bin. Remove caps and labels if possible.",
        recyclable=True,
        icon="♻️",
        color="#2196F3",
    ),
    WasteCategory.PAPER: CategoryInfo(
        category=WasteCategory.PAPER,
        label="Paper / Cardboard",
        description="Paper products including newspapers, cardboard boxes, and office paper.",
        disposal_tip="Flatten cardboard boxes. Keep paper dry and clean for recycling.",
        recyclable=True,
        icon="📄",
        color="#8D6E63",
    ),
    WasteCategory.GLASS: CategoryInfo(
        category=WasteCategory.GLASS,
        label="Glass",
        description="Glass bottles, jars, and containers.",
        disposal_tip="Rinse and place in the glass recycling bin. Separate by color if required.",
        recyclable=True,
        icon="🫙",
        color="#26A69A",
    ),
    WasteCategory.METAL: CategoryInfo(
        category=WasteCategory.METAL,
        label="Metal",
        description="Metal cans, aluminum foil, tin containers, and scrap metal.",
        disposal_tip="Rinse cans and crush them to save space. Place in the metal recycling bin.",
        recyclable=True,
        icon="🥫",
        color="#78909C",
    ),
    WasteCategory.ORGANIC: CategoryInfo(
        category=WasteCategory.ORGANIC,
        label="Organic / Food Waste",
        description="Food scraps, yard waste, coffee grounds, and biodegradable materials.",
        disposal_tip="Compost at home or place in the organic waste bin. Avoid mixing with plastics.",
        recyclable=False,
        icon="🍂",
        color="#4CAF50",
    ),
    WasteCategory.E_WASTE: CategoryInfo(
        category=WasteCategory.E_WASTE,
        label="Electronic Waste",
        description="Old electronics, batteries, cables, and circuit boards.",
        disposal_tip="Take to a certified e-waste collection center. Never throw in regular trash.",
        recyclable=True,
        icon="🔌",
        color="#FF9800",
    ),
    WasteCategory.TEXTILE: CategoryInfo(
        category=WasteCategory.TEXTILE,
        label="Textile / Fabric",
        description="Clothing, fabric scraps, shoes, and other textile materials.",
        disposal_tip="Donate usable items. Take damaged textiles to a textile recycling point.",
        recyclable=True,
        icon="👕",
        color="#9C27B0",
    ),
    WasteCategory.HAZARDOUS: CategoryInfo(
        category=WasteCategory.HAZARDOUS,
        label="Hazardous Waste",
        description="Chemicals, paint, solvents, and medical waste.",
        disposal_tip="Take to a hazardous waste facility. Never pour down drains or into regular bins.",
        recyclable=False,
        icon="☢️",
        color="#F44336",
    ),
    WasteCategory.UNKNOWN: CategoryInfo(
        category=WasteCategory.UNKNOWN,
        label="Unidentified",
        description="Unable to classify this item with high confidence.",
        disposal_tip="When in doubt, check your local waste disposal guidelines.",
        recyclable=False,
        icon="❓",
        color="#9E9E9E",
    ),
}

# Order matters: ties in match count and score go to the earlier category.
CATEGORY_KEYWORDS: List[Tuple[WasteCategory, List[str]]] = [
    (
        WasteCategory.PLASTIC,
        [
            "plastic", "bottle", "polythene", "polyethylene", "container",
            "packaging", "wrapper", "bag", "cup", "straw", "lid", "polymer",
            "pet bottle", "plastic bag", "plastic wrap",
        ],
    ),
    (
        WasteCategory.PAPER,
        [
            "paper", "cardboard", "newspaper", "magazine", "carton", "book",
            "envelope", "tissue", "napkin", "document",
        ],
    ),
    (
        WasteCategory.GLASS,
        ["glass", "jar", "wine bottle", "beer bottle", "glass bottle", "mirror", "window"],
    ),
    (
        WasteCategory.METAL,
        [
            "metal", "aluminum", "aluminium", "tin", "can", "steel", "iron",
            "copper", "foil", "scrap metal", "beverage can",
        ],
    ),
    (
        WasteCategory.ORGANIC,
        [
            "food", "fruit", "vegetable", "plant", "leaf", "flower", "compost",
            "wood", "biodegradable", "garden waste", "yard waste", "coffee",
            "banana", "apple", "bread", "meat", "egg",
        ],
    ),
    (
        WasteCategory.E_WASTE,
        [
            "electronic", "circuit board", "battery", "cable", "computer",
            "phone", "laptop", "keyboard", "monitor", "charger", "wire",
            "gadget", "device", "motherboard", "smartphone", "tablet",
        ],
    ),
    (
        WasteCategory.TEXTILE,
        [
            "textile", "fabric", "clothing", "shirt", "shoe", "cloth",
            "garment", "cotton", "denim", "leather", "wool", "jacket",
            "pants", "dress", "sock",
        ],
    ),
    (
        WasteCategory.HAZARDOUS,
        [
            "chemical", "paint", "solvent", "pesticide", "medical", "syringe",
            "aerosol", "bleach", "acid", "poison", "toxic", "biohazard",
            "fluorescent", "oil",
        ],
    ),
]

# Targets of the heuristic hue mapping, in hue order.
HEURISTIC_CATEGORIES: List[WasteCategory] = [
    category for category in WasteCategory if category is not WasteCategory.UNKNOWN
]


def parse_category(value: object) -> WasteCategory:
    """Coerce a stored or user-supplied value into a WasteCategory."""
    if isinstance(value, WasteCategory):
        return value
    try:
        return WasteCategory(str(value))
    except ValueError as error:
        raise ValueError(f"Unknown waste category: {value!r}") from error
