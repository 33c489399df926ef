"""
Static peer catalog: product category -> ordered competitor brand names.
Read-only; order matters because scans are bounded to the first N peers.
"""

from types import MappingProxyType
from typing import List, Mapping, Tuple


CATALOG: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "skincare": (
        "The Ordinary", "CeraVe", "La Roche-Posay",
        "The INKEY List", "Paula’s Choice", "Bioderma", "Avene", "Eucerin",
    ),
    "haircare": (
        "Olaplex", "K18", "Briogeo", "Moroccanoil",
        "Kérastase", "Redken", "Pantene", "OGX",
    ),
    "makeup": (
        "Fenty Beauty", "Rare Beauty", "Glossier", "NARS",
        "Charlotte Tilbury", "Maybelline", "e.l.f.", "MAC",
    ),
})


def supported_categories() -> List[str]:
    return sorted(CATALOG)


def peers_for(category: str) -> List[str]:
    """Catalog peers for a category key (case-insensitive); [] when unknown."""
    return list(CATALOG.get((category or "").strip().lower(), ()))
