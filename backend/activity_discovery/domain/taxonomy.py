from __future__ import annotations

import unicodedata
from typing import Iterator, List, Tuple

Taxonomy = Tuple[Tuple[str, Tuple[str, ...]], ...]

TAXONOMY: Taxonomy = (
    (
        "Événements & divertissements",
        (
            "Arts vivants",
            "Événements festifs",
            "Événements professionnels",
            "Salons expositions, artisanat",
            "Loisirs ludiques",
            "Jeux, tournois, concours",
        ),
    ),
    (
        "Sports",
        (
            "Sports collectifs",
            "Sports individuels",
            "Sports de combats",
            "Sports de pleine nature",
            "Sports mécaniques",
            "Sports adaptés",
        ),
    ),
    (
        "Gastronomie",
        (
            "Cours de cuisine",
            "Dégustations",
            "Produits du terroir",
            "Restaurants",
        ),
    ),
    (
        "Culture & patrimoine",
        (
            "Musées & expositions",
            "Monuments & fouilles",
            "Arts plastiques & numériques",
            "Patrimoines industriels",
            "Patrimoines naturels",
            "Littérature & écriture",
        ),
    ),
    (
        "Nature",
        (
            "Jardinage & botanique",
            "Observation faune & flore",
            "Écotourisme",
        ),
    ),
    (
        "Bien-être",
        (
            "Soin du corps",
            "Soin de l’esprit",
        ),
    ),
)


def iter_pairs(taxonomy: Taxonomy = TAXONOMY) -> Iterator[Tuple[str, str]]:
    """Yield ``(category, subcategory)`` in category order, then subcategory order."""
    for category, subcategories in taxonomy:
        for subcategory in subcategories:
            yield category, subcategory


def category_of(subcategory: str, taxonomy: Taxonomy = TAXONOMY) -> str | None:
    for category, sub in iter_pairs(taxonomy):
        if sub == subcategory:
            return category
    return None


def fold(value: str) -> str:
    decomposed = unicodedata.normalize("NFD", value.strip().lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def match_subcategories(keyword: str, taxonomy: Taxonomy = TAXONOMY) -> List[str]:
    """Subcategories whose label, or parent category label, contains ``keyword``.

    Case and accent insensitive. This is the default heuristic for headless
    callers; a UI may supply its own matched set instead.
    """
    needle = fold(keyword or "")
    if not needle:
        return []
    matched: List[str] = []
    for category, subcategory in iter_pairs(taxonomy):
        if needle in fold(subcategory) or needle in fold(category):
            matched.append(subcategory)
    return matched
