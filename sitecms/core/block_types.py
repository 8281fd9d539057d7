"""
Types de blocks disponibles dans l'éditeur de pages

Chaque type a un libellé, un contenu par défaut (utilisé à la création d'un
block sans contenu et au rendu public) et sa MergePolicy. Les listes de champs
sont fixées ici une fois pour toutes, par type.
"""

import copy
from typing import Dict, List, Optional
from sitecms.services.content_merger import DEFAULT_POLICY, MergePolicy

# customStyles : mêmes règles, plus les listes de breakpoints
STYLES_POLICY = DEFAULT_POLICY.extend(
    always_replace_arrays=["hideOnTablet", "hideOnDesktop"],
    nested_object_fields=["margin", "border", "shadow", "background"]
)

_PADDING = {"top": "4rem", "bottom": "4rem", "left": "1.5rem", "right": "1.5rem"}


class BlockType:
    def __init__(self, name: str, label: str, default_content: dict, policy: MergePolicy = DEFAULT_POLICY):
        self.name = name
        self.label = label
        self.default_content = default_content
        self.policy = policy

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "label": self.label,
            "default_content": copy.deepcopy(self.default_content)
        }


BLOCK_TYPES: Dict[str, BlockType] = {
    "hero": BlockType(
        "hero",
        "Hero",
        {
            "mainTitle": "",
            "title": "Willkommen",
            "subtitle": "",
            "description": "",
            "badge": "",
            "buttons": [{"text": "Jetzt buchen", "link": "#contact", "style": "primary"}],
            "image": {"url": "", "alt": ""},
            "backgroundOverlay": {"enabled": False, "color": "#000000", "opacity": 0.4},
            "trustIndicator": "",
            "trustIndicatorSubtext": "",
            "padding": dict(_PADDING),
            "responsive": {"mobile": {"titleSize": "2rem"}, "desktop": {"titleSize": "3.5rem"}},
        },
        DEFAULT_POLICY.extend(
            always_replace_arrays=["trustBadges"],
            always_update_fields=["highlightedWord"]
        )
    ),
    "text": BlockType(
        "text",
        "Text",
        {
            "title": "",
            "subtitle": "",
            "content": "",
            "contentType": "paragraph",
            "listItems": [],
            "alignment": "left",
            "maxWidth": "lg",
            "padding": {"top": "3rem", "bottom": "3rem", "left": "1.5rem", "right": "1.5rem"},
            "typography": {
                "title": {"fontSize": "2rem", "fontWeight": "700", "color": "#1e293b"},
                "body": {"fontSize": "1.125rem", "lineHeight": "1.75", "color": "#374151"},
            },
        },
        DEFAULT_POLICY.extend(
            always_replace_arrays=["listItems"],
            always_update_fields=["content", "quoteAuthor", "quoteRole"],
            nested_object_fields=["typography", "quoteStyles", "margin"]
        )
    ),
    "features": BlockType(
        "features",
        "Features",
        {"title": "Ihre Vorteile", "subtitle": "", "features": [], "columns": 3, "padding": dict(_PADDING)},
        DEFAULT_POLICY.extend(always_replace_arrays=["features"])
    ),
    "pricing": BlockType(
        "pricing",
        "Preise",
        {"title": "Preise", "subtitle": "", "plans": [], "currency": "EUR", "showBadges": True, "padding": dict(_PADDING)},
        DEFAULT_POLICY.extend(always_replace_arrays=["plans"])
    ),
    "testimonials": BlockType(
        "testimonials",
        "Kundenstimmen",
        {"title": "Das sagen unsere Kunden", "subtitle": "", "testimonials": [], "layout": "grid", "padding": dict(_PADDING)},
        DEFAULT_POLICY.extend(always_replace_arrays=["testimonials"])
    ),
    "faq": BlockType(
        "faq",
        "FAQ",
        {"title": "Häufige Fragen", "subtitle": "", "faqs": [], "expandFirst": True, "padding": dict(_PADDING)},
        DEFAULT_POLICY.extend(always_replace_arrays=["faqs"])
    ),
    "contact": BlockType(
        "contact",
        "Kontakt",
        {
            "title": "Kontakt",
            "subtitle": "",
            "phone": "",
            "email": "",
            "address": "",
            "showForm": True,
            "showMap": False,
            "openingHours": [],
            "padding": dict(_PADDING),
        },
        DEFAULT_POLICY.extend(
            always_replace_arrays=["openingHours"],
            always_update_fields=["phone", "email", "address", "whatsapp"]
        )
    ),
    "gallery": BlockType(
        "gallery",
        "Galerie",
        {"title": "", "images": [], "layout": "grid", "columns": 3, "padding": dict(_PADDING)},
        DEFAULT_POLICY.extend(always_replace_arrays=["images"])
    ),
    "cta": BlockType(
        "cta",
        "Call to Action",
        {"title": "Jetzt Termin vereinbaren", "description": "", "buttons": [], "padding": dict(_PADDING)}
    ),
    "divider": BlockType(
        "divider",
        "Trennlinie",
        {"style": "line", "color": "#e5e7eb", "spacing": "2rem"}
    ),
}


def get_block_type(name: str) -> Optional[BlockType]:
    return BLOCK_TYPES.get(name)


def list_block_types() -> List[BlockType]:
    return list(BLOCK_TYPES.values())


def default_content_for(name: str) -> dict:
    block_type = BLOCK_TYPES.get(name)
    if block_type is None:
        return {}
    return copy.deepcopy(block_type.default_content)


def merge_policy_for(name: str) -> MergePolicy:
    block_type = BLOCK_TYPES.get(name)
    return block_type.policy if block_type else DEFAULT_POLICY
