# app/domain/schemas/components.py
"""
Component schema registry.

Every page section renders one component type (HeroSection, PromoCard, ...).
The schema for a component type lists its editable fields, their kind and
their default value. Object and array fields may carry a nested schema.

The registry is static: it is defined here, never persisted, and never
mutated at runtime. Unknown component types simply have no schema.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field as dc_field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional

# Field kinds (wire names are what the dashboard forms use)
TEXT = "string"
LONG_TEXT = "textarea"
NUMBER = "number"
BOOLEAN = "boolean"
IMAGE = "image"
OBJECT = "object"
LIST = "array"

FIELD_KINDS = frozenset({TEXT, LONG_TEXT, NUMBER, BOOLEAN, IMAGE, OBJECT, LIST})
PRIMITIVE_KINDS = frozenset({TEXT, LONG_TEXT, NUMBER, BOOLEAN, IMAGE})

# Nested-schema key describing scalar list items (e.g. a list of image urls)
ITEM_KEY = "_item"


@dataclass(frozen=True)
class FieldSchema:
    kind: str
    default: Any = None
    label: Optional[str] = None
    placeholder: Optional[str] = None
    nested: Optional[Mapping[str, "FieldSchema"]] = dc_field(default=None)

    def __post_init__(self):
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unknown field kind: {self.kind}")
        if self.nested is not None and self.kind not in (OBJECT, LIST):
            raise ValueError(f"{self.kind} fields cannot carry a nested schema")
        if self.nested is not None:
            object.__setattr__(self, "nested", MappingProxyType(dict(self.nested)))

    def default_value(self) -> Any:
        """
        A fresh default for this field.

        Object fields with a nested schema are built from the nested
        defaults; list fields always start empty.
        """
        if self.kind == OBJECT and self.nested is not None:
            return {key: sub.default_value() for key, sub in self.nested.items()}
        if self.kind == OBJECT:
            return copy.deepcopy(self.default) if self.default is not None else {}
        if self.kind == LIST:
            return []
        return copy.deepcopy(self.default)


ComponentSchema = Mapping[str, FieldSchema]


def _schema(**fields: FieldSchema) -> ComponentSchema:
    return MappingProxyType(dict(fields))


def text(default="", label=None, placeholder=None):
    return FieldSchema(TEXT, default, label, placeholder)


def long_text(default="", label=None, placeholder=None):
    return FieldSchema(LONG_TEXT, default, label, placeholder)


def image(default="", label=None):
    return FieldSchema(IMAGE, default, label)


def obj(title=None, /, **nested: FieldSchema):
    return FieldSchema(OBJECT, None, title, None, nested)


def items(title=None, /, **nested: FieldSchema):
    return FieldSchema(LIST, [], title, None, nested or None)


_BADGE = obj("Badge", icon=text("Leaf", "Icon"), text=text("Made in Canada", "Text"))

_HERO = _schema(
    badge=_BADGE,
    title=text("Clean Beauty That Works, Made With Care in Canada", "Title"),
    subtitle=long_text(
        "Luxurious hair care and skincare crafted with clean ingredients, "
        "gentle botanicals, and modern science.",
        "Subtitle",
    ),
    primaryCta=obj(
        "Primary button",
        label=text("Shop Bestsellers", "Label"),
        href=text("#products", "Link"),
    ),
    secondaryCta=obj(
        "Secondary button",
        label=text("See Our Ingredients", "Label"),
        href=text("#ingredients", "Link"),
    ),
    heroImage=image("", "Hero image"),
    accentImage=image("", "Accent image"),
)

COMPONENT_SCHEMAS: Mapping[str, ComponentSchema] = MappingProxyType({
    "HeroSection": _HERO,
    "HeroWelcome": _HERO,
    "InfoBar": _schema(
        hours=text("5PM - 11PM Daily", "Hours"),
        phone=text("+1 (555) 123-4567", "Phone"),
        tagline=text("Fine Dining Experience", "Tagline"),
    ),
    "PromoCard": _schema(
        eyebrow=text("EXPLORE", "Eyebrow"),
        title=text("Delicious Breakfast Menu", "Title"),
        hours=text("7.00am - 4.00pm", "Hours"),
        ctaLabel=text("ORDER NOW", "Button label"),
        ctaLink=text("/menu", "Button link"),
        imageUrl=image("", "Image"),
    ),
    "WhyWeStand": _schema(
        reasons=items(
            "Reasons",
            title=text("", "Title"),
            description=long_text("", "Description"),
        ),
    ),
    "Specialties": _schema(
        specialties=items(
            "Specialties",
            title=text("", "Title"),
            description=long_text("", "Description"),
            image=image("", "Image"),
        ),
    ),
    "GalleryTeaser": _schema(
        images=items("Images", **{ITEM_KEY: image("")}),
        ctaLabel=text("View Full Gallery", "Button label"),
    ),
    "CTABanner": _schema(
        title=text("Ready to Dine with Us?", "Title"),
        description=long_text("Reserve your table now...", "Description"),
        ctaLabel=text("Book Your Reservation", "Button label"),
    ),
    "HomeHeroSection": _schema(
        address=text("478 PARLIAMENT ST", "Address"),
        daysLabel=text("MONDAY - SUNDAY", "Days label"),
        day=obj(
            "Daytime",
            description=long_text("Have brunch at one of the oldest Restaurants in Cabbagetown", "Description"),
            hours=text("7AM - 4PM", "Hours"),
            heroImage=image("/home/brunch-frame-bg.jpg", "Background image"),
        ),
        night=obj(
            "Evening",
            description=long_text("Have dinner at one of the oldest Restaurants in Cabbagetown", "Description"),
            hours=text("7PM - 12AM", "Hours"),
            heroImage=image("/home/jazz-frame.jpg", "Background image"),
        ),
        reservationPhone=text("+16473683877", "Reservation phone"),
        reservationLabel=text("Reservation", "Reservation label"),
    ),
    "HomeAboutSection": _schema(
        title=text("The Master Behind the Menu", "Title"),
        paragraphs=items("Paragraphs", **{ITEM_KEY: long_text("")}),
    ),
    "HomeMenuSection": _schema(
        title=text("Taste Why Cabbagetown Has Loved Us for Decades", "Title"),
        description=long_text("Explore our carefully crafted dishes", "Description"),
        images=items("Images", **{ITEM_KEY: image("")}),
    ),
    "HomeEventsSection": _schema(
        title=text("Dinner and Jazz", "Title"),
        description=long_text(
            "Join us for an evening that feeds both your appetite and your soul.",
            "Description",
        ),
    ),
    "HomeReservationSection": _schema(
        heading=text("Your Table Awaits", "Heading"),
        subheading=text("Reserve Now", "Subheading"),
    ),
})


def get_schema(component_type: str) -> Optional[ComponentSchema]:
    return COMPONENT_SCHEMAS.get(component_type)


def get_field_keys(component_type: str) -> List[str]:
    schema = get_schema(component_type)
    return list(schema.keys()) if schema else []


def list_component_types() -> List[str]:
    return list(COMPONENT_SCHEMAS.keys())


def get_field_schema(component_type: str, path: str) -> Optional[FieldSchema]:
    """
    Resolve a field by dotted path.

    "day.description" walks object nested schemas; "images.0" (numeric last
    segment) resolves to the list field's item schema.
    """
    schema = get_schema(component_type)
    if not schema or not path:
        return None

    segments = path.split(".")

    if len(segments) > 1 and segments[-1].isdigit():
        list_field = schema.get(segments[0])
        if list_field and list_field.kind == LIST and list_field.nested:
            return list_field.nested.get(ITEM_KEY)
        return None

    current: Mapping[str, FieldSchema] = schema
    for index, segment in enumerate(segments):
        field_schema = current.get(segment)
        if field_schema is None:
            return None
        if index == len(segments) - 1:
            return field_schema
        if field_schema.kind != OBJECT or field_schema.nested is None:
            return None
        current = field_schema.nested

    return None


def get_field_default(component_type: str, path: str) -> Any:
    field_schema = get_field_schema(component_type, path)
    return field_schema.default_value() if field_schema else None


def schema_to_dict(schema: ComponentSchema) -> Dict[str, Any]:
    """JSON form used by the dashboard to build edit forms."""
    result: Dict[str, Any] = {}
    for key, field_schema in schema.items():
        entry: Dict[str, Any] = {
            "type": field_schema.kind,
            "default": field_schema.default_value(),
        }
        if field_schema.label:
            entry["label"] = field_schema.label
        if field_schema.placeholder:
            entry["placeholder"] = field_schema.placeholder
        if field_schema.nested is not None:
            entry["nestedSchema"] = schema_to_dict(field_schema.nested)
        result[key] = entry
    return result
