"""Checks for JSON-LD structured data."""

import json
from dataclasses import dataclass, field
from typing import Any

from bs4 import BeautifulSoup

from ..models import PageData, RuleResult
from ..rules import Rule, define_rule
from . import parse_html


KNOWN_TYPES = {
    "Organization",
    "WebPage",
    "WebSite",
    "Article",
    "BlogPosting",
    "FAQ",
    "FAQPage",
    "Product",
    "LocalBusiness",
    "Person",
    "BreadcrumbList",
    "HowTo",
    "Event",
    "SoftwareApplication",
    "Course",
    "Recipe",
    "VideoObject",
}

IDENTITY_TYPES = {"Organization", "Person", "LocalBusiness"}

# Properties that make a schema useful to answer engines
KEY_PROPERTIES = {
    "name",
    "description",
    "image",
    "url",
    "datePublished",
    "dateModified",
    "author",
    "publisher",
    "headline",
    "mainEntityOfPage",
    "aggregateRating",
    "review",
    "offers",
    "price",
    "availability",
    "brand",
    "sku",
    "address",
    "telephone",
    "email",
    "openingHours",
    "geo",
    "sameAs",
    "logo",
    "contactPoint",
}


@dataclass
class JsonLdBlocks:
    """Parsed JSON-LD script blocks of a page."""
    scripts: int = 0
    items: list[Any] = field(default_factory=list)
    errors: int = 0


def extract_json_ld(soup: BeautifulSoup) -> JsonLdBlocks:
    """Extract all JSON-LD scripts from the page, counting unparsable ones."""
    blocks = JsonLdBlocks()

    for script in soup.find_all("script", type="application/ld+json"):
        blocks.scripts += 1
        content = (script.string or "").strip()
        if not content:
            continue
        try:
            data = json.loads(content)
        except json.JSONDecodeError:
            blocks.errors += 1
            continue
        if isinstance(data, list):
            blocks.items.extend(data)
        else:
            blocks.items.append(data)

    return blocks


def get_schema_types(data: Any) -> list[str]:
    """Extract @type values from JSON-LD, following @graph."""
    types: list[str] = []
    if not isinstance(data, dict):
        return types

    type_val = data.get("@type")
    if isinstance(type_val, list):
        types.extend(t for t in type_val if isinstance(t, str))
    elif isinstance(type_val, str):
        types.append(type_val)

    graph = data.get("@graph")
    if isinstance(graph, list):
        for item in graph:
            types.extend(get_schema_types(item))

    return types


def page_schema_types(page: PageData) -> list[str]:
    types: list[str] = []
    for item in extract_json_ld(parse_html(page)).items:
        types.extend(get_schema_types(item))
    return types


@define_rule(
    "R04",
    "JSON-LD Schema.org Markup",
    "Check for structured data using JSON-LD format",
    category="structured-data",
    max_score=10,
)
def check_json_ld(rule: Rule, page: PageData) -> RuleResult:
    blocks = extract_json_ld(parse_html(page))

    if blocks.scripts == 0:
        return rule.fail(
            "No JSON-LD structured data found",
            "Add JSON-LD Schema.org markup to help AI understand your page content. "
            "Start with Organization or WebPage schema.",
        )

    types: list[str] = []
    for item in blocks.items:
        types.extend(get_schema_types(item))

    if blocks.errors and not types:
        return rule.warn(
            3,
            "JSON-LD found but contains parse errors",
            "Fix JSON-LD syntax errors. Validate at https://search.google.com/test/rich-results",
            details={"types": types, "errors": blocks.errors},
        )

    recognized = [t for t in types if t in KNOWN_TYPES]
    if not recognized:
        return rule.warn(
            5,
            f"JSON-LD found with unrecognized type(s): {', '.join(types) or '(none)'}",
            "Use standard Schema.org types like Organization, WebPage, Article, or Product.",
            details={"types": types},
        )

    return rule.passed(f"JSON-LD found: {', '.join(recognized)}", details={"types": recognized})


@define_rule(
    "R17",
    "Identity Schema Detection",
    "Check for Organization, Person, or LocalBusiness schema in JSON-LD",
    category="structured-data",
    max_score=5,
)
def check_identity_schema(rule: Rule, page: PageData) -> RuleResult:
    blocks = extract_json_ld(parse_html(page))

    if blocks.scripts == 0:
        return rule.fail(
            "No JSON-LD found on page",
            "Add JSON-LD with Organization, Person, or LocalBusiness schema to establish your identity "
            "for AI systems.",
        )

    types: list[str] = []
    for item in blocks.items:
        types.extend(get_schema_types(item))

    identity = [t for t in types if t in IDENTITY_TYPES]
    if identity:
        return rule.passed(f"Identity schema found: {', '.join(identity)}", details={"types": identity})

    if blocks.items:
        return rule.warn(
            2,
            "JSON-LD exists but no identity schema found",
            "Add Organization, Person, or LocalBusiness schema to help AI systems understand who you are.",
            details={"types": types},
        )

    return rule.fail(
        "No valid JSON-LD found",
        "Add JSON-LD with Organization, Person, or LocalBusiness schema to establish your identity.",
    )


@dataclass
class SchemaAnalysis:
    types: list[str] = field(default_factory=list)
    total_properties: int = 0
    key_properties: list[str] = field(default_factory=list)
    max_nesting: int = 0

    def merge(self, other: "SchemaAnalysis") -> None:
        self.types.extend(other.types)
        self.total_properties += other.total_properties
        self.key_properties.extend(other.key_properties)
        self.max_nesting = max(self.max_nesting, other.max_nesting)


def analyze_schema(obj: Any, depth: int = 0) -> SchemaAnalysis:
    """Count types, properties and nesting of a JSON-LD value."""
    analysis = SchemaAnalysis(max_nesting=depth)

    if isinstance(obj, list):
        for item in obj:
            analysis.merge(analyze_schema(item, depth))
        return analysis

    if not isinstance(obj, dict):
        return analysis

    for key, value in obj.items():
        if key.startswith("@"):
            if key == "@type" and isinstance(value, str):
                analysis.types.append(value)
            elif key == "@graph":
                analysis.merge(analyze_schema(value, depth))
            continue

        analysis.total_properties += 1
        if key in KEY_PROPERTIES:
            analysis.key_properties.append(key)
        if isinstance(value, (dict, list)):
            analysis.merge(analyze_schema(value, depth + 1))

    return analysis


@define_rule(
    "R25",
    "Schema Depth",
    "Score richness of JSON-LD beyond basic presence",
    category="structured-data",
    max_score=8,
)
def check_schema_depth(rule: Rule, page: PageData) -> RuleResult:
    blocks = extract_json_ld(parse_html(page))

    # Absence of JSON-LD is penalised by R04.
    if blocks.scripts == 0:
        return rule.skip("No JSON-LD found (R04 handles basic check)", score=0)

    combined = SchemaAnalysis()
    for item in blocks.items:
        combined.merge(analyze_schema(item))

    types = list(dict.fromkeys(combined.types))
    key_props = list(dict.fromkeys(combined.key_properties))
    total = combined.total_properties

    if not types:
        return rule.skip("No valid @type found in JSON-LD", score=0)

    details = {
        "types": types,
        "total_properties": total,
        "key_properties": key_props,
        "max_nesting": combined.max_nesting,
    }

    if len(types) == 1 and total < 5:
        return rule.warn(
            2,
            "Shallow schema (1 type, <5 properties)",
            "Enrich your JSON-LD with more properties (description, image, author, etc.)",
            details=details,
        )

    if len(types) == 1 and total < 10:
        return rule.warn(
            4,
            "Moderate schema (1 type, 5-9 properties)",
            "Consider adding more schema types or properties for richer data",
            details=details,
        )

    if len(types) >= 3 and total >= 10 and len(key_props) >= 5:
        return rule.passed(
            f"Rich schema ({len(types)} types, {total} properties, {len(key_props)} key)",
            details=details,
        )

    return rule.passed(f"Good schema ({len(types)} types, {total} properties)", score=6, details=details)
