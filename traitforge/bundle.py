"""
traitforge/bundle.py
Configuration bundles: plain dicts (e.g. parsed JSON) -> TraitRegistry

Bundle format (every key optional; omitted sections fall back to built-ins):

    {
        "version": 1,
        "patterns": [
            {"id": "interference", "weight": 30},
            {"id": "gentle", "weight": 70,
             "params": [{"name": "wavelength", "min": 10, "max": 80, "type": "int"}, ...]}
        ],
        "pattern_total": 100,
        "rarity_classes": [{"name": "Common", "weight": 60}, ...],
        "rarity_total": 100,
        "themes": [
            {"name": "dawn", "rarity": "Common", "weight": 20,
             "colors": {"color1": "#1B2951", ...}, "description": "", "mood": ""}
        ],
        "validation": {"wcag_aa": 4.5, "weights": {...}}
    }

Complexity functions cannot travel in JSON, so every pattern must name a
built-in scorer ("scorer", defaulting to its id) and declare the same
parameter names that scorer reads.
"""

import dataclasses
import json
import logging
import math
from typing import Any, List, Optional, Tuple

from .color import Palette
from .config import TRAIT_SCHEMA_VERSION, VALIDATION_CONFIG, ValidationConfig
from .errors import ConfigurationError, InvalidColorError
from .patterns import BUILTIN_ARCHETYPES, Archetype, ParamSpec, PatternConfig
from .registry import PATTERN_TOTAL, TraitRegistry
from .themes import BUILTIN_THEMES, RARITY_CLASSES, RARITY_TOTAL, ThemePreset

logger = logging.getLogger(__name__)

_BUILTINS = {a.pattern_id: a for a in BUILTIN_ARCHETYPES}
_VALIDATION_FIELDS = {f.name for f in dataclasses.fields(ValidationConfig)}


def _is_number(value) -> bool:
    return (
        not isinstance(value, bool)
        and isinstance(value, (int, float))
        and math.isfinite(value)
    )


# =============================================================================
# Section parsers: each returns (value, errors)
# =============================================================================

def _parse_param(data: Any, prefix: str) -> Tuple[Optional[ParamSpec], List[str]]:
    errors = []
    if not isinstance(data, dict):
        return None, [f"{prefix} must be dict"]
    for key in ("name", "min", "max"):
        if key not in data:
            errors.append(f"{prefix}.{key} is required")
    if errors:
        return None, errors
    try:
        spec = ParamSpec(
            name=data["name"],
            min_val=data["min"],
            max_val=data["max"],
            type=data.get("type", "float"),
            distribution=data.get("distribution", "uniform"),
            step=data.get("step"),
            label=data.get("label", ""),
        )
    except ConfigurationError as e:
        return None, [f"{prefix}: {e}"]
    return spec, []


def _parse_pattern(data: Any, prefix: str) -> Tuple[Optional[Archetype], List[str]]:
    if not isinstance(data, dict):
        return None, [f"{prefix} must be dict"]

    pattern_id = data.get("id")
    if not isinstance(pattern_id, str) or not pattern_id:
        return None, [f"{prefix}.id must be a non-empty string"]

    scorer_id = data.get("scorer", pattern_id)
    base = _BUILTINS.get(scorer_id)
    if base is None:
        return None, [
            f"{prefix}.scorer '{scorer_id}' is not a built-in scorer "
            f"(expected one of {', '.join(_BUILTINS)})"
        ]

    errors = []
    weight = data.get("weight", base.weight)
    if not _is_number(weight):
        errors.append(f"{prefix}.weight must be a number, got {weight!r}")

    params = data.get("params")
    specs = base.config.param_specs
    if params is not None:
        if not isinstance(params, list):
            errors.append(f"{prefix}.params must be list")
        else:
            parsed = []
            bad_spec = False
            for i, p in enumerate(params):
                spec, spec_errors = _parse_param(p, f"{prefix}.params[{i}]")
                errors.extend(spec_errors)
                if spec is None:
                    bad_spec = True
                else:
                    parsed.append(spec)
            if not bad_spec:
                names = {s.name for s in parsed}
                expected = set(base.config.param_names)
                if names != expected:
                    errors.append(
                        f"{prefix}.params must declare {sorted(expected)}, got {sorted(names)}"
                    )
            specs = tuple(parsed)

    if errors:
        return None, errors

    try:
        config = PatternConfig(
            pattern_id=pattern_id,
            display_name=data.get("display_name", base.config.display_name),
            param_specs=specs,
            category=data.get("category", base.config.category),
            description=data.get("description", base.config.description),
            version=str(data.get("version", base.config.version)),
        )
    except ConfigurationError as e:
        return None, [f"{prefix}: {e}"]
    return Archetype(config=config, scorer=base.scorer, weight=weight), []


def _parse_theme(data: Any, prefix: str) -> Tuple[Optional[ThemePreset], List[str]]:
    if not isinstance(data, dict):
        return None, [f"{prefix} must be dict"]
    errors = []
    for key in ("name", "rarity", "weight", "colors"):
        if key not in data:
            errors.append(f"{prefix}.{key} is required")
    if errors:
        return None, errors

    colors = data["colors"]
    try:
        if isinstance(colors, dict):
            colors = Palette.from_hex(colors).hex
        theme = ThemePreset(
            name=data["name"],
            rarity=data["rarity"],
            weight=data["weight"],
            colors=colors,
            description=data.get("description", ""),
            mood=data.get("mood", ""),
        )
    except (ConfigurationError, InvalidColorError) as e:
        return None, [f"{prefix}: {e}"]
    return theme, []


def _parse_classes(data: Any) -> Tuple[Optional[list], List[str]]:
    if not isinstance(data, list):
        return None, ["rarity_classes must be list"]
    errors = []
    classes = []
    for i, item in enumerate(data):
        prefix = f"rarity_classes[{i}]"
        if not isinstance(item, dict):
            errors.append(f"{prefix} must be dict")
            continue
        name = item.get("name")
        weight = item.get("weight")
        if not isinstance(name, str) or not name:
            errors.append(f"{prefix}.name must be a non-empty string")
        if not _is_number(weight):
            errors.append(f"{prefix}.weight must be a number, got {weight!r}")
        else:
            classes.append((name, weight))
    return classes, errors


def _parse_validation(data: Any) -> Tuple[Optional[ValidationConfig], List[str]]:
    if not isinstance(data, dict):
        return None, ["validation must be dict"]
    unknown = sorted(set(data) - _VALIDATION_FIELDS)
    if unknown:
        return None, [f"validation has unknown keys: {', '.join(unknown)}"]
    errors = []
    for key, value in data.items():
        if key == "weights":
            if not isinstance(value, dict) or not all(_is_number(v) for v in value.values()):
                errors.append("validation.weights must map names to numbers")
        elif not _is_number(value):
            errors.append(f"validation.{key} must be a number, got {value!r}")
    if errors:
        return None, errors
    try:
        return ValidationConfig(**data), []
    except ConfigurationError as e:
        return None, [f"validation: {e}"]


# =============================================================================
# Public API
# =============================================================================

def validate_bundle(data: dict) -> Tuple[bool, List[str]]:
    """
    Check a bundle without building a registry.

    Returns:
        (is_valid, errors)
    """
    _, errors = _parse_bundle(data)
    return not errors, errors


def _parse_bundle(data: Any):
    if not isinstance(data, dict):
        return None, [f"bundle must be dict, got {type(data).__name__}"]

    errors = []
    known = {"version", "patterns", "pattern_total", "rarity_classes",
             "rarity_total", "themes", "validation"}
    unknown = sorted(set(data) - known)
    if unknown:
        errors.append(f"unknown keys: {', '.join(unknown)}")

    version = data.get("version", TRAIT_SCHEMA_VERSION)
    if version != TRAIT_SCHEMA_VERSION:
        errors.append(f"version must be {TRAIT_SCHEMA_VERSION}, got {version!r}")

    archetypes = list(BUILTIN_ARCHETYPES)
    if "patterns" in data:
        if not isinstance(data["patterns"], list):
            errors.append("patterns must be list")
        else:
            archetypes = []
            for i, item in enumerate(data["patterns"]):
                archetype, item_errors = _parse_pattern(item, f"patterns[{i}]")
                errors.extend(item_errors)
                if archetype is not None:
                    archetypes.append(archetype)

    themes = list(BUILTIN_THEMES)
    if "themes" in data:
        if not isinstance(data["themes"], list):
            errors.append("themes must be list")
        else:
            themes = []
            for i, item in enumerate(data["themes"]):
                theme, item_errors = _parse_theme(item, f"themes[{i}]")
                errors.extend(item_errors)
                if theme is not None:
                    themes.append(theme)

    classes = list(RARITY_CLASSES)
    if "rarity_classes" in data:
        classes, class_errors = _parse_classes(data["rarity_classes"])
        errors.extend(class_errors)

    totals = {}
    for key, default in (("pattern_total", PATTERN_TOTAL), ("rarity_total", RARITY_TOTAL)):
        value = data.get(key, default)
        if value is not None and not _is_number(value):
            errors.append(f"{key} must be a number or null, got {value!r}")
        totals[key] = value

    validation = VALIDATION_CONFIG
    if "validation" in data:
        validation, validation_errors = _parse_validation(data["validation"])
        errors.extend(validation_errors)

    if errors:
        return None, errors

    try:
        registry = TraitRegistry(
            archetypes,
            themes,
            rarity_classes=classes,
            pattern_total=totals["pattern_total"],
            rarity_total=totals["rarity_total"],
            validation_config=validation,
        )
    except ConfigurationError as e:
        return None, [str(e)]
    return registry, []


def registry_from_dict(data: dict) -> TraitRegistry:
    """
    Build a TraitRegistry from a bundle dict.

    Raises:
        ConfigurationError: listing every problem found, joined by "; "
    """
    registry, errors = _parse_bundle(data)
    if errors:
        message = f"Invalid bundle: {'; '.join(errors)}"
        logger.warning(message)
        raise ConfigurationError(message)
    return registry


def registry_from_json(text: str) -> TraitRegistry:
    """Parse JSON text, then registry_from_dict()."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid bundle: not valid JSON ({e})") from None
    return registry_from_dict(data)


def registry_to_dict(registry: TraitRegistry) -> dict:
    """Export a registry in bundle form (inverse of registry_from_dict)."""
    scorer_ids = {a.scorer: a.pattern_id for a in BUILTIN_ARCHETYPES}
    patterns = []
    for entry in registry.pattern_table.entries:
        config = registry.pattern(entry.key)
        patterns.append({
            "id": config.pattern_id,
            "scorer": scorer_ids.get(registry.scorer.get(entry.key), entry.key),
            "weight": entry.weight,
            "display_name": config.display_name,
            "category": config.category,
            "description": config.description,
            "version": config.version,
            "params": [p.to_dict() for p in config.param_specs],
        })
    return {
        "version": TRAIT_SCHEMA_VERSION,
        "patterns": patterns,
        "pattern_total": _plain(registry.pattern_table.total),
        "rarity_classes": [
            {"name": e.key, "weight": e.weight}
            for e in registry.theme_table.classes.entries
        ],
        "rarity_total": _plain(registry.theme_table.classes.total),
        "themes": [t.to_dict() for t in registry.themes],
        "validation": {
            **{
                f.name: getattr(registry.validation_config, f.name)
                for f in dataclasses.fields(ValidationConfig)
                if f.name != "weights"
            },
            "weights": dict(registry.validation_config.weights),
        },
    }


def _plain(value):
    """Fraction -> int when whole, else float, for JSON output."""
    if value.denominator == 1:
        return value.numerator
    return float(value)
