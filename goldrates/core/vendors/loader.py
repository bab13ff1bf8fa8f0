"""Load vendor profile definitions and overrides from configuration files."""

from __future__ import annotations

import dataclasses
import json
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from goldrates.core.exceptions.base import ProfileConfigError
from goldrates.core.exceptions.codes import ErrorCode
from goldrates.core.models.vendors import (
    CategorySignature,
    HeaderSkipStrategy,
    LabelRule,
    VendorProfile,
)
from goldrates.core.vendors.builtin import builtin_profiles

_ALLOWED_FILE_SUFFIXES = {".yaml", ".yml", ".json", ".toml"}
_PROFILE_KEYS = {
    "display_name",
    "url",
    "categories",
    "header_skip",
    "purity_tokens",
    "label_rules",
    "primary_category",
}


def load_vendor_profiles(
    path: str | Path | None = None,
    base: Mapping[str, VendorProfile] | None = None,
) -> dict[str, VendorProfile]:
    """Return vendor profiles, optionally merged with definitions from ``path``.

    Entries naming a known vendor override only the keys they set; unknown
    vendors must define a complete profile.
    """

    profiles = dict(base) if base is not None else builtin_profiles()
    if path is None:
        return profiles

    file_path = Path(path)
    if not file_path.exists():
        raise ProfileConfigError(
            "Vendor configuration file does not exist.",
            details={"path": str(file_path)},
        )

    suffix = file_path.suffix.lower()
    if suffix not in _ALLOWED_FILE_SUFFIXES:
        raise ProfileConfigError(
            "Unsupported vendor configuration file type.",
            details={"path": str(file_path), "suffix": suffix},
        )

    content = file_path.read_text(encoding="utf-8")
    try:
        if suffix in {".yaml", ".yml"}:
            config = yaml.safe_load(content)
        elif suffix == ".toml":
            config = tomllib.loads(content)
        else:
            config = json.loads(content)
    except (yaml.YAMLError, tomllib.TOMLDecodeError, json.JSONDecodeError) as exc:
        raise ProfileConfigError(
            f"Vendor configuration could not be parsed: {exc}",
            details={"path": str(file_path)},
        ) from exc

    if not isinstance(config, Mapping):
        raise ProfileConfigError(
            "Vendor configuration must be a mapping at the top level.",
            details={"path": str(file_path)},
        )

    return profiles_from_mapping(config, base=profiles)


def profiles_from_mapping(
    config: Mapping[str, Any],
    base: Mapping[str, VendorProfile] | None = None,
) -> dict[str, VendorProfile]:
    """Convert a ``{"vendors": {...}}`` mapping into merged :class:`VendorProfile` objects."""

    profiles = dict(base) if base is not None else builtin_profiles()
    raw_vendors = config.get("vendors")
    if not isinstance(raw_vendors, Mapping):
        raise ProfileConfigError(
            "Vendor configuration requires a 'vendors' mapping.",
            details={"provided_type": type(raw_vendors).__name__},
        )

    for vendor_id, raw_profile in raw_vendors.items():
        if not isinstance(raw_profile, Mapping):
            raise ProfileConfigError("Each vendor entry must be a mapping.", vendor_id=vendor_id)
        existing = profiles.get(vendor_id)
        if existing is None:
            profiles[vendor_id] = _parse_profile(vendor_id, raw_profile)
        else:
            profiles[vendor_id] = _merge_profile(existing, raw_profile)
    return profiles


def get_profile(profiles: Mapping[str, VendorProfile], vendor_id: str) -> VendorProfile:
    """Look up ``vendor_id``, raising :class:`ProfileConfigError` when unknown."""

    try:
        return profiles[vendor_id]
    except KeyError:
        raise ProfileConfigError(
            f"Unknown vendor {vendor_id!r}.",
            vendor_id=vendor_id,
            error_code=ErrorCode.VENDOR_NOT_FOUND.value,
            details={"known": sorted(profiles)},
        ) from None


def _merge_profile(existing: VendorProfile, raw: Mapping[str, Any]) -> VendorProfile:
    _reject_unknown_keys(existing.vendor_id, raw)
    fields = _parse_fields(existing.vendor_id, raw)
    profile = dataclasses.replace(existing, **fields)
    _validate_profile(profile)
    return profile


def _parse_profile(vendor_id: str, raw: Mapping[str, Any]) -> VendorProfile:
    _reject_unknown_keys(vendor_id, raw)
    fields = _parse_fields(vendor_id, raw)
    if "categories" not in fields:
        raise ProfileConfigError(
            "A new vendor must define at least one category.",
            vendor_id=vendor_id,
        )
    fields.setdefault("display_name", vendor_id)
    fields.setdefault("url", "")
    profile = VendorProfile(vendor_id=vendor_id, **fields)
    _validate_profile(profile)
    return profile


def _reject_unknown_keys(vendor_id: str, raw: Mapping[str, Any]) -> None:
    unknown = set(raw) - _PROFILE_KEYS
    if unknown:
        raise ProfileConfigError(
            "Vendor entry contains unknown keys.",
            vendor_id=vendor_id,
            details={"keys": sorted(unknown)},
        )


def _parse_fields(vendor_id: str, raw: Mapping[str, Any]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for key in ("display_name", "url", "primary_category"):
        if key in raw:
            value = raw[key]
            if not isinstance(value, str):
                raise ProfileConfigError(
                    f"Vendor '{key}' must be a string.",
                    vendor_id=vendor_id,
                )
            fields[key] = value
    if "header_skip" in raw:
        fields["header_skip"] = _parse_header_skip(raw["header_skip"], vendor_id)
    if "purity_tokens" in raw:
        fields["purity_tokens"] = _string_tuple(raw["purity_tokens"], vendor_id, "purity_tokens")
    if "categories" in raw:
        fields["categories"] = _parse_categories(raw["categories"], vendor_id)
    if "label_rules" in raw:
        fields["label_rules"] = _parse_label_rules(raw["label_rules"], vendor_id)
    return fields


def _parse_categories(raw: Any, vendor_id: str) -> tuple[CategorySignature, ...]:
    if not isinstance(raw, list) or not raw:
        raise ProfileConfigError(
            "Vendor 'categories' must be a non-empty list.",
            vendor_id=vendor_id,
        )

    signatures: list[CategorySignature] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, Mapping):
            raise ProfileConfigError(
                "Each category entry must be a mapping.",
                vendor_id=vendor_id,
                details={"index": index},
            )
        tag = entry.get("tag")
        if not isinstance(tag, str) or not tag.strip():
            raise ProfileConfigError(
                "Category must define a non-empty string 'tag'.",
                vendor_id=vendor_id,
                details={"index": index},
            )
        two_sided = entry.get("two_sided", True)
        if not isinstance(two_sided, bool):
            raise ProfileConfigError(
                "Category 'two_sided' must be a boolean.",
                vendor_id=vendor_id,
                details={"tag": tag},
            )
        header_skip = entry.get("header_skip")
        signatures.append(
            CategorySignature(
                tag=tag,
                required=_string_tuple(entry.get("required", []), vendor_id, "required"),
                excluded=_string_tuple(entry.get("excluded", []), vendor_id, "excluded"),
                two_sided=two_sided,
                noise_tokens=_string_tuple(entry.get("noise_tokens", []), vendor_id, "noise_tokens"),
                header_skip=None if header_skip is None else _parse_header_skip(header_skip, vendor_id),
            )
        )
    return tuple(signatures)


def _parse_label_rules(raw: Any, vendor_id: str) -> tuple[LabelRule, ...]:
    if not isinstance(raw, list):
        raise ProfileConfigError("Vendor 'label_rules' must be a list.", vendor_id=vendor_id)

    rules: list[LabelRule] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, Mapping):
            raise ProfileConfigError(
                "Each label rule must be a mapping.",
                vendor_id=vendor_id,
                details={"index": index},
            )
        output = entry.get("output")
        if not isinstance(output, str) or not output.strip():
            raise ProfileConfigError(
                "Label rule must define a non-empty string 'output'.",
                vendor_id=vendor_id,
                details={"index": index},
            )
        rules.append(
            LabelRule(
                tokens=_string_tuple(entry.get("tokens", []), vendor_id, "tokens"),
                output=output,
                categories=frozenset(_string_tuple(entry.get("categories", []), vendor_id, "categories")),
            )
        )
    return tuple(rules)


def _parse_header_skip(value: Any, vendor_id: str) -> HeaderSkipStrategy:
    try:
        return HeaderSkipStrategy(str(value).lower())
    except ValueError:
        raise ProfileConfigError(
            "Unsupported header skip strategy.",
            vendor_id=vendor_id,
            details={"value": value, "allowed": [item.value for item in HeaderSkipStrategy]},
        ) from None


def _string_tuple(value: Any, vendor_id: str, key: str) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ProfileConfigError(
            f"'{key}' must be a string or list of strings.",
            vendor_id=vendor_id,
        )
    return tuple(value)


def _validate_profile(profile: VendorProfile) -> None:
    tags = [signature.tag for signature in profile.categories]
    if len(set(tags)) != len(tags):
        raise ProfileConfigError(
            "Duplicate category tags are not allowed.",
            vendor_id=profile.vendor_id,
            details={"tags": tags},
        )
    if profile.primary_category is not None and profile.primary_category not in tags:
        raise ProfileConfigError(
            "Primary category must name one of the vendor's categories.",
            vendor_id=profile.vendor_id,
            details={"primary_category": profile.primary_category},
        )
    known = set(tags)
    for rule in profile.label_rules:
        unknown = rule.categories - known
        if unknown:
            raise ProfileConfigError(
                "Label rule is scoped to unknown categories.",
                vendor_id=profile.vendor_id,
                details={"categories": sorted(unknown)},
            )


__all__ = ["get_profile", "load_vendor_profiles", "profiles_from_mapping"]
