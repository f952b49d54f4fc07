"""Prompt assembly shared by generation, refinement and validation."""

import json
from typing import Any, Dict, List, Mapping, Optional

from av_boq.core.schemas import BoqItem

# Answer key -> fallback directive when the client named no brand for it
BRAND_PREFERENCE_KEYS: Dict[str, tuple] = {
    "mounts": ("mountBrands", "Use Professional defaults (e.g., Chief, Peerless-AV, B-Tech)"),
    "racks": ("rackBrands", "Use Professional defaults (e.g., Middle Atlantic, Valrack)"),
    "displays": ("displayBrands", "Use Professional defaults (e.g., Samsung, LG, Sony)"),
    "audio": ("audioBrands", "Use Professional defaults (e.g., Shure, QSC, Biamp)"),
    "vc": ("vcBrands", "Use Professional defaults"),
    "connectivity": ("connectivityBrands", "Use Professional defaults"),
    "control": ("controlBrands", "Use Professional defaults"),
}


def brand_preferences(answers: Mapping[str, Any]) -> Dict[str, str]:
    prefs = {}
    for slot, (answer_key, fallback) in BRAND_PREFERENCE_KEYS.items():
        value = answers.get(answer_key)
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(v) for v in value)
        prefs[slot] = value if isinstance(value, str) and value else fallback
    return prefs


def serialize_boq(boq: List[BoqItem]) -> str:
    return json.dumps([item.to_wire() for item in boq], indent=2, ensure_ascii=False)


def compose(
    prompts: Mapping[str, str],
    body: str,
    cache_handle: Optional[str],
    catalog_text: Optional[str] = None,
) -> str:
    """Final user turn: the body alone on a cache hit, otherwise preamble (+ catalog) + body."""
    if cache_handle:
        return body
    parts = [prompts["fallback_preamble"]]
    if catalog_text is not None:
        parts.append(prompts["fallback_catalog"].format(catalog=catalog_text))
    parts.append(body)
    return "\n".join(parts)


def fallback_system_instruction(prompts: Mapping[str, str], cache_handle: Optional[str]) -> Optional[str]:
    return None if cache_handle else prompts["system"]
