"""Turn questionnaire answers into the requirements text and category scope."""

from typing import Any, Dict, List, Mapping, Tuple

from av_boq.core.errors import EmptyRequirementsError

# Subsystem tag -> equipment categories the model may emit for it
SYSTEM_CATEGORIES: Dict[str, List[str]] = {
    "display": ["Display"],
    "video_conferencing": ["Video Conferencing & Cameras"],
    "audio": ["Audio - Microphones", "Audio - DSP & Amplification", "Audio - Speakers"],
    "connectivity_control": ["Video Distribution & Switching", "Control System & Environmental"],
    "infrastructure": ["Cabling & Infrastructure", "Mounts & Racks"],
    "acoustics": ["Acoustic Treatment"],
}
ALL_SYSTEMS: List[str] = list(SYSTEM_CATEGORIES)
CATCH_ALL_CATEGORY = "Accessories & Services"


def _format_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value)
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _is_filled(value: Any) -> bool:
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return bool(value)


def requirements_text(answers: Mapping[str, Any]) -> str:
    """``key: value`` for every non-empty answer, in input order, joined by ``; ``."""
    return "; ".join(
        f"{key}: {_format_value(value)}" for key, value in answers.items() if _is_filled(value)
    )


def allowed_categories(answers: Mapping[str, Any]) -> List[str]:
    systems = answers.get("requiredSystems")
    if isinstance(systems, str):
        systems = [systems]
    if not systems:
        systems = ALL_SYSTEMS

    categories: List[str] = []
    for system in systems:
        for category in SYSTEM_CATEGORIES.get(system, []):
            if category not in categories:
                categories.append(category)
    categories.append(CATCH_ALL_CATEGORY)
    return categories


def encode(answers: Mapping[str, Any]) -> Tuple[str, List[str]]:
    """Encode answers for a generation request.

    Returns:
        (requirements_text, allowed_categories) where categories keep subsystem
        order and always end with the accessories/services catch-all.

    Raises:
        EmptyRequirementsError: no answer carries a usable value
    """
    text = requirements_text(answers)
    if not text:
        raise EmptyRequirementsError()
    return text, allowed_categories(answers)
