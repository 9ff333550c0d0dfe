from __future__ import annotations

from typing import Dict

from cubesolver.formula import FormulaConverter
from cubesolver.models import AlgorithmGroup, AlgorithmPreset
from cubesolver.moves import MoveNotation


# Formulas are written for a cube held with the last layer on top.
PRESET_LIST = [
    AlgorithmPreset(
        name="Sexy",
        formula="R U R' U'",
        group=AlgorithmGroup.F2L,
        aliases=("SexyMove",),
    ),
    AlgorithmPreset(
        name="CornerExtract",
        formula="R U R'",
        group=AlgorithmGroup.F2L,
    ),
    AlgorithmPreset(
        name="RightInsert",
        formula="U R U' R' U' F' U F",
        group=AlgorithmGroup.F2L,
    ),
    AlgorithmPreset(
        name="LeftInsert",
        formula="U' L' U L U F U' F'",
        group=AlgorithmGroup.F2L,
    ),
    AlgorithmPreset(
        name="YellowCross",
        formula="F R U R' U' F'",
        group=AlgorithmGroup.OLL,
        aliases=("EdgeFlip",),
    ),
    AlgorithmPreset(
        name="YellowCrossAlt",
        formula="F U R U' R' F'",
        group=AlgorithmGroup.OLL,
    ),
    AlgorithmPreset(
        name="Sune",
        formula="R U R' U R U2 R'",
        group=AlgorithmGroup.OLL,
    ),
    AlgorithmPreset(
        name="CornerTwist",
        formula="R' D' R D",
        group=AlgorithmGroup.OLL,
    ),
    AlgorithmPreset(
        name="Aa",
        formula="R' F R' B2 R F' R' B2 R2",
        group=AlgorithmGroup.PLL,
        aliases=("Aperm",),
    ),
    AlgorithmPreset(
        name="Ab",
        formula="R2 B2 R F R' B2 R F' R",
        group=AlgorithmGroup.PLL,
    ),
    AlgorithmPreset(
        name="Ua",
        formula="R U' R U R U R U' R' U' R2",
        group=AlgorithmGroup.PLL,
    ),
    AlgorithmPreset(
        name="Ub",
        formula="R2 U R U R' U' R' U' R' U R'",
        group=AlgorithmGroup.PLL,
    ),
    AlgorithmPreset(
        name="Superflip",
        formula="U R2 F B R B2 R U2 L B2 R U' D' R2 F R' L B2 U2 F2",
        group=AlgorithmGroup.NO_GROUP,
    ),
]


def _normalized_key(name: str) -> str:
    return name.strip().lower()


def _build_registry() -> Dict[str, AlgorithmPreset]:
    registry: Dict[str, AlgorithmPreset] = {}
    for preset in PRESET_LIST:
        keys = [preset.name, *preset.aliases]
        for raw_key in keys:
            key = _normalized_key(raw_key)
            if key in registry:
                raise ValueError(f"Duplicate preset key detected: {raw_key}")
            registry[key] = preset
    return registry


PRESET_REGISTRY = _build_registry()


def get_preset(name: str) -> AlgorithmPreset:
    key = _normalized_key(name)
    if key not in PRESET_REGISTRY:
        available = ", ".join(sorted({preset.name for preset in PRESET_REGISTRY.values()}))
        raise KeyError(f"Unknown preset: {name}. Available presets: {available}")
    return PRESET_REGISTRY[key]


def list_preset_names() -> list[str]:
    return sorted({preset.name for preset in PRESET_REGISTRY.values()})


def preset_moves(name: str) -> list[MoveNotation]:
    preset = get_preset(name)
    return FormulaConverter.convert(preset.formula)
