"""Installed font discovery through fontconfig."""

import logging
import re
import subprocess
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path

from postergen.types import FontStyle, Weight

logger = logging.getLogger(__name__)

# One record per face: families, weight, slant, face index, file path
FC_LIST_FORMAT = "%{family}\t%{weight}\t%{slant}\t%{index}\t%{file}\n"

# fontconfig weight values
FC_WEIGHTS: dict[Weight, int] = {
    "light": 50,
    "normal": 80,
    "bold": 200,
}

FC_SLANT_ROMAN = 0
FC_SLANT_ITALIC = 100

_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")


@dataclass(frozen=True)
class InstalledFont:
    """A single installed font face."""

    family: str
    weight: int
    slant: int
    path: Path
    index: int = 0

    @property
    def is_italic(self) -> bool:
        return self.slant != FC_SLANT_ROMAN


def _first_number(value: str, default: int) -> int:
    # Variable fonts report ranges such as "[40 210]"
    match = _NUMBER.search(value)
    return int(float(match.group())) if match else default


def parse_fc_list(output: str) -> list[InstalledFont]:
    """
    Parse `fc-list` output produced with FC_LIST_FORMAT.

    A face that lists several family names (localized or aliased) yields one
    entry per name so each of them can be selected.

    Args:
        output: Raw stdout from fc-list.

    Returns:
        List of InstalledFont entries in output order.
    """
    fonts: list[InstalledFont] = []
    for raw in output.splitlines():
        parts = raw.split("\t")
        if len(parts) != 5:
            continue
        families, weight, slant, index, file = parts
        if not file.strip():
            continue
        for family in families.replace("\\,", "\0").split(","):
            family = family.replace("\0", ",").strip()
            if not family:
                continue
            fonts.append(
                InstalledFont(
                    family=family,
                    weight=_first_number(weight, FC_WEIGHTS["normal"]),
                    slant=_first_number(slant, FC_SLANT_ROMAN),
                    path=Path(file.strip()),
                    index=_first_number(index, 0),
                )
            )
    return fonts


class SystemFontCatalog:
    """Queryable view of the host's installed fonts."""

    def __init__(self, command: str = "fc-list") -> None:
        self.command = command

    @cached_property
    def fonts(self) -> list[InstalledFont]:
        """All installed faces, loaded once on first access."""
        try:
            proc = subprocess.run(
                [self.command, f"--format={FC_LIST_FORMAT}"],
                check=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
            )
        except (OSError, subprocess.CalledProcessError) as e:
            logger.warning(f"Font enumeration with {self.command} failed: {e}")
            return []

        fonts = parse_fc_list(proc.stdout)
        logger.debug(f"Discovered {len(fonts)} installed font faces")
        return fonts

    def all_families(self) -> list[str]:
        """
        List installed family names.

        Returns:
            Sorted, de-duplicated family names.
        """
        return sorted({font.family for font in self.fonts}, key=str.casefold)

    def select_best_match(
        self, family: str, weight: Weight, style: FontStyle
    ) -> InstalledFont | None:
        """
        Pick the installed face closest to the requested variant.

        The family must match exactly (case-insensitive). Among its faces, an
        upright/italic mismatch ranks below any weight difference.

        Args:
            family: Family name.
            weight: Requested weight.
            style: Requested style.

        Returns:
            Best matching face, or None if the family is not installed.
        """
        wanted = family.strip().casefold()
        candidates = [font for font in self.fonts if font.family.casefold() == wanted]
        if not candidates:
            return None

        target_weight = FC_WEIGHTS[weight]
        want_italic = style == "italic"

        def score(font: InstalledFont) -> tuple[int, int, str, int]:
            slant_penalty = 0 if font.is_italic == want_italic else 1
            return (slant_penalty, abs(font.weight - target_weight), str(font.path), font.index)

        return min(candidates, key=score)
