from __future__ import annotations

from typing import Literal, TypeAlias

from .die import RandomSource, default_rng
from .errors import NameGeneratorError


Gender: TypeAlias = Literal["male", "female"]

GENDERS: tuple[Gender, ...] = ("male", "female")

# race -> gender -> (prefixes, suffixes)
_FIRST_FRAGMENTS: dict[str, dict[str, tuple[tuple[str, ...], tuple[str, ...]]]] = {
    "human": {
        "male": (
            ("al", "bran", "cor", "ed", "gar", "hal", "jor", "mar", "ros", "wil"),
            ("ric", "don", "win", "mund", "ett", "vin", "an", "ek", "ard", "em"),
        ),
        "female": (
            ("an", "bel", "cat", "el", "ger", "is", "lil", "mar", "ros", "syl"),
            ("a", "wyn", "ine", "ara", "ith", "ora", "ette", "ia", "elle", "anne"),
        ),
    },
    "dwarf": {
        "male": (
            ("bal", "bru", "dain", "dor", "gim", "har", "kil", "mor", "thor", "vond"),
            ("din", "nor", "grim", "li", "bek", "rak", "dal", "gar", "in", "ur"),
        ),
        "female": (
            ("am", "bar", "dag", "eld", "gun", "hel", "kath", "mar", "ris", "tor"),
            ("ber", "dis", "ra", "hild", "ja", "wynn", "bera", "na", "gwyn", "vi"),
        ),
    },
    "elf": {
        "male": (
            ("ad", "aer", "bei", "ero", "gal", "hei", "ivel", "lau", "rie", "thia"),
            ("ran", "dan", "lin", "vain", "riel", "ian", "ion", "las", "ndil", "thir"),
        ),
        "female": (
            ("ad", "bir", "cae", "dre", "eny", "jel", "kei", "lia", "mial", "naiv"),
            ("rie", "el", "lynn", "a", "ra", "enna", "lith", "ara", "ee", "wyn"),
        ),
    },
}

# race -> (prefixes, suffixes)
_LAST_FRAGMENTS: dict[str, tuple[tuple[str, ...], tuple[str, ...]]] = {
    "human": (
        ("ash", "black", "brook", "dun", "fair", "green", "hill", "stone", "thorn", "wood"),
        ("ford", "wood", "well", "by", "ton", "ley", "field", "more", "wick", "hurst"),
    ),
    "dwarf": (
        ("battle", "brawn", "fire", "frost", "gold", "iron", "rock", "stone", "strake", "tor"),
        ("hammer", "anvil", "beard", "forge", "fist", "helm", "delver", "shield", "mantle", "axe"),
    ),
    "elf": (
        ("ama", "gala", "holi", "ilia", "lia", "meli", "nai", "sian", "xilo", "ytha"),
        ("kiir", "nodel", "mion", "phant", "drel", "amne", "lo", "lyn", "scent", "thil"),
    ),
}


class NameGenerator:
    """Builds fantasy names by joining random fragments for a race."""

    def __init__(
        self,
        race: str = "dwarf",
        gender: str | None = None,
        rng: RandomSource | None = None,
    ) -> None:
        race = race.strip().lower()
        if race not in _FIRST_FRAGMENTS:
            raise NameGeneratorError(
                f"Unknown race '{race}'. Supported: {', '.join(sorted(_FIRST_FRAGMENTS))}."
            )
        if gender is not None:
            gender = gender.strip().lower()
            if gender not in GENDERS:
                raise NameGeneratorError(f"Unknown gender '{gender}'. Supported: {', '.join(GENDERS)}.")

        self.race = race
        self.gender = gender
        self._rng = rng if rng is not None else default_rng()

    def _pick(self, options: tuple[str, ...]) -> str:
        return options[self._rng.randint(0, len(options) - 1)]

    def make_first(self) -> str:
        gender = self.gender if self.gender is not None else self._pick(GENDERS)
        prefixes, suffixes = _FIRST_FRAGMENTS[self.race][gender]
        return (self._pick(prefixes) + self._pick(suffixes)).capitalize()

    def make_last(self) -> str:
        prefixes, suffixes = _LAST_FRAGMENTS[self.race]
        return (self._pick(prefixes) + self._pick(suffixes)).capitalize()

    def make_name(self) -> str:
        return f"{self.make_first()} {self.make_last()}"
