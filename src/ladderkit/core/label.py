"""
Allele label kernel: parsing STR allele designations.

An allele label such as "9.3" names 9 complete repeat units plus a 3 base
partial repeat (the microvariant). Labels without a separator ("12") are
pure repeat counts.
"""

from pydantic import BaseModel, ConfigDict

from ..exceptions import MalformedLabelError

SEPARATOR = "."


def _parse_int(text: str, label: str) -> int:
    try:
        return int(text)
    except ValueError as e:
        raise MalformedLabelError(label, f"{text!r} is not an integer") from e


class AlleleLabel(BaseModel):
    """
    Structured (repeats, micro_variant) form of an allele label.
    """
    model_config = ConfigDict(frozen=True)

    repeats: int
    micro_variant: int = 0

    @classmethod
    def parse(cls, label: str) -> "AlleleLabel":
        """
        Parse a label string.

        Args:
            label: Allele designation, e.g. "12", "9.3" or "22."

        Returns:
            AlleleLabel with micro_variant 0 when no digits follow the separator.

        Raises:
            MalformedLabelError: If either numeric part fails to parse.
        """
        text = label.strip()
        if text.count(SEPARATOR) > 1:
            raise MalformedLabelError(label, "more than one separator")

        position = text.find(SEPARATOR)
        if position < 0:
            return cls(repeats=_parse_int(text, label))

        repeats = _parse_int(text[:position], label)
        variant = text[position + 1:]
        micro_variant = _parse_int(variant, label) if variant else 0
        return cls(repeats=repeats, micro_variant=micro_variant)

    def bp_difference_from(self, other: "AlleleLabel", core_repeat: int) -> int:
        """
        Signed BP offset of this allele relative to ``other``.

        ``other`` is expected to be the lower (reference) allele; no ordering
        check is made, so the result is negative when it is not.
        """
        return core_repeat * (self.repeats - other.repeats) + (
            self.micro_variant - other.micro_variant
        )

    def __str__(self) -> str:
        if self.micro_variant:
            return f"{self.repeats}{SEPARATOR}{self.micro_variant}"
        return str(self.repeats)
