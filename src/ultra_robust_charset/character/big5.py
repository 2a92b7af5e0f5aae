"""Big5 to UTF-8 translator.

Big5 characters are two bytes: a lead byte selecting one of 89 "fonts" and a
trail byte selecting one of 157 characters within it. The table resource is
UTF-8 text holding the 89 x 157 code points in order, with U+FFFD marking
unassigned slots. There is no encode direction.
"""

from typing import TYPE_CHECKING, List, Optional

from ultra_robust_charset.shared.errors import ResourceError

from .translator import ASCII_MAX, REPLACEMENT_CHAR, TranslateResult, Translator

if TYPE_CHECKING:
    from ultra_robust_charset.catalog.resources import ResourceCache

CLASS_NAME = "big5"

BIG5_FONTS = 89
BIG5_FONT_SIZE = 157
BIG5_TABLE_SIZE = BIG5_FONTS * BIG5_FONT_SIZE  # 13973

LEAD_MIN = 0xA1
CONTROL_Z = 0x1A

# Trail byte ranges, both inclusive
TRAIL_LOW_MIN = 64
TRAIL_LOW_MAX = 126
TRAIL_HIGH_MIN = 161
TRAIL_HIGH_MAX = 254
TRAIL_HIGH_OFFSET = TRAIL_LOW_MAX - TRAIL_LOW_MIN + 1  # 63


def trail_column(trail: int) -> Optional[int]:
    """Column of ``trail`` within a font, or None if it is not a trail byte."""
    if TRAIL_LOW_MIN <= trail <= TRAIL_LOW_MAX:
        return trail - TRAIL_LOW_MIN
    if TRAIL_HIGH_MIN <= trail <= TRAIL_HIGH_MAX:
        return trail - TRAIL_HIGH_MIN + TRAIL_HIGH_OFFSET
    return None


class Big5Decoder(Translator):
    """Lead/trail byte state machine.

    Idle state: bytes >= 0xA1 become the pending lead byte, 0x1A (Ctrl-Z)
    yields a newline, ASCII passes through and 0x80-0xA0 produce nothing.
    With a lead pending, the next byte completes the pair. Invalid pairs and
    unmapped slots yield U+FFFD, as does a lead byte left at end of stream.
    """

    def __init__(self, table: str) -> None:
        if len(table) != BIG5_TABLE_SIZE:
            raise ResourceError(
                f"big5 table has {len(table)} entries, expected {BIG5_TABLE_SIZE}"
            )
        self.table = table
        self.lead: Optional[int] = None

    def translate(self, data: bytes, final: bool) -> TranslateResult:
        out: List[str] = []
        lead = self.lead
        table = self.table
        for c in data:
            if lead is None:
                if c >= LEAD_MIN:
                    lead = c
                elif c == CONTROL_Z:
                    out.append("\n")
                elif c < ASCII_MAX:
                    out.append(chr(c))
                continue

            column = trail_column(c)
            char = REPLACEMENT_CHAR
            if column is not None:
                index = (lead - LEAD_MIN) * BIG5_FONT_SIZE + column
                if index < BIG5_TABLE_SIZE:
                    char = table[index]
            out.append(char)
            lead = None

        if final and lead is not None:
            out.append(REPLACEMENT_CHAR)
            lead = None
        self.lead = lead
        return len(data), "".join(out).encode("utf-8")


def parse_table(data: bytes, name: str = "<table>") -> str:
    """Decode a Big5 table resource, checking its size."""
    table = data.decode("utf-8", "replace")
    if len(table) != BIG5_TABLE_SIZE:
        raise ResourceError(
            f"corrupt big5 data in {name!r}: {len(table)} entries", name
        )
    return table


def decoder_factory(argument: str, resources: "ResourceCache") -> Big5Decoder:
    """Create a Big5 decoder using the table resource named ``argument``."""
    table = resources.get(
        (CLASS_NAME, "decode", argument),
        lambda: parse_table(resources.read_resource(argument), argument),
    )
    return Big5Decoder(table)