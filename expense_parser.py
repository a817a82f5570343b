# expense_parser.py
import logging
import re
from dataclasses import dataclass

from errors import MalformedLine

logger = logging.getLogger(__name__)

# ---------------- FORMAT ----------------
DELIMITER = "/"
ALLOWED_FIELD_COUNTS = (4, 5)
THOUSANDS_SEPARATORS = re.compile(r"[.,]")
DIGITS_ONLY = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class ExpenseRecord:
    category: str
    description: str
    amount: int
    method: str
    note: str = ""


@dataclass(frozen=True)
class ParsedLine:
    """Raw fields of one line, before the amount is normalized."""
    category: str
    description: str
    amount_raw: str
    method: str
    note: str = ""

    def to_record(self) -> ExpenseRecord:
        return ExpenseRecord(
            category=self.category,
            description=self.description,
            amount=normalize_amount(self.amount_raw),
            method=self.method,
            note=self.note,
        )


# ---------------- LINES ----------------
def split_lines(text):
    """Split a chat message into trimmed, non-empty lines."""
    if not text:
        return []
    return [line.strip() for line in text.split("\n") if line.strip()]


def parse_line(line: str, position: int, delimiter: str = DELIMITER) -> ParsedLine:
    """
    Split one line into Kategori/Deskripsi/Jumlah/Metode[/Catatan].
    `position` is the 1-based index of the line inside its batch.
    """
    parts = line.split(delimiter)
    if len(parts) not in ALLOWED_FIELD_COUNTS:
        raise MalformedLine(line, position)

    category, description, amount_raw, method = parts[:4]
    note = parts[4] if len(parts) == 5 else ""
    return ParsedLine(category, description, amount_raw, method, note)


# ---------------- AMOUNT ----------------
def normalize_amount(raw: str) -> int:
    """
    Drop thousands separators ("." and ",") and read the rest as an integer.
    Anything that is not plain digits afterwards counts as 0.
    """
    cleaned = THOUSANDS_SEPARATORS.sub("", (raw or "").strip())
    if DIGITS_ONLY.fullmatch(cleaned):
        return int(cleaned, 10)

    logger.warning("⚠️ Amount %r is not a number, recording it as 0", raw)
    return 0
