# reply_composer.py
"""
Turns the per-line outcomes of one batch into chat replies.

compose_replies() returns the bodies in the order they must be sent:
error block, example block, success block. Any of them may be absent.
"""
from dataclasses import dataclass
from typing import Union

from errors import MalformedLine, RemoteRejected
from expense_parser import ExpenseRecord

# ---------------- FIXED TEXT ----------------
USAGE_FORMAT = "Kategori/Deskripsi/Jumlah/Metode/Catatan (Opsional)"

EXAMPLE_LINES = (
    "Food/Nasi Goreng/50000/Cash/makan pagi",
    "Transport/Gojek/35,000/Gopay",
    "Entertainment/Netflix/75.000/Bca/bulanan",
)


# ---------------- OUTCOMES ----------------
@dataclass(frozen=True)
class Success:
    index: int
    record: ExpenseRecord

    @property
    def method(self):
        return self.record.method

    @property
    def amount(self):
        return self.record.amount


@dataclass(frozen=True)
class Failure:
    index: int
    raw_line: str
    error: Exception


LineOutcome = Union[Success, Failure]


# ---------------- FORMATTING ----------------
def format_rupiah(amount: int) -> str:
    """Group thousands the Indonesian way: 1250000 -> 1.250.000"""
    return f"{amount:,}".replace(",", ".")


def format_success(outcome: Success) -> str:
    rec = outcome.record
    line = (
        f"{outcome.index}. {rec.category} - {rec.description} ({rec.method})"
        f": Rp {format_rupiah(rec.amount)}"
    )
    if rec.note:
        line += f" 📝 {rec.note}"
    return line


def format_failure(outcome: Failure) -> str:
    err = outcome.error
    if isinstance(err, MalformedLine):
        return f'❌ Baris {outcome.index}: "{outcome.raw_line}"'
    if isinstance(err, RemoteRejected):
        return f"⚠️ Baris {outcome.index} gagal simpan: {err.reason}"
    return f"⚠️ Baris {outcome.index} error: {err}"


def example_message() -> str:
    return "\n" + "\n".join(EXAMPLE_LINES)


def error_message(failures) -> str:
    return (
        "⚠️ Beberapa baris salah atau gagal diproses:\n\n"
        + "\n".join(format_failure(f) for f in failures)
        + f"\n\nGunakan format:\n{USAGE_FORMAT}"
        + "\n\nContoh format input ⬇️:\n"
    )


def success_message(successes, now) -> str:
    date = now.strftime("%Y-%m-%d")
    time = now.strftime("%H:%M:%S")
    return (
        f"✅ Data berhasil disimpan!\n📅 {date} ⏰ {time}\n\n"
        + "\n".join(format_success(s) for s in successes)
    )


def help_message() -> str:
    """Shown for /start and /help."""
    return (
        "👋 Kirim pengeluaran, satu baris per transaksi.\n\n"
        f"Gunakan format:\n{USAGE_FORMAT}\n\n"
        "Contoh format input ⬇️:\n"
        + "\n".join(EXAMPLE_LINES)
    )


# ---------------- MAIN ENTRY ----------------
def compose_reply_groups(outcomes, now):
    """
    Return the replies for one batch as independent groups, in send order.
    Bodies inside a group depend on each other (the example follows the
    error block); the groups themselves do not.
    """
    failures = sorted((o for o in outcomes if isinstance(o, Failure)), key=lambda o: o.index)
    successes = sorted((o for o in outcomes if isinstance(o, Success)), key=lambda o: o.index)

    groups = []
    if failures:
        groups.append([error_message(failures), example_message()])
    if successes:
        groups.append([success_message(successes, now)])
    return groups


def compose_replies(outcomes, now):
    """Return the list of message bodies for one batch, in send order."""
    return [body for group in compose_reply_groups(outcomes, now) for body in group]
