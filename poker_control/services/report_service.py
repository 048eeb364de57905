"""Plain-text results report, the shareable summary of a finished table."""

from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path

from poker_control.domain import (
    HOUSE_FEE_FIXED,
    AuditStatus,
    GameState,
    compute_chip_audit,
    compute_ranking,
    compute_settlement_totals,
    compute_totals,
)
from poker_control.utils.logger import get_logger

logger = get_logger(__name__)

CURRENCY_SYMBOL = "R$"


class ExportFailure(RuntimeError):
    """Raised when the report cannot be written. Game state is unaffected."""


def format_currency(value: Decimal) -> str:
    """Format money the pt-BR way: ``R$ 1.234,56``."""
    amount = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    text = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{CURRENCY_SYMBOL} {text}"


def format_percent(ratio: Decimal | None) -> str:
    if ratio is None or not ratio.is_finite():
        return "---"
    percent = (ratio * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{percent:,.1f}%".replace(",", "_").replace(".", ",").replace("_", ".")


def render_report(state: GameState) -> str:
    totals = compute_totals(state)
    settlement = compute_settlement_totals(state)
    audit = compute_chip_audit(state)
    ranking = compute_ranking(state)

    lines = [
        "POKER CONTROL - RESULTADO",
        f"Buy-in: {format_currency(state.config.buy_in_amount)} | Taxa casa: {format_currency(HOUSE_FEE_FIXED)}",
        "",
    ]

    if audit.status is AuditStatus.BALANCED:
        lines.append("Conferencia OK")
    elif audit.status is AuditStatus.CHIPS_MISSING:
        lines.append(f"Atencao: faltam {format_currency(audit.chips_difference)}")
    else:
        lines.append(f"Atencao: fichas a mais {format_currency(-audit.chips_difference)}")
    lines.append(f"Total fichas: {format_currency(audit.total_chips)}")
    lines.append(f"Total cashout: {format_currency(audit.total_cashout_declared)}")
    lines.append("")

    header = f"{'#':>2} | {'Jogador':<14} | {'Investido':>12} | {'Saida':>12} | {'Taxa (10%)':>12} | {'Liquido':>12} | {'Perf.':>8} | {'Pts':>3}"
    lines.append(header)
    lines.append("-" * len(header))
    for entry in ranking:
        lines.append(
            f"{entry.position:>2} | {entry.name[:14]:<14} | {format_currency(entry.invested_chips):>12} | "
            f"{format_currency(entry.out):>12} | {format_currency(entry.ranking_fee):>12} | "
            f"{format_currency(entry.net):>12} | {format_percent(entry.performance_ratio):>8} | {entry.points:>3}"
        )
    if not ranking:
        lines.append("Nenhum jogador registrado.")

    lines.extend(
        [
            "",
            f"Taxas casa (buy-in): {format_currency(totals.total_fees)}",
            f"Taxa da casa (10%): {format_currency(settlement.house_cut)}",
            f"Liquido geral: {format_currency(settlement.net_payout_pool)}",
        ]
    )
    return "\n".join(lines) + "\n"


def report_filename(day: date) -> str:
    return f"poker-result-{day.isoformat()}.txt"


def export_report(state: GameState, directory: str | Path, day: date | None = None) -> Path:
    """Write the report into ``directory`` and return the file path."""
    target = Path(directory) / report_filename(day or date.today())
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(render_report(state), encoding="utf-8")
    except OSError as exc:
        logger.error("Report export to %s failed: %s", target, exc)
        raise ExportFailure(f"could not write report to {target}") from exc

    logger.info("Exported report to %s", target)
    return target
