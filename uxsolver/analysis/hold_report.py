"""Ranked hold report for one dealt hand.

Turns the 32 HoldEvaluations of a Recommendation into a table ranked by
ev_with_multiplier, with a normal-approximation confidence interval for every
sampled hold (exact holds get a zero-width interval), and prints it.

Run:
    python -m uxsolver.analysis.hold_report AS KS QS JS 9H --multiplier 4
"""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from scipy import stats

from uxsolver.engine.cards import hand_to_str
from uxsolver.engine.combinatorics import hold_to_mask
from uxsolver.engine.deck import parse_hand
from uxsolver.engine.errors import UxSolverError
from uxsolver.engine.paytables import DEFAULT_PAYTABLE, PAYTABLES
from uxsolver.solvers.advisor import OUTPUT_PRECISION, Recommendation, recommend_hold
from uxsolver.solvers.ev_engine import HoldEvaluation
from uxsolver.solvers.hold_policy import Strategy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HoldRow:
    """One line of the ranked hold table.

    Attributes:
        rank:                  1 = highest ev_with_multiplier.
        mask:                  Hold mask (0–31).
        held_cards:            The kept cards, as ints.
        ev_with_multiplier:    EV including carry-forward value.
        ev_without_multiplier: Base-game EV.
        ci_low:                Lower confidence bound of ev_with_multiplier.
        ci_high:               Upper confidence bound of ev_with_multiplier.
        exact:                 True if the EV was enumerated exactly.
    """

    rank: int
    mask: int
    held_cards: tuple[int, ...]
    ev_with_multiplier: float
    ev_without_multiplier: float
    ci_low: float
    ci_high: float
    exact: bool


def build_hold_table(
    hand: Sequence[int],
    evaluations: Sequence[HoldEvaluation],
    confidence: float = 0.95,
) -> list[HoldRow]:
    """Rank evaluations by ev_with_multiplier (ties by mask) with CIs.

    Args:
        hand:        The dealt hand the evaluations belong to.
        evaluations: HoldEvaluations for that hand.
        confidence:  Two-sided confidence level in (0, 1).

    Returns:
        One HoldRow per evaluation, best first.
    """
    if not 0.0 < confidence < 1.0:
        raise ValueError(f"confidence must be in (0, 1), got {confidence}")
    z = float(stats.norm.ppf((1.0 + confidence) / 2.0))

    ranked = sorted(evaluations, key=lambda e: (-e.ev_with_multiplier, e.mask))
    rows = []
    for rank, ev in enumerate(ranked, start=1):
        margin = z * ev.std_error
        rows.append(
            HoldRow(
                rank=rank,
                mask=ev.mask,
                held_cards=tuple(c for c, keep in zip(hand, ev.hold_mask) if keep),
                ev_with_multiplier=ev.ev_with_multiplier,
                ev_without_multiplier=ev.ev_without_multiplier,
                ci_low=max(0.0, ev.ev_with_multiplier - margin),
                ci_high=ev.ev_with_multiplier + margin,
                exact=ev.exact,
            )
        )
    return rows


def format_hold_report(
    hand: Sequence[int],
    recommendation: Recommendation,
    top: int = 10,
    confidence: float = 0.95,
) -> str:
    """Render the recommendation and its top ``top`` holds as text."""
    rows = build_hold_table(hand, recommendation.evaluations, confidence)
    chosen_mask = hold_to_mask(recommendation.best_hold)
    held = tuple(c for c, keep in zip(hand, recommendation.best_hold) if keep)

    lines = [
        "=" * 72,
        f"Hand: {hand_to_str(tuple(hand))}   Paytable: {recommendation.paytable_key}   "
        f"Multiplier: {recommendation.multiplier:g}x",
        "=" * 72,
        f"  Strategy:              {recommendation.strategy.value}",
        f"  Hold:                  {hand_to_str(held) or '(discard all)'}",
        f"  EV with multiplier:    {recommendation.ev_with_multiplier:.{OUTPUT_PRECISION}f}",
        f"  EV without multiplier: {recommendation.ev_without_multiplier:.{OUTPUT_PRECISION}f}",
        "",
        f"  {'#':>3}  {'Hold':<16}{'EV (mult)':>12}{'EV (base)':>12}  "
        f"{int(confidence * 100)}% CI",
        "  " + "-" * 68,
    ]
    for row in rows[:top]:
        marker = "*" if row.mask == chosen_mask else " "
        interval = "exact" if row.exact else f"[{row.ci_low:.4f}, {row.ci_high:.4f}]"
        lines.append(
            f"{marker} {row.rank:>3}  {hand_to_str(row.held_cards) or '-':<16}"
            f"{row.ev_with_multiplier:>12.4f}{row.ev_without_multiplier:>12.4f}  {interval}"
        )
    return "\n".join(lines)


def print_hold_report(
    hand: Sequence[int],
    recommendation: Recommendation,
    top: int = 10,
    confidence: float = 0.95,
) -> None:
    """Print format_hold_report() to stdout."""
    print(format_hold_report(hand, recommendation, top=top, confidence=confidence))


# ─── CLI ──────────────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m uxsolver.analysis.hold_report",
        description="Recommend a hold for a 5-card hand and rank all 32 holds.",
    )
    parser.add_argument("cards", nargs=5, metavar="CARD", help="Card such as AS, TH, 10d")
    parser.add_argument(
        "--paytable",
        default=DEFAULT_PAYTABLE,
        help=f"Preset key ({', '.join(sorted(PAYTABLES))}); default {DEFAULT_PAYTABLE}",
    )
    parser.add_argument("--full-house", type=int, help="Custom DDB full house pay (with --flush)")
    parser.add_argument("--flush", type=int, help="Custom DDB flush pay (with --full-house)")
    parser.add_argument("--multiplier", type=float, default=1.0)
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in Strategy],
        default=Strategy.CONSERVATIVE.value,
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for sampled draws")
    parser.add_argument("--top", type=int, default=10, help="Holds to list")
    parser.add_argument("--confidence", type=float, default=0.95)
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    paytable: object = args.paytable
    if args.full_house is not None or args.flush is not None:
        paytable = {"family": "DDB", "full_house": args.full_house, "flush": args.flush}

    try:
        hand = parse_hand(args.cards)
        recommendation = recommend_hold(
            hand,
            paytable,  # type: ignore[arg-type]
            multiplier=args.multiplier,
            strategy=args.strategy,
            seed=args.seed,
        )
    except UxSolverError as exc:
        logger.debug("Rejected input %s", args.cards, exc_info=True)
        parser.error(str(exc))

    print_hold_report(hand, recommendation, top=args.top, confidence=args.confidence)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
