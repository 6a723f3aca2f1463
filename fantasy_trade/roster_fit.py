"""
Roster fit evaluation.

Scores (0-100) how well the players a team receives in a trade integrate
with its remaining roster and the league's position slots:

    Positional need   (40): previously unfilled slots that become filled
    Multi-eligibility (20): incoming players eligible at several positions
    Slot coverage     (25): share of required slots filled after the trade
    Bench depth       (15): players left over once every slot is filled

Slot assignment is greedy by default. The greedy pass is not a full
bipartite matching and can leave a slot open that some other assignment
would fill. assign_players_to_slots_exact() solves the assignment as a MILP;
it changes results in those cases and is only used when asked for.
"""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

import pulp
from pulp import LpVariable, lpSum, value

from .config import (
    BENCH_POINTS,
    MULTI_ELIGIBILITY_BONUS,
    MULTI_ELIGIBILITY_POINTS,
    POSITIONAL_NEED_POINTS,
    SLOT_COVERAGE_POINTS,
)
from .models import LeagueSettings, Player, RosterFitResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotAssignment:
    filled: dict[str, tuple[int, ...]]  # slot -> assigned player ids
    unfilled_slots: tuple[str, ...]  # one entry per open slot, in slot order
    bench: tuple[int, ...]

    @property
    def bench_count(self) -> int:
        return len(self.bench)


# === SLOT ELIGIBILITY ===


def slot_accepts(
    slot: str, position: str, slot_eligibility: Mapping[str, Iterable[str]]
) -> bool:
    """A slot accepts its configured positions, or only its own tag when unconfigured."""
    return position in slot_eligibility.get(slot, (slot,))


def eligible_slots(
    player: Player,
    position_slots: Mapping[str, int],
    slot_eligibility: Mapping[str, Iterable[str]],
) -> list[str]:
    """Slots (in slot order) that accept at least one of the player's positions."""
    return [
        slot
        for slot in position_slots
        if any(slot_accepts(slot, pos, slot_eligibility) for pos in player.positions)
    ]


def _unfilled(remaining: Mapping[str, int]) -> tuple[str, ...]:
    return tuple(slot for slot, count in remaining.items() for _ in range(count))


# === ASSIGNMENT ===


def assign_players_to_slots(
    roster: Sequence[Player],
    position_slots: Mapping[str, int],
    slot_eligibility: Mapping[str, Iterable[str]],
) -> SlotAssignment:
    """
    Greedily assign players to position slots.

    Players with the fewest eligible slots go first. Each takes the eligible
    open slot with the least remaining capacity (ties by slot order).
    Players that fit no open slot are bench.
    """
    remaining = {slot: count for slot, count in position_slots.items() if count > 0}
    filled: dict[str, list[int]] = {}
    bench = []

    options = {p.id: eligible_slots(p, remaining, slot_eligibility) for p in roster}
    ordered = sorted(roster, key=lambda p: len(options[p.id]))

    for player in ordered:
        open_slots = [s for s in options[player.id] if remaining[s] > 0]
        if not open_slots:
            bench.append(player.id)
            continue
        slot = min(open_slots, key=lambda s: remaining[s])
        remaining[slot] -= 1
        filled.setdefault(slot, []).append(player.id)

    return SlotAssignment(
        filled={slot: tuple(ids) for slot, ids in filled.items()},
        unfilled_slots=_unfilled(remaining),
        bench=tuple(bench),
    )


def _solver():
    available_solvers = pulp.listSolvers(onlyAvailable=True)
    if "HiGHS_CMD" in available_solvers:
        return pulp.HiGHS_CMD(msg=False)
    if "PULP_CBC_CMD" in available_solvers:
        return pulp.PULP_CBC_CMD(msg=False)
    return None


def assign_players_to_slots_exact(
    roster: Sequence[Player],
    position_slots: Mapping[str, int],
    slot_eligibility: Mapping[str, Iterable[str]],
) -> SlotAssignment:
    """
    Assign players to slots so that the number of filled slots is maximal.

    Solved as a MILP:
        a[i,s] = 1 if player i is assigned to slot s (eligible pairs only)
        maximize   sum a[i,s]
        subject to sum_s a[i,s] <= 1        (each player in one slot)
                   sum_i a[i,s] <= count[s] (slot capacity)
    """
    remaining = {slot: count for slot, count in position_slots.items() if count > 0}

    eligible_pairs = [
        (i, s)
        for i, player in enumerate(roster)
        for s in eligible_slots(player, remaining, slot_eligibility)
    ]
    if not eligible_pairs:
        return SlotAssignment(
            filled={},
            unfilled_slots=_unfilled(remaining),
            bench=tuple(p.id for p in roster),
        )

    slot_index = {s: k for k, s in enumerate(remaining)}

    prob = pulp.LpProblem("SlotAssignment", pulp.LpMaximize)
    a = {
        (i, s): LpVariable(f"a_{i}_{slot_index[s]}", cat="Binary")
        for i, s in eligible_pairs
    }

    prob += lpSum(a.values()), "FilledSlots"

    for i in range(len(roster)):
        slots_for_i = [a[pi, s] for (pi, s) in eligible_pairs if pi == i]
        if slots_for_i:
            prob += lpSum(slots_for_i) <= 1, f"OneSlotPerPlayer_{i}"

    for slot, count in remaining.items():
        players_for_slot = [a[i, s] for (i, s) in eligible_pairs if s == slot]
        if players_for_slot:
            prob += lpSum(players_for_slot) <= count, f"SlotCapacity_{slot_index[slot]}"

    status = prob.solve(_solver())
    assert status == pulp.LpStatusOptimal, (
        f"Slot assignment solver failed: {pulp.LpStatus[status]}"
    )

    filled: dict[str, list[int]] = {}
    assigned = set()
    for (i, s), var in a.items():
        if value(var) is not None and value(var) > 0.5:
            filled.setdefault(s, []).append(roster[i].id)
            remaining[s] -= 1
            assigned.add(i)

    return SlotAssignment(
        filled={slot: tuple(ids) for slot, ids in filled.items()},
        unfilled_slots=_unfilled(remaining),
        bench=tuple(p.id for i, p in enumerate(roster) if i not in assigned),
    )


# === SCORING ===


def _multiset_difference(a: Sequence[str], b: Sequence[str]) -> list[str]:
    """Entries of `a` not matched one-for-one by entries of `b`."""
    pool = list(b)
    result = []
    for item in a:
        if item in pool:
            pool.remove(item)
        else:
            result.append(item)
    return result


def multi_eligibility_points(player: Player) -> float:
    """Bonus for the largest configured position count the player reaches."""
    n_positions = len(set(player.positions))
    earned = [bonus for count, bonus in MULTI_ELIGIBILITY_BONUS.items() if n_positions >= count]
    return max(earned, default=0)


def evaluate_roster_fit(
    current_roster: Sequence[Player],
    players_in: Sequence[Player],
    players_out: Sequence[Player],
    settings: LeagueSettings,
    exact: bool = False,
) -> RosterFitResult:
    """
    Evaluate how well incoming trade players fit a team's roster.

    Args:
        current_roster: The team's roster before the trade
        players_in: Players the team receives
        players_out: Players the team gives up
        settings: Supplies position_slots, slot_eligibility and bench_slots
        exact: Use the MILP slot assignment instead of the greedy one

    Returns:
        RosterFitResult with the 0-100 score, component scores and notes.
    """
    position_slots = settings.position_slots
    assign = assign_players_to_slots_exact if exact else assign_players_to_slots
    notes = []

    out_ids = {p.id for p in players_out}
    post_trade_roster = [p for p in current_roster if p.id not in out_ids] + list(players_in)

    before = assign(current_roster, position_slots, settings.slot_eligibility)
    after = assign(post_trade_roster, position_slots, settings.slot_eligibility)

    # 1. Positional need
    positions_filled = _multiset_difference(before.unfilled_slots, after.unfilled_slots)
    positions_lost = _multiset_difference(after.unfilled_slots, before.unfilled_slots)

    total_slots = sum(count for count in position_slots.values() if count > 0)
    if total_slots == 0:
        positional_need = POSITIONAL_NEED_POINTS / 2
    elif not before.unfilled_slots:
        positional_need = POSITIONAL_NEED_POINTS
    else:
        positional_need = min(
            POSITIONAL_NEED_POINTS,
            len(positions_filled) / len(before.unfilled_slots) * POSITIONAL_NEED_POINTS,
        )

    if positions_filled:
        notes.append(f"Fills positional need: {', '.join(positions_filled)}")
    if positions_lost:
        notes.append(f"Loses coverage at: {', '.join(positions_lost)}")

    # 2. Multi-eligibility
    multi_bonus = min(
        MULTI_ELIGIBILITY_POINTS, sum(multi_eligibility_points(p) for p in players_in)
    )
    if multi_bonus >= MULTI_ELIGIBILITY_POINTS / 2:
        notes.append("Strong multi-position eligibility in incoming players")

    # 3. Slot coverage
    if total_slots > 0:
        covered = total_slots - len(after.unfilled_slots)
        slot_coverage = covered / total_slots * SLOT_COVERAGE_POINTS
    else:
        slot_coverage = SLOT_COVERAGE_POINTS / 2

    if after.unfilled_slots:
        notes.append(f"Unfilled slots after trade: {', '.join(after.unfilled_slots)}")
    else:
        notes.append("All required position slots are filled after trade")

    # 4. Bench depth
    bench_target = settings.bench_slots
    if after.bench_count >= bench_target:
        bench = BENCH_POINTS
    elif after.bench_count > 0:
        bench = after.bench_count / bench_target * BENCH_POINTS
    else:
        bench = 0.0
        notes.append("WARNING: No bench depth after trade")

    raw_score = positional_need + multi_bonus + slot_coverage + bench
    score = int(round(min(100, max(0, raw_score))))

    logger.debug(
        "Roster fit %d (need %.1f, multi %.1f, coverage %.1f, bench %.1f)",
        score,
        positional_need,
        multi_bonus,
        slot_coverage,
        bench,
    )

    return RosterFitResult(
        score=score,
        positions_filled=tuple(positions_filled),
        positions_lost=tuple(positions_lost),
        multi_eligibility_bonus=multi_bonus,
        unfilled_slots=after.unfilled_slots,
        notes=tuple(notes),
        positional_need_score=positional_need,
        slot_coverage_score=slot_coverage,
        bench_score=bench,
    )
