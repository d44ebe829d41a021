"""
waba/engine/enumerator.py
=========================
Backtracking search over in/out assignments and discard choices.

Search tree:
    level 1  assumptions in sorted order, "in" tried before "out"
    level 2  at each complete assignment, attacks on in-assumptions are
             forced discards; the remaining attacks are enumerated
             successful-first, discarded-second

Pruning (all sound, never exclude an acceptable extension):
    conflict  an in-assumption already attacked with a weight that can
              never be discarded within the budget
    budget    the monoid bounds of the partial discard set cannot reach
              the budget any more
    bound     under MINIMIZE / MAXIMIZE, every completion is strictly
              worse than the shared incumbent (local semantics only)

Grounded:
    Searched over tolerated-attack sets instead of assignments. Each set
    yields its in-set directly as the least fixpoint of the "not
    threatened" operator, so the cost grows with the licensable attacks
    and no assignment leaf is visited. This path always runs serially.

Parallelism:
    With ``workers > 1`` the tree is split on the first k assumptions;
    each prefix runs as an independent task with its own support cache
    and result list, merged afterwards in branch order so the output is
    deterministic. Only the cancellation token, the incumbent bound and
    the stop flag are shared.
"""

from __future__ import annotations

import itertools
import logging
import math
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence, Tuple

from waba.algebra.monoid import Monoid
from waba.algebra.semiring import Semiring
from waba.core.config import DEFAULT_CONFIG, WabaConfig
from waba.core.exceptions import BudgetExceeded, SolveCancelled
from waba.core.types import (
    Atom,
    Attack,
    Cost,
    Extension,
    Framework,
    OptimizeDirection,
    SearchStats,
    SolveResult,
    SolveStatus,
    Weight,
)
from waba.engine.attacks import AttackResolver, potential_attacks
from waba.engine.concurrency import CancellationToken, SharedBound
from waba.engine.semantics import Evaluation, Semantics, SemanticsEvaluator
from waba.engine.support import SupportEngine

logger = logging.getLogger(__name__)


@dataclass
class _Branch:
    """State owned by one search task."""
    prefix:  Tuple[bool, ...]
    support: SupportEngine
    items:   List[Tuple[Extension, Evaluation]] = field(default_factory=list)
    stats:   SearchStats = field(default_factory=SearchStats)


class ExtensionEnumerator:
    """Enumerates the extensions of one framework under fixed algebra,
    semantics and budget.

    Usage:
        enumerator = ExtensionEnumerator(fw, semiring, monoid, semantics)
        result = enumerator.run()
    """

    def __init__(
        self,
        framework:   Framework,
        semiring:    Semiring,
        monoid:      Monoid,
        semantics:   Semantics,
        budget:      Optional[Weight] = None,
        optimize:    OptimizeDirection = OptimizeDirection.NONE,
        max_results: int = 0,
        config:      Optional[WabaConfig] = None,
        token:       Optional[CancellationToken] = None,
    ):
        self.framework = framework
        self.semiring = semiring
        self.monoid = monoid
        self.semantics = semantics
        self.budget = budget
        self.optimize = OptimizeDirection(optimize)
        self.max_results = max_results
        self.config = config or DEFAULT_CONFIG
        self.token = token or CancellationToken()

        self.order: Tuple[Atom, ...] = tuple(sorted(framework.assumptions))
        self.resolver = AttackResolver(semiring, monoid, budget)
        self.evaluator = SemanticsEvaluator(framework)
        self.bound = SharedBound(self.optimize)

        self._halt = threading.Event()
        self._found = 0
        self._found_lock = threading.Lock()
        self._floor: Optional[Mapping[Atom, Weight]] = None

    # ─── MODES ─────────────────────────────────────────────────────

    @property
    def optimizing(self) -> bool:
        return self.optimize is not OptimizeDirection.NONE

    @property
    def stops_early(self) -> bool:
        return self.max_results > 0 and not self.optimizing and not self.semantics.maximal

    @property
    def branch_and_bound(self) -> bool:
        return self.optimizing and not self.semantics.maximal

    # ─── DRIVER ────────────────────────────────────────────────────

    def run(self) -> SolveResult:
        start = time.perf_counter()
        if self.semantics.fixpoint:
            branches = [_Branch(prefix=(), support=self._new_support())]
            explore = self._ground
        else:
            branches = [
                _Branch(prefix=p, support=self._new_support()) for p in self._prefixes()
            ]
            explore = self._explore
        workers = self.config.search.workers

        logger.info(
            f"Enumerating {self.semantics.name} extensions: {len(self.order)} assumptions, "
            f"{len(branches)} branch(es), {workers} worker(s)"
        )

        try:
            if workers > 1 and len(branches) > 1:
                with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="waba-search") as pool:
                    futures = [pool.submit(explore, b) for b in branches]
                    try:
                        for future in as_completed(futures):
                            future.result()
                    except BaseException:
                        self._halt.set()
                        raise
            else:
                for branch in branches:
                    explore(branch)
        except SolveCancelled as exc:
            partial = [] if self.semantics.maximal else self._collect(branches)[0]
            logger.warning(f"Search cancelled ({exc.reason}); {len(partial)} partial extension(s)")
            raise SolveCancelled(exc.reason, partial=partial) from None

        extensions, optimal = self._collect(branches)
        stats = SearchStats()
        for branch in branches:
            stats.merge(branch.stats)
        stats.elapsed_s = time.perf_counter() - start

        status = SolveStatus.SATISFIABLE if extensions else SolveStatus.UNSATISFIABLE
        return SolveResult(
            status=status,
            extensions=extensions,
            semantics=self.semantics.name,
            semiring=self.semiring.name,
            monoid=self.monoid.name,
            optimal_cost=optimal,
            stats=stats,
        )

    def _new_support(self) -> SupportEngine:
        return SupportEngine(self.framework, self.semiring, self.config.support)

    def _prefixes(self) -> List[Tuple[bool, ...]]:
        workers = self.config.search.workers
        if workers <= 1 or not self.order:
            return [()]
        depth = self.config.search.split_depth
        if depth is None:
            depth = int(math.ceil(math.log2(workers))) + 1
        depth = max(1, min(depth, len(self.order)))
        return list(itertools.product((True, False), repeat=depth))

    # ─── LEVEL 1: ASSIGNMENTS ──────────────────────────────────────

    def _explore(self, branch: _Branch) -> None:
        chosen = tuple(a for a, flag in zip(self.order, branch.prefix) if flag)
        if not self._admits(branch, frozenset(chosen)):
            branch.stats.pruned_conflict += 1
            return
        self._assign(branch, len(branch.prefix), chosen)

    def _assign(self, branch: _Branch, index: int, chosen: Tuple[Atom, ...]) -> None:
        if self._halt.is_set():
            return
        self.token.tick()
        branch.stats.nodes += 1
        every = self.config.search.progress_every
        if every and branch.stats.nodes % every == 0:
            logger.info(f"Search progress: {branch.stats.nodes} nodes, {len(branch.items)} accepted")

        if index == len(self.order):
            self._leaf(branch, frozenset(chosen))
            return

        with_atom = chosen + (self.order[index],)
        if self._admits(branch, frozenset(with_atom)):
            self._assign(branch, index + 1, with_atom)
        else:
            branch.stats.pruned_conflict += 1
        self._assign(branch, index + 1, chosen)

    def _admits(self, branch: _Branch, in_set: frozenset) -> bool:
        """False if an in-assumption is already attacked beyond any budget."""
        if not self.resolver.upper_bounded:
            return True
        supported = branch.support.support(in_set)
        for attack in potential_attacks(self.framework, supported):
            if attack.victim in in_set and self.resolver.never_tolerable(self._lowest(branch, attack)):
                return False
        return True

    def _lowest(self, branch: _Branch, attack: Attack) -> Weight:
        """Smallest weight this attack can carry in any completion."""
        if self.semiring.ascending:
            return attack.weight
        if self._floor is None:
            self._floor = branch.support.envelope()
        return self._floor.get(attack.attacker, attack.weight)

    # ─── LEVEL 2: DISCARD CHOICES ──────────────────────────────────

    def _leaf(self, branch: _Branch, in_set: frozenset) -> None:
        branch.stats.assignments += 1
        supported = branch.support.support(in_set)
        potential = potential_attacks(self.framework, supported)
        forced = [a for a in potential if a.victim in in_set]
        free = tuple(a for a in potential if a.victim not in in_set)

        if not all(self.resolver.can_discard(a) for a in forced):
            branch.stats.pruned_conflict += 1
            return
        partial = self.monoid.aggregate(a.weight for a in forced)
        self._discard(branch, in_set, supported, potential, free, 0, forced, partial)

    def _discard(
        self,
        branch:    _Branch,
        in_set:    frozenset,
        supported: Mapping[Atom, Weight],
        potential: Tuple[Attack, ...],
        free:      Tuple[Attack, ...],
        index:     int,
        chosen:    List[Attack],
        partial:   Cost,
    ) -> None:
        if self._halt.is_set():
            return
        self.token.tick()

        if self.budget is not None or self.branch_and_bound:
            open_weights = [a.weight for a in free[index:] if self.resolver.can_discard(a)]
            lowest, highest = self.monoid.bounds(partial, open_weights)
            if not self.resolver.reachable(lowest, highest):
                branch.stats.pruned_budget += 1
                return
            if self.branch_and_bound and self.bound.prunes(lowest, highest):
                branch.stats.pruned_bound += 1
                return

        if index == len(free):
            self._emit(branch, in_set, supported, potential, chosen)
            return

        attack = free[index]
        self._discard(branch, in_set, supported, potential, free, index + 1, chosen, partial)
        if self.resolver.can_discard(attack):
            self._discard(
                branch, in_set, supported, potential, free, index + 1,
                chosen + [attack], self.monoid.combine(partial, attack.weight),
            )

    def _emit(
        self,
        branch:    _Branch,
        in_set:    frozenset,
        supported: Mapping[Atom, Weight],
        potential: Tuple[Attack, ...],
        discarded: Sequence[Attack],
    ) -> None:
        branch.stats.candidates += 1
        try:
            candidate = self.resolver.build_candidate(in_set, supported, potential, discarded)
        except BudgetExceeded as exc:
            logger.debug(f"Candidate in={sorted(in_set)} over budget: {exc}")
            branch.stats.pruned_budget += 1
            return

        evaluation = self.evaluator.evaluate(candidate, self.semantics)
        if not evaluation.accepted:
            return

        if self.branch_and_bound and not self.bound.offer(candidate.cost):
            branch.stats.pruned_bound += 1
            return

        extension = Extension.from_candidate(candidate, self.framework, self.semantics.name)
        branch.items.append((extension, evaluation))
        branch.stats.accepted += 1

        if self.stops_early:
            with self._found_lock:
                self._found += 1
                if self._found >= self.max_results:
                    self._halt.set()

    # ─── GROUNDED: ONE FIXPOINT PER DISCARD CHOICE ─────────────────

    def _ground(self, branch: _Branch) -> None:
        """Compute grounded extensions from their tolerated attacks.

        Tolerated sets are drawn from the attacks the full assumption set
        licenses, a superset of what any in-set licenses. For each set T
        the in-set is the least fixpoint under T; it is kept only when T
        names attacks that in-set actually licenses, so every candidate is
        produced once and no in/out assignment is enumerated.
        """
        envelope = potential_attacks(self.framework, branch.support.envelope())
        logger.debug(f"Grounded search over {len(envelope)} licensable attack(s)")
        self._tolerate(branch, envelope, 0, (), self.monoid.identity)

    def _tolerate(
        self,
        branch:   _Branch,
        envelope: Tuple[Attack, ...],
        index:    int,
        chosen:   Tuple[Tuple[Atom, Atom], ...],
        partial:  Cost,
    ) -> None:
        if self._halt.is_set():
            return
        self.token.tick()
        branch.stats.nodes += 1

        if index == len(envelope):
            self._fixpoint_leaf(branch, frozenset(chosen))
            return

        self._tolerate(branch, envelope, index + 1, chosen, partial)

        attack = envelope[index]
        widened = partial
        if self._envelope_is_floor:
            # envelope weights bound every in-set's weights from below
            if self.resolver.never_tolerable(attack.weight):
                branch.stats.pruned_budget += 1
                return
            widened = self.monoid.combine(partial, attack.weight)
            if not self.monoid.within_budget(widened, self.budget):
                branch.stats.pruned_budget += 1
                return
        self._tolerate(branch, envelope, index + 1, chosen + (attack.pair,), widened)

    @property
    def _envelope_is_floor(self) -> bool:
        return self.resolver.upper_bounded and not self.semiring.ascending and self.monoid.growth > 0

    def _fixpoint_leaf(self, branch: _Branch, tolerated: frozenset) -> None:
        in_set = self.evaluator.grounded_fixpoint(tolerated)
        supported = branch.support.support(in_set)
        potential = potential_attacks(self.framework, supported)
        discarded = [a for a in potential if a.pair in tolerated]
        if len(discarded) != len(tolerated):
            branch.stats.pruned_conflict += 1
            return
        self._emit(branch, in_set, supported, potential, discarded)

    # ─── COLLECTION ────────────────────────────────────────────────

    def _collect(self, branches: Sequence[_Branch]) -> Tuple[List[Extension], Optional[Cost]]:
        """Merge branch results: semantic selection, optimum filter, ordering."""
        pool = [item for branch in branches for item in branch.items]
        if self.semantics.maximal:
            extensions = self.semantics.select(pool)
        else:
            extensions = [ext for ext, _ in pool]

        extensions = [e for e in extensions if self.monoid.within_budget(e.cost, self.budget)]

        optimal: Optional[Cost] = None
        if self.optimizing and extensions:
            costs = [e.cost for e in extensions]
            optimal = max(costs) if self.optimize is OptimizeDirection.MAXIMIZE else min(costs)
            extensions = [e for e in extensions if e.cost == optimal]

        extensions.sort(key=lambda e: e.cost, reverse=self.optimize is OptimizeDirection.MAXIMIZE)

        if self.config.search.projection:
            seen = set()
            unique = []
            for ext in extensions:
                if ext.in_assumptions not in seen:
                    seen.add(ext.in_assumptions)
                    unique.append(ext)
            extensions = unique

        if self.max_results:
            extensions = extensions[: self.max_results]
        return extensions, optimal
