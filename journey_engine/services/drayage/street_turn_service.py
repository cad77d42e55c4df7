from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, List, Optional, Tuple

from journey_engine.core.config import Settings, get_settings
from journey_engine.schemas.leg import OPEN_STATUSES, Leg, LegStatus, LegType
from journey_engine.schemas.street_turn import MatchingReason, StreetTurnCandidate
from journey_engine.services.drayage.lfd import lfd_status

logger = logging.getLogger(__name__)


def _same_text(left: Optional[str], right: Optional[str]) -> bool:
    """Case-insensitive equality; unknown on either side is never a match."""
    if not left or not right:
        return False
    return left.strip().casefold() == right.strip().casefold()


def _normalize_size(size: Optional[str]) -> Optional[str]:
    if not size:
        return None
    # 40' and 40 are the same size
    return size.strip().upper().rstrip("'").replace("FT", "").strip() or None


class StreetTurnService:
    """
    Ranks street-turn (swap) opportunities: an import's empty reused for an
    export booking instead of going back to the terminal.

    Every eligible (import, export) pair is scored and returned. Ranking,
    not filtering: callers decide what score is worth showing.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()

    def find_candidates(
        self,
        import_candidates: Iterable[Leg],
        export_candidates: Iterable[Leg],
        as_of: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[StreetTurnCandidate]:
        imports = self.eligible_imports(import_candidates)
        exports = self.eligible_exports(export_candidates)
        return self.rank_pairs(imports, exports, as_of=as_of, limit=limit)

    def rank_pairs(
        self,
        imports: List[Leg],
        exports: List[Leg],
        as_of: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> List[StreetTurnCandidate]:
        """Score and rank legs that already passed eligible_imports / eligible_exports."""
        candidates: List[StreetTurnCandidate] = []
        for import_leg in imports:
            for export_leg in exports:
                candidates.append(self.score_pair(import_leg, export_leg, as_of=as_of))

        candidates.sort(key=self._rank_key)
        logger.info(
            f"Scored {len(candidates)} street-turn pairs "
            f"({len(imports)} empties x {len(exports)} export bookings)"
        )

        if limit is not None:
            return candidates[:limit]
        return candidates

    def eligible_imports(self, legs: Iterable[Leg]) -> List[Leg]:
        """Empty-return legs not yet dispatched, assigned or paired."""
        return [leg for leg in legs if self._is_eligible(leg, LegType.EMPTY_RETURN)]

    def eligible_exports(self, legs: Iterable[Leg]) -> List[Leg]:
        """Empty-pickup legs not yet dispatched, assigned or paired."""
        return [leg for leg in legs if self._is_eligible(leg, LegType.EMPTY_PICKUP)]

    def score_pair(self, import_leg: Leg, export_leg: Leg, as_of: Optional[date] = None) -> StreetTurnCandidate:
        reasons: List[MatchingReason] = []
        score = 0.0

        # The empty sits where the import was delivered (start of its empty return);
        # the export needs it where the booking is loaded (end of its empty pickup).
        same_city = _same_text(import_leg.pickup_city, export_leg.delivery_city)
        if same_city:
            score += self.settings.street_turn_city_weight
            reasons.append(
                MatchingReason(
                    label="Same city",
                    detail=import_leg.pickup_city.strip(),
                    weight=self.settings.street_turn_city_weight,
                )
            )
        else:
            reasons.append(
                MatchingReason(
                    label="Different city",
                    detail=f"{import_leg.pickup_city or '?'} -> {export_leg.delivery_city or '?'}",
                )
            )

        import_size = _normalize_size(import_leg.container_size)
        same_size = import_size is not None and import_size == _normalize_size(export_leg.container_size)
        if same_size:
            score += self.settings.street_turn_size_weight
            reasons.append(
                MatchingReason(label="Size match", detail=import_size, weight=self.settings.street_turn_size_weight)
            )
        else:
            reasons.append(
                MatchingReason(
                    label="Size mismatch",
                    detail=f"{import_leg.container_size or '?'} vs {export_leg.container_size or '?'}",
                )
            )

        empty_ready = import_leg.empty_ready_at is not None or import_leg.status == LegStatus.READY
        if empty_ready:
            score += self.settings.street_turn_empty_ready_weight
            detail = import_leg.empty_ready_at.isoformat() if import_leg.empty_ready_at else "Empty return READY"
            reasons.append(
                MatchingReason(label="Empty ready", detail=detail, weight=self.settings.street_turn_empty_ready_weight)
            )

        # Steamship line is shown, never scored: carriers sometimes allow interchange
        same_steamship_line: Optional[bool] = None
        if import_leg.steamship_line and export_leg.steamship_line:
            same_steamship_line = _same_text(import_leg.steamship_line, export_leg.steamship_line)
            reasons.append(
                MatchingReason(
                    label="Same steamship line" if same_steamship_line else "Different steamship line",
                    detail=f"{import_leg.steamship_line} / {export_leg.steamship_line}",
                    weight=0.0,
                )
            )

        same_terminal = _same_text(import_leg.terminal_name, export_leg.terminal_name)
        score = max(0.0, min(100.0, score))
        days_until_lfd, warning_level = lfd_status(import_leg.last_free_day, as_of=as_of, settings=self.settings)

        return StreetTurnCandidate(
            import_leg=import_leg,
            export_leg=export_leg,
            match_score=round(score, 2),
            estimated_savings=self.estimate_savings(same_terminal),
            reasons=reasons,
            same_city=same_city,
            same_size=same_size,
            same_steamship_line=same_steamship_line,
            same_terminal=same_terminal,
            empty_ready=empty_ready,
            days_until_lfd=days_until_lfd,
            lfd_warning_level=warning_level,
        )

    def estimate_savings(self, same_terminal: bool) -> float:
        """Avoided empty repositioning trip. Display only, never used for ranking."""
        savings = self.settings.street_turn_base_savings
        if same_terminal:
            savings += self.settings.street_turn_same_terminal_bonus
        return round(savings, 2)

    def _is_eligible(self, leg: Leg, leg_type: LegType) -> bool:
        if leg.leg_type != leg_type.value:
            logger.debug(f"Leg {leg.id} is {leg.leg_type}, not {leg_type.value}. Skipping.")
            return False
        if leg.status not in OPEN_STATUSES:
            logger.debug(f"Leg {leg.id} is {leg.status.value}. Skipping.")
            return False
        if leg.street_turn_id or leg.assigned_driver_id:
            logger.debug(f"Leg {leg.id} is already paired or assigned. Skipping.")
            return False
        return True

    @staticmethod
    def _rank_key(candidate: StreetTurnCandidate) -> Tuple[float, bool, date, str, str]:
        # Highest score first, then the most urgent import inventory
        last_free_day = candidate.import_leg.last_free_day
        return (
            -candidate.match_score,
            last_free_day is None,
            last_free_day or date.max,
            candidate.import_leg.id,
            candidate.export_leg.id,
        )


def find_street_turns(
    import_candidates: Iterable[Leg],
    export_candidates: Iterable[Leg],
    as_of: Optional[date] = None,
    limit: Optional[int] = None,
) -> List[StreetTurnCandidate]:
    """Rank street-turn pairs with default settings."""
    service = StreetTurnService()
    return service.find_candidates(import_candidates, export_candidates, as_of=as_of, limit=limit)
