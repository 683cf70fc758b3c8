"""Registration address collision detection.

Several accounts behind one address is a classic sock-puppet signal. One
other account is treated as a household; two or more is suspicious.
"""

import logging
from datetime import datetime, timedelta, timezone

from trustlens.actors.repository import ActorRepository
from trustlens.trust.config import TrustConfig
from trustlens.trust.schemas import IPCollisionResult

logger = logging.getLogger(__name__)


class IPCollisionDetector:
    """Counts distinct actors sharing an actor's registration address."""

    def __init__(
        self,
        repository: ActorRepository,
        config: TrustConfig | None = None,
    ) -> None:
        self._repo = repository
        self._config = config or TrustConfig()

    async def detect(
        self,
        actor_id: str,
        ip_address: str | None,
        *,
        kind: str = "user",
        now: datetime | None = None,
    ) -> IPCollisionResult:
        """Classify the address an actor registered from.

        Args:
            actor_id: The actor being scored (excluded from the count).
            ip_address: Address recorded at registration, or None.
            kind: Actor table to search.
            now: Reference time for the rapid-creation window.

        Returns:
            IPCollisionResult. Without an address the result carries a
            zero adjustment and ``unknown`` risk, and no query is issued.
        """
        if not ip_address:
            return IPCollisionResult()

        cfg = self._config
        others = await self._repo.find_ids_by_address(
            ip_address, exclude_id=actor_id, kind=kind,
        )
        other_count = len(others)

        if other_count == 0:
            adjustment, risk = cfg.unique_address_bonus, "low"
        elif other_count == 1:
            adjustment, risk = 0, "low"
        else:
            adjustment, risk = cfg.crowded_address_penalty, "high"

        now = now or datetime.now(timezone.utc)
        since = now - timedelta(hours=cfg.rapid_creation_window_hours)
        recent = await self._repo.count_created_from_address_since(
            ip_address, since, kind=kind,
        )
        rapid = recent >= cfg.rapid_creation_threshold

        if risk == "high" or rapid:
            logger.info(
                "Address %s shared by %d accounts (%d in last %dh) for actor %s",
                ip_address,
                other_count + 1,
                recent,
                cfg.rapid_creation_window_hours,
                actor_id,
            )

        return IPCollisionResult(
            ip_address=ip_address,
            other_account_count=other_count,
            other_actor_ids=others,
            total_accounts=other_count + 1,
            risk_level=risk,
            score_adjustment=adjustment,
            recent_account_count=recent,
            rapid_account_creation=rapid,
        )
