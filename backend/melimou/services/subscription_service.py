"""SubscriptionService — plan catalog, activation, cancellation, and limits.

Responsibilities:
- Activate: supersede the active row, insert a new one, sync the user's tier
- Cancel: at period end (flag only) or immediately (downgrade to free)
- Entitlement lookup from the persisted tier plus the active plan
- Checkout stub standing in for the payment provider

Activation and cancellation for a user are serialised through a Redis lock,
and every multi-statement change runs in a single transaction. A partial
unique index backs the one-active-subscription invariant at the storage layer.
"""

from contextlib import nullcontext
from datetime import datetime, timezone

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from melimou.core.exceptions import ConflictError, NotFoundError, UnauthorizedError
from melimou.core.locking import UserLock
from melimou.db.models.subscription_plan import SubscriptionPlan
from melimou.db.models.user import User
from melimou.db.models.user_subscription import ACTIVE_STATUS, UserSubscription
from melimou.domain.billing_period import period_end
from melimou.domain.entitlements import Entitlements, Tier, parse_tier, resolve_entitlements, tier_for_plan_name

logger = structlog.get_logger(__name__)

LOCK_SCOPE = "subscription"


class SubscriptionService:
    """Service layer for the subscription lifecycle."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        lock: UserLock | None = None,
        lock_ttl: int = 30,
        lock_timeout: float = 5.0,
    ):
        """Initialize with session factory and optional per-user lock.

        Args:
            session_factory: SQLAlchemy async session factory for database access
            lock: Redis-backed per-user lock; None relies on the storage constraint alone
            lock_ttl: Seconds before an abandoned lock expires
            lock_timeout: Seconds to wait for the lock before giving up with a 409
        """
        self.session_factory = session_factory
        self.lock = lock
        self.lock_ttl = lock_ttl
        self.lock_timeout = lock_timeout

    # ── Catalog ─────────────────────────────────────────────────────

    async def list_plans(self) -> list[SubscriptionPlan]:
        """Active plans, cheapest first."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(SubscriptionPlan)
                .where(SubscriptionPlan.is_active.is_(True))
                .order_by(SubscriptionPlan.price, SubscriptionPlan.id)
            )
            return list(result.scalars().all())

    async def get_plan(self, plan_id: int) -> SubscriptionPlan:
        async with self.session_factory() as session:
            plan = await session.get(SubscriptionPlan, plan_id)
        if plan is None:
            raise NotFoundError("Plan not found")
        return plan

    # ── Reads ───────────────────────────────────────────────────────

    async def get_current(self, user_id: str) -> UserSubscription | None:
        """The user's active subscription (with plan), if any."""
        async with self.session_factory() as session:
            return await self._active_subscription(session, user_id)

    async def get_history(self, user_id: str) -> list[UserSubscription]:
        """Every subscription row for the user, newest first."""
        async with self.session_factory() as session:
            result = await session.execute(
                select(UserSubscription)
                .where(UserSubscription.user_id == user_id)
                .order_by(UserSubscription.created_at.desc(), UserSubscription.id.desc())
            )
            return list(result.scalars().unique().all())

    async def get_limits(self, user_id: str) -> tuple[Tier, Entitlements, UserSubscription | None]:
        """Current tier, resolved entitlements, and the active subscription."""
        async with self.session_factory() as session:
            user = await session.get(User, user_id)
            subscription = await self._active_subscription(session, user_id)

        tier = parse_tier(user.subscription_tier if user else None)
        plan = subscription.plan if subscription is not None else None
        return tier, resolve_entitlements(tier, plan), subscription

    async def get_entitlements(self, user_id: str) -> Entitlements:
        _, entitlements, _ = await self.get_limits(user_id)
        return entitlements

    # ── Checkout stub ───────────────────────────────────────────────

    async def create_checkout_session(
        self,
        user_id: str,
        plan_id: int,
        success_url: str,
        cancel_url: str,
        now: datetime | None = None,
    ) -> dict:
        """Return a mock checkout URL; no payment provider is contacted."""
        plan = await self.get_plan(plan_id)
        now = now or datetime.now(timezone.utc)
        session_id = f"mock_session_{int(now.timestamp() * 1000)}"

        logger.info("checkout_session_created", user_id=user_id, plan_id=plan.id, session_id=session_id)
        return {
            "checkout_url": f"/checkout/mock?planId={plan.id}&userId={user_id}",
            "session_id": session_id,
            "success_url": success_url,
            "cancel_url": cancel_url,
        }

    # ── Lifecycle ───────────────────────────────────────────────────

    async def activate(
        self,
        user_id: str,
        plan_id: int,
        stripe_subscription_id: str | None = None,
        now: datetime | None = None,
    ) -> UserSubscription:
        """Make plan_id the user's single active subscription.

        Args:
            user_id: Session user ID
            plan_id: Plan to activate
            stripe_subscription_id: Provider reference; a mock id is generated when absent
            now: Period start (for deterministic testing)

        Returns:
            The new UserSubscription row

        Raises:
            NotFoundError: If the plan or user does not exist
            ConflictError: If another change for the user holds the lock or wins the race
        """
        async with self._serialised(user_id):
            return await self._activate(user_id, plan_id, stripe_subscription_id, now)

    async def _activate(
        self,
        user_id: str,
        plan_id: int,
        stripe_subscription_id: str | None,
        now: datetime | None,
    ) -> UserSubscription:
        now = now or datetime.now(timezone.utc)

        async with self.session_factory() as session:
            try:
                async with session.begin():
                    plan = await session.get(SubscriptionPlan, plan_id)
                    if plan is None:
                        raise NotFoundError("Plan not found")

                    user = await session.get(User, user_id)
                    if user is None:
                        raise NotFoundError("User not found")

                    await session.execute(
                        update(UserSubscription)
                        .where(
                            UserSubscription.user_id == user_id,
                            UserSubscription.status == ACTIVE_STATUS,
                        )
                        .values(status="inactive")
                        .execution_options(synchronize_session=False)
                    )

                    end = period_end(now, plan.interval_type, plan.interval_count)
                    subscription = UserSubscription(
                        user_id=user_id,
                        plan_id=plan.id,
                        stripe_subscription_id=stripe_subscription_id or f"mock_sub_{int(now.timestamp() * 1000)}",
                        status=ACTIVE_STATUS,
                        current_period_start=now,
                        current_period_end=end,
                        cancel_at_period_end=False,
                    )
                    session.add(subscription)

                    tier = tier_for_plan_name(plan.name)
                    user.subscription_tier = tier.value
                    user.subscription_status = "active"
                    user.subscription_start_date = now
                    user.subscription_end_date = end
            except IntegrityError as exc:
                logger.warning("subscription_activation_conflict", user_id=user_id, plan_id=plan_id)
                raise ConflictError("A concurrent subscription change won; reload and retry") from exc

            await session.refresh(subscription, ["plan"])

        logger.info(
            "subscription_activated",
            user_id=user_id,
            plan_id=plan_id,
            subscription_id=subscription.id,
            tier=tier.value,
        )
        return subscription

    async def cancel(
        self,
        user_id: str,
        subscription_id: int,
        cancel_at_period_end: bool = True,
    ) -> UserSubscription:
        """Cancel a subscription owned by the user.

        At period end: only the flag is set; status stays active and the tier
        is untouched. Immediately: status becomes cancelled and the user drops
        to the free tier in the same transaction.

        Raises:
            NotFoundError: If no such subscription exists
            UnauthorizedError: If the subscription belongs to another user
            ConflictError: If the subscription is no longer active
        """
        async with self._serialised(user_id):
            async with self.session_factory() as session:
                async with session.begin():
                    subscription = await session.get(UserSubscription, subscription_id)
                    if subscription is None:
                        raise NotFoundError("Subscription not found")
                    if subscription.user_id != user_id:
                        raise UnauthorizedError("Subscription not found or unauthorized")
                    if subscription.status != ACTIVE_STATUS:
                        raise ConflictError(f"Subscription is {subscription.status}, not active")

                    subscription.cancel_at_period_end = cancel_at_period_end
                    if not cancel_at_period_end:
                        subscription.status = "cancelled"
                        user = await session.get(User, user_id)
                        user.subscription_tier = Tier.FREE.value
                        user.subscription_status = "cancelled"

                await session.refresh(subscription, ["plan"])

        logger.info(
            "subscription_cancelled",
            user_id=user_id,
            subscription_id=subscription_id,
            at_period_end=cancel_at_period_end,
        )
        return subscription

    async def expire_lapsed(self, now: datetime | None = None) -> int:
        """Close subscriptions flagged cancel-at-period-end whose period is over.

        Returns:
            Number of subscriptions expired
        """
        now = now or datetime.now(timezone.utc)

        async with self.session_factory() as session:
            result = await session.execute(
                select(UserSubscription).where(
                    UserSubscription.status == ACTIVE_STATUS,
                    UserSubscription.cancel_at_period_end.is_(True),
                    UserSubscription.current_period_end <= now,
                )
            )
            lapsed = [(s.id, s.user_id) for s in result.scalars().unique().all()]

        expired = 0
        for subscription_id, user_id in lapsed:
            async with self._serialised(user_id):
                async with self.session_factory() as session:
                    async with session.begin():
                        subscription = await session.get(UserSubscription, subscription_id)
                        # Superseded or cancelled while we were waiting
                        if subscription is None or subscription.status != ACTIVE_STATUS:
                            continue
                        subscription.status = "inactive"
                        user = await session.get(User, user_id)
                        user.subscription_tier = Tier.FREE.value
                        user.subscription_status = "inactive"
            expired += 1

        if expired:
            logger.info("subscriptions_expired", count=expired)
        return expired

    # ── Helpers ─────────────────────────────────────────────────────

    def _serialised(self, user_id: str):
        if self.lock is None:
            return nullcontext()
        return self.lock.hold(user_id, ttl=self.lock_ttl, timeout=self.lock_timeout)

    @staticmethod
    async def _active_subscription(session: AsyncSession, user_id: str) -> UserSubscription | None:
        result = await session.execute(
            select(UserSubscription)
            .where(
                UserSubscription.user_id == user_id,
                UserSubscription.status == ACTIVE_STATUS,
            )
            .order_by(UserSubscription.created_at.desc(), UserSubscription.id.desc())
            .limit(1)
        )
        return result.scalars().first()


def build_subscription_service(session_factory, redis_client, settings) -> SubscriptionService:
    """Wire the service with a Redis lock using the configured timings."""
    return SubscriptionService(
        session_factory,
        lock=UserLock(redis_client, LOCK_SCOPE),
        lock_ttl=settings.subscription_lock_ttl_seconds,
        lock_timeout=settings.subscription_lock_timeout_seconds,
    )
