"""
Service: networking sessions, rotations and signups.

Every write runs as one unit of work and invalidates the affected cache
partitions only after commit. List and runtime reads go through the cache.
"""

import uuid
from datetime import datetime, timedelta
from typing import Any, Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from speednet.core.authorization import AuthContext, assert_workspace_permission
from speednet.core.cache import (
    SESSION_LIST_NAMESPACE,
    SESSION_LIST_TTL_SECONDS,
    SESSION_RUNTIME_NAMESPACE,
    SESSION_RUNTIME_TTL_SECONDS,
    SessionCache,
    invalidate_partition,
    make_partitioned_key,
)
from speednet.core.capacity import admit_signup, apply_signup_update
from speednet.core.constants import SESSION_LIST_LIMIT
from speednet.core.errors import ConflictError, NotFoundError, ValidationError
from speednet.core.logging import get_logger
from speednet.core.penalties import normalise_penalty_rules
from speednet.core.runtime import project
from speednet.core.scheduler import RotationPlan, build_schedule
from speednet.core.session_defaults import build_showcase_config, build_video_config
from speednet.core.session_summary import summarise_sessions
from speednet.core.unit_of_work import UnitOfWork
from speednet.core.validation import parse_payload
from speednet.core.validators import (
    normalise_join_limit,
    normalise_rotation_duration,
    normalise_session_length_minutes,
    normalise_waitlist_limit,
    require_positive_price,
    resolve_price_cents,
    slugify,
    validate_time_window,
)
from speednet.models.enums import AccessType
from speednet.models.networking_session import NetworkingSession
from speednet.models.rotation import SessionRotation
from speednet.models.session_schemas import (
    RotationOverride,
    SessionCreate,
    SessionList,
    SessionListFilters,
    SessionRead,
    SessionRuntime,
    SessionUpdate,
)
from speednet.models.signup import SessionSignup
from speednet.models.signup_schemas import SignupCreate, SignupRead, SignupUpdate
from speednet.utils.datetime import add_seconds, now_utc, to_naive_utc

logger = get_logger(__name__)

# Plain columns a patch may overwrite as-is (explicit null clears them)
_DIRECT_PATCH_FIELDS = (
    "description",
    "status",
    "visibility",
    "lobby_instructions",
    "requires_approval",
)
_BLOB_PATCH_FIELDS = (
    "video_telemetry",
    "host_controls",
    "attendee_tools",
    "follow_up_actions",
    "monetization",
)
_TIMESTAMP_PATCH_FIELDS = ("registration_opens_at", "registration_closes_at")


def _enum_value(value: Any) -> Any:
    return getattr(value, "value", value)


async def _load_session(db: AsyncSession, session_id: uuid.UUID) -> NetworkingSession:
    session = await db.get(NetworkingSession, session_id)
    if session is None:
        raise NotFoundError("NetworkingSession", session_id)
    return session


async def _replace_rotations(
    db: AsyncSession, session: NetworkingSession, plans: list[RotationPlan]
) -> None:
    """Delete the whole rotation set, then insert the new one, in the caller's transaction."""
    session.rotations.clear()
    # Old rows must be gone before new ones reuse their rotation numbers
    await db.flush()
    ordered = sorted(plans, key=lambda plan: plan.rotation_number)
    session.rotations.extend(SessionRotation(**plan.as_row()) for plan in ordered)
    await db.flush()


class NetworkingSessionService:
    """Business logic for networking sessions and their signups."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        cache: SessionCache,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self._uow = UnitOfWork(session_factory)
        self._cache = cache
        self._clock = clock

    # ── Cache ──

    def _invalidate(self, company_id: int | None, session_id: uuid.UUID) -> None:
        """Drop list entries for the company (and unfiltered lists) plus the session's runtime."""
        invalidate_partition(self._cache, SESSION_LIST_NAMESPACE, "company_id", company_id)
        if company_id is not None:
            invalidate_partition(self._cache, SESSION_LIST_NAMESPACE, "company_id", None)
        invalidate_partition(self._cache, SESSION_RUNTIME_NAMESPACE, "session_id", session_id)

    # ── Commands ──

    async def create_session(
        self, payload: SessionCreate | dict[str, Any], ctx: AuthContext
    ) -> SessionRead:
        """
        Create a session and its initial rotation set atomically.

        Raises:
            ValidationError: Bad payload, end before start, paid without a price
            AuthorizationError: Company outside the caller's scope
            ConflictError: Slug already used in the company
        """
        data = parse_payload(SessionCreate, payload)
        assert_workspace_permission(data.company_id, ctx)

        start = to_naive_utc(data.start_time)
        end = to_naive_utc(data.end_time)
        validate_time_window(start, end)

        slot_seconds = normalise_rotation_duration(data.rotation_duration_seconds)
        length = normalise_session_length_minutes(data.session_length_minutes, start, end)
        if start is not None:
            end = add_seconds(start, length * 60)

        price_cents = None
        if data.access_type == AccessType.PAID:
            price_cents = require_positive_price(
                resolve_price_cents(data.price, data.price_cents)
            )

        slug = slugify(data.slug or data.title)
        plans = build_schedule(start, length, slot_seconds, data.rotations)

        async def work(db: AsyncSession) -> SessionRead:
            if await NetworkingSession.find_by_slug(slug, data.company_id, db):
                raise ConflictError(
                    "A networking session with this slug already exists.",
                    details={"slug": slug},
                )

            session = NetworkingSession(
                company_id=data.company_id,
                created_by_id=ctx.actor_id,
                updated_by_id=ctx.actor_id,
                title=data.title,
                slug=slug,
                description=data.description,
                status=data.status.value,
                visibility=data.visibility.value,
                access_type=data.access_type.value,
                price_cents=price_cents,
                currency=data.currency,
                start_time=start,
                end_time=end,
                session_length_minutes=length,
                rotation_duration_seconds=slot_seconds,
                join_limit=normalise_join_limit(data.join_limit),
                waitlist_limit=normalise_waitlist_limit(data.waitlist_limit),
                registration_opens_at=to_naive_utc(data.registration_opens_at),
                registration_closes_at=to_naive_utc(data.registration_closes_at),
                requires_approval=data.requires_approval,
                lobby_instructions=data.lobby_instructions,
                penalty_rules=normalise_penalty_rules(data.penalty_rules).to_json(),
                video_config=build_video_config(slot_seconds, data.video_config),
                video_telemetry=dict(data.video_telemetry),
                showcase_config=build_showcase_config(data.showcase_config),
                host_controls=dict(data.host_controls),
                attendee_tools=dict(data.attendee_tools),
                follow_up_actions=dict(data.follow_up_actions),
                monetization=dict(data.monetization),
                rotations=[
                    SessionRotation(**plan.as_row())
                    for plan in sorted(plans, key=lambda plan: plan.rotation_number)
                ],
                signups=[],
            )
            db.add(session)
            await db.flush()
            return SessionRead.model_validate(session)

        created = await self._uow.run(
            work, after_commit=lambda read: self._invalidate(read.company_id, read.id)
        )
        logger.info(
            "networking_session.created",
            session_id=str(created.id),
            company_id=created.company_id,
            slug=created.slug,
            rotations=len(created.rotations),
            actor_id=ctx.actor_id,
        )
        return created

    async def update_session(
        self,
        session_id: uuid.UUID,
        patch: SessionUpdate | dict[str, Any],
        ctx: AuthContext,
    ) -> SessionRead:
        """
        Apply a partial update. Only fields present in the patch are touched.

        A 'rotations' entry replaces the rotation set. A patch that changes
        nothing returns the session without writing.
        """
        data = parse_payload(SessionUpdate, patch)
        fields = data.model_fields_set

        async def work(db: AsyncSession) -> tuple[SessionRead, list[str]]:
            session = await _load_session(db, session_id)
            assert_workspace_permission(session.company_id, ctx)

            updates = self._collect_session_updates(session, data, fields)
            if "slug" in updates:
                clash = await NetworkingSession.find_by_slug(
                    updates["slug"], session.company_id, db, exclude_session_id=session.id
                )
                if clash is not None:
                    raise ConflictError(
                        "Another session already uses this slug.",
                        details={"slug": updates["slug"]},
                    )

            changed = []
            for field, value in updates.items():
                if getattr(session, field) != value:
                    setattr(session, field, value)
                    changed.append(field)

            if "rotations" in fields and data.rotations is not None:
                plans = build_schedule(
                    session.start_time,
                    session.session_length_minutes,
                    session.rotation_duration_seconds,
                    data.rotations,
                )
                await _replace_rotations(db, session, plans)
                changed.append("rotations")

            if changed:
                session.updated_by_id = (
                    ctx.actor_id or session.updated_by_id or session.created_by_id
                )
                await db.flush()
            return SessionRead.model_validate(session), changed

        def after_commit(result: tuple[SessionRead, list[str]]) -> None:
            read, changed = result
            if changed:
                self._invalidate(read.company_id, read.id)

        updated, changed = await self._uow.run(work, after_commit=after_commit)
        if changed:
            logger.info(
                "networking_session.updated",
                session_id=str(updated.id),
                company_id=updated.company_id,
                fields=changed,
                actor_id=ctx.actor_id,
            )
        return updated

    def _collect_session_updates(
        self,
        session: NetworkingSession,
        data: SessionUpdate,
        fields: set[str],
    ) -> dict[str, Any]:
        """Normalise the fields present in a patch into column values."""
        updates: dict[str, Any] = {}

        if "title" in fields:
            if data.title is None:
                raise ValidationError("A session title cannot be removed.")
            updates["title"] = data.title
        if "slug" in fields and data.slug:
            slug = slugify(data.slug)
            if slug != session.slug:
                updates["slug"] = slug

        for field in _DIRECT_PATCH_FIELDS:
            if field in fields:
                value = _enum_value(getattr(data, field))
                if value is None and field in ("status", "visibility", "requires_approval"):
                    raise ValidationError(f"{field} cannot be null.", details={"field": field})
                updates[field] = value
        for field in _BLOB_PATCH_FIELDS:
            if field in fields:
                updates[field] = dict(getattr(data, field) or {})
        for field in _TIMESTAMP_PATCH_FIELDS:
            if field in fields:
                updates[field] = to_naive_utc(getattr(data, field))

        if "currency" in fields and data.currency:
            updates["currency"] = data.currency.upper()
        if "penalty_rules" in fields:
            updates["penalty_rules"] = normalise_penalty_rules(data.penalty_rules).to_json()
        if "video_config" in fields:
            updates["video_config"] = {**(session.video_config or {}), **(data.video_config or {})}
        if "showcase_config" in fields:
            updates["showcase_config"] = {
                **(session.showcase_config or {}),
                **(data.showcase_config or {}),
            }

        if "join_limit" in fields:
            updates["join_limit"] = normalise_join_limit(data.join_limit)
        if "waitlist_limit" in fields:
            updates["waitlist_limit"] = normalise_waitlist_limit(data.waitlist_limit)
        if "rotation_duration_seconds" in fields:
            updates["rotation_duration_seconds"] = normalise_rotation_duration(
                data.rotation_duration_seconds
            )

        # Timing: start, end and length are resolved together
        start = to_naive_utc(data.start_time) if "start_time" in fields else session.start_time
        end = to_naive_utc(data.end_time) if "end_time" in fields else session.end_time
        if "start_time" in fields:
            updates["start_time"] = start
        if "session_length_minutes" in fields and data.session_length_minutes is not None:
            updates["session_length_minutes"] = normalise_session_length_minutes(
                data.session_length_minutes, start, end
            )
        if "end_time" in fields:
            updates["end_time"] = end
        elif start is not None and ("start_time" in fields or "session_length_minutes" in updates):
            length = updates.get("session_length_minutes", session.session_length_minutes)
            end = add_seconds(start, length * 60)
            updates["end_time"] = end
        validate_time_window(start, end)

        # Pricing: paid sessions always end up with a positive price
        access_type = _enum_value(data.access_type) if "access_type" in fields else session.access_type
        if access_type is None:
            raise ValidationError("access_type cannot be null.", details={"field": "access_type"})
        if "access_type" in fields:
            updates["access_type"] = access_type
        price_given = ("price" in fields and data.price is not None) or (
            "price_cents" in fields and data.price_cents is not None
        )
        if access_type == AccessType.PAID.value:
            if price_given:
                updates["price_cents"] = require_positive_price(
                    resolve_price_cents(data.price, data.price_cents)
                )
            elif session.price_cents is None or session.price_cents <= 0:
                raise ValidationError("Paid sessions require a positive price.")
        elif "access_type" in fields:
            updates["price_cents"] = None

        return updates

    async def regenerate_rotations(
        self,
        session_id: uuid.UUID,
        override: RotationOverride | dict[str, Any] | None,
        ctx: AuthContext,
    ) -> SessionRead:
        """
        Replace the session's rotation set.

        Override values only shape the new schedule; the session's own timing
        columns are left as they are.
        """
        data = parse_payload(RotationOverride, override)

        async def work(db: AsyncSession) -> SessionRead:
            session = await _load_session(db, session_id)
            assert_workspace_permission(session.company_id, ctx)

            start = to_naive_utc(data.start_time) or session.start_time
            length = (
                normalise_session_length_minutes(data.session_length_minutes)
                if data.session_length_minutes is not None
                else session.session_length_minutes
            )
            slot_seconds = (
                normalise_rotation_duration(data.rotation_duration_seconds)
                if data.rotation_duration_seconds is not None
                else session.rotation_duration_seconds
            )
            plans = build_schedule(start, length, slot_seconds, data.rotations)
            await _replace_rotations(db, session, plans)
            return SessionRead.model_validate(session)

        regenerated = await self._uow.run(
            work, after_commit=lambda read: self._invalidate(read.company_id, read.id)
        )
        logger.info(
            "networking_session.rotations_regenerated",
            session_id=str(regenerated.id),
            company_id=regenerated.company_id,
            rotations=len(regenerated.rotations),
            actor_id=ctx.actor_id,
        )
        return regenerated

    async def register_for_session(
        self,
        session_id: uuid.UUID,
        payload: SignupCreate | dict[str, Any],
    ) -> SignupRead:
        """
        Public registration. No workspace check, but email and name are required.

        Raises:
            NotFoundError: Session or business card doesn't exist
            ConflictError: Duplicate registration or active penalty cooldown
            ValidationError: Missing email/name or a foreign business card
        """
        data = parse_payload(SignupCreate, payload)

        async def work(db: AsyncSession) -> tuple[SignupRead, int | None]:
            session = await _load_session(db, session_id)
            signup = await admit_signup(db, session, data, now=self._clock())
            return SignupRead.model_validate(signup), session.company_id

        def after_commit(result: tuple[SignupRead, int | None]) -> None:
            read, company_id = result
            self._invalidate(company_id, read.session_id)

        signup, company_id = await self._uow.run(work, after_commit=after_commit)
        logger.info(
            "signup.registered",
            session_id=str(signup.session_id),
            signup_id=str(signup.id),
            company_id=company_id,
            status=signup.status,
            source=signup.source,
        )
        return signup

    async def update_signup(
        self,
        session_id: uuid.UUID,
        signup_id: uuid.UUID,
        patch: SignupUpdate | dict[str, Any],
        ctx: AuthContext,
    ) -> SignupRead:
        """Host-side signup mutation. Waitlisted signups are never promoted automatically."""
        data = parse_payload(SignupUpdate, patch)

        async def work(db: AsyncSession) -> tuple[SignupRead, int | None, list[str]]:
            session = await _load_session(db, session_id)
            assert_workspace_permission(session.company_id, ctx)

            result = await db.execute(
                select(SessionSignup).where(
                    SessionSignup.id == signup_id,
                    SessionSignup.session_id == session_id,
                )
            )
            signup = result.scalars().first()
            if signup is None:
                raise NotFoundError("SessionSignup", signup_id)

            changed = await apply_signup_update(db, signup, data, now=self._clock())
            return SignupRead.model_validate(signup), session.company_id, changed

        def after_commit(result: tuple[SignupRead, int | None, list[str]]) -> None:
            read, company_id, changed = result
            if changed:
                self._invalidate(company_id, read.session_id)

        signup, company_id, changed = await self._uow.run(work, after_commit=after_commit)
        logger.info(
            "signup.updated",
            session_id=str(signup.session_id),
            signup_id=str(signup.id),
            company_id=company_id,
            status=signup.status,
            fields=changed,
            actor_id=ctx.actor_id,
        )
        return signup

    # ── Queries ──

    async def get_session(self, session_id: uuid.UUID, ctx: AuthContext) -> SessionRead:
        async def work(db: AsyncSession) -> SessionRead:
            session = await _load_session(db, session_id)
            assert_workspace_permission(session.company_id, ctx)
            return SessionRead.model_validate(session)

        return await self._uow.read(work)

    async def list_sessions(
        self,
        filters: SessionListFilters | dict[str, Any] | None,
        ctx: AuthContext,
    ) -> SessionList:
        """
        List sessions visible to the caller, newest activity first.

        Without upcoming_only, sessions created within the lookback window are
        returned; with it, sessions starting from now on. Results are cached
        per filter set and caller scope.
        """
        data = parse_payload(SessionListFilters, filters)
        if data.company_id is not None:
            assert_workspace_permission(data.company_id, ctx)
        lookback_days = max(1, data.lookback_days)
        status = _enum_value(data.status)

        key = make_partitioned_key(
            SESSION_LIST_NAMESPACE,
            "company_id",
            data.company_id,
            status=status,
            include_metrics=data.include_metrics,
            upcoming_only=data.upcoming_only,
            lookback_days=lookback_days,
            scope=ctx.fingerprint,
        )

        async def produce() -> dict[str, Any]:
            async def work(db: AsyncSession) -> dict[str, Any]:
                now = self._clock()
                stmt = select(NetworkingSession)
                if data.company_id is not None:
                    stmt = stmt.where(NetworkingSession.company_id == data.company_id)
                elif not ctx.is_unrestricted:
                    stmt = stmt.where(
                        NetworkingSession.company_id.in_(ctx.authorized_workspace_ids)
                    )
                if status is not None:
                    stmt = stmt.where(NetworkingSession.status == status)
                if data.upcoming_only:
                    stmt = stmt.where(NetworkingSession.start_time >= now)
                else:
                    since = now - timedelta(days=lookback_days)
                    stmt = stmt.where(NetworkingSession.created_at >= since)
                stmt = stmt.order_by(
                    NetworkingSession.start_time.asc().nulls_last(),
                    NetworkingSession.created_at.desc(),
                ).limit(SESSION_LIST_LIMIT)

                sessions = (await db.execute(stmt)).scalars().all()
                listing = SessionList(
                    sessions=[SessionRead.model_validate(s) for s in sessions],
                    summary=summarise_sessions(sessions, now=now) if data.include_metrics else None,
                )
                return listing.model_dump()

            return await self._uow.read(work)

        cached = await self._cache.remember(key, SESSION_LIST_TTL_SECONDS, produce)
        return SessionList.model_validate(cached)

    async def get_session_runtime(
        self,
        session_id: uuid.UUID,
        ctx: AuthContext,
        now: datetime | None = None,
    ) -> SessionRuntime:
        """Session plus its runtime snapshot. Cached briefly; an explicit now gets its own entry."""
        moment = to_naive_utc(now)
        key_params: dict[str, Any] = {"scope": ctx.fingerprint}
        if moment is not None:
            key_params["at"] = moment.isoformat()
        key = make_partitioned_key(SESSION_RUNTIME_NAMESPACE, "session_id", session_id, **key_params)

        async def produce() -> dict[str, Any]:
            async def work(db: AsyncSession) -> dict[str, Any]:
                session = await _load_session(db, session_id)
                assert_workspace_permission(session.company_id, ctx)
                snapshot = project(
                    session, session.rotations, session.signups, moment or self._clock()
                )
                return SessionRuntime(
                    session=SessionRead.model_validate(session), runtime=snapshot
                ).model_dump()

            return await self._uow.read(work)

        cached = await self._cache.remember(key, SESSION_RUNTIME_TTL_SECONDS, produce)
        return SessionRuntime.model_validate(cached)
