"""
Feeding schedule engine.

Orchestrates the block and entry repositories, timezone conversion and the
elimination policy:
- lazy, calendar-aligned materialization of entries (initial creation,
  per-week fill, explicit forward extension) without duplicate days
- cascading volume recompute while a block is eliminating
- dense 1..N block numbering under deletes

Every multi-row operation runs in a single transaction on the supplied
session and is rolled back in full on failure. Nothing is retried here.
"""

import logging
import math
from contextlib import contextmanager
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Iterable, List, Optional, Set, Tuple, Union
from uuid import UUID

from dateutil.relativedelta import relativedelta
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.config import ScheduleConfig, Settings
from app.exceptions import (
    ConflictError,
    NotFoundError,
    ScheduleError,
    ServiceValidationError,
)
from domain.models import FeedingBlock, FeedingEntry
from domain.schemas import (
    BlockWithEntriesResponse,
    FeedingBlockResponse,
    FeedingEntryResponse,
)
from repositories import FeedingBlockRepository, FeedingEntryRepository, UserRepository
from services import elimination_policy, timezone_service

logger = logging.getLogger("feedingschedule.schedule")

Window = Tuple[Union[datetime, date, str], Union[datetime, date, str]]


def _translate_integrity_error(exc: IntegrityError, action: str) -> ScheduleError:
    """Map a constraint violation to Conflict (uniqueness) or BadRequest (anything else)"""
    orig = getattr(exc, "orig", None)
    pgcode = getattr(orig, "pgcode", None)
    text = str(orig if orig is not None else exc).lower()
    if pgcode == "23505" or "unique" in text or "duplicate" in text:
        return ConflictError(
            f"Could not {action}: a conflicting row already exists",
            code="DUPLICATE",
        )
    return ServiceValidationError(
        f"Could not {action}: constraint violated", code="CONSTRAINT_VIOLATION"
    )


@contextmanager
def _transaction(db: Session, action: str):
    """Commit on success; roll back and re-raise (translated) on failure"""
    try:
        yield
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Constraint violation while trying to %s: %s", action, e.orig)
        raise _translate_integrity_error(e, action) from e
    except ScheduleError:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.exception("Error while trying to %s", action)
        raise


def _validate_volume(value) -> float:
    """Coerce a requested volume to a finite, non-negative float"""
    if value is None or isinstance(value, bool):
        raise ServiceValidationError(
            "volume_in_ounces must be a number", code="INVALID_VOLUME"
        )
    if isinstance(value, (int, float, Decimal)):
        volume = float(value)
    elif isinstance(value, str):
        try:
            volume = float(value.strip())
        except ValueError:
            raise ServiceValidationError(
                f"volume_in_ounces must be a number, got {value!r}",
                code="INVALID_VOLUME",
            )
    else:
        raise ServiceValidationError(
            "volume_in_ounces must be a number", code="INVALID_VOLUME"
        )
    if not math.isfinite(volume) or volume < 0:
        raise ServiceValidationError(
            f"volume_in_ounces must be >= 0, got {value}", code="INVALID_VOLUME"
        )
    return volume


class ScheduleService:
    """Stateless feeding schedule engine; only holds its configuration."""

    def __init__(self, config: Optional[ScheduleConfig] = None):
        self.config = config or ScheduleConfig()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ScheduleService":
        return cls(settings.schedule_config())

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _now(now: Optional[datetime]) -> datetime:
        if now is None:
            return datetime.now(timezone.utc)
        if now.tzinfo is None:
            return now.replace(tzinfo=timezone.utc)
        return now

    @staticmethod
    def _get_owned_block(
        db: Session, block_id: UUID, username: str, with_lock: bool = False
    ) -> FeedingBlock:
        block = FeedingBlockRepository(db).get_by_id_and_user(
            block_id, username, with_lock=with_lock
        )
        if not block:
            raise NotFoundError("Feeding block not found", details={"block_id": str(block_id)})
        return block

    @staticmethod
    def _get_owned_entry(db: Session, entry_id: UUID, username: str) -> FeedingEntry:
        entry = FeedingEntryRepository(db).get_by_id_and_user(entry_id, username)
        if not entry:
            raise NotFoundError("Feeding entry not found", details={"entry_id": str(entry_id)})
        return entry

    def _window(
        self, window: Optional[Window], zone: str, now: Optional[datetime]
    ) -> Tuple[datetime, datetime]:
        if window is None:
            return timezone_service.week_range(
                self._now(now), zone, self.config.week_start_day
            )
        start, end = window
        return timezone_service.to_utc(start, zone), timezone_service.to_utc(end, zone)

    @staticmethod
    def _new_entry(block_id: UUID, day: date, tod: time, zone: str) -> FeedingEntry:
        return FeedingEntry(
            block_id=block_id,
            feeding_time=timezone_service.resolve_local(day, tod, zone),
            feeding_day=day,
            volume_in_ounces=None,
            completed=False,
        )

    @staticmethod
    def _occupied_days(
        db: Session, block_id: UUID, first_day: date, last_day: date, zone: str
    ) -> Set[date]:
        """Days already holding an entry, by stored day and by local day of its time"""
        entry_repo = FeedingEntryRepository(db)
        taken = entry_repo.days_with_entries(block_id, first_day, last_day)
        in_range = entry_repo.entries_in_range(
            block_id,
            timezone_service.start_of_day(first_day, zone),
            timezone_service.start_of_day(last_day + timedelta(days=1), zone),
        )
        taken.update(
            timezone_service.local_date(e.feeding_time, zone) for e in in_range
        )
        return taken

    def _time_pattern(
        self, db: Session, block_id: UUID, before: datetime, zone: str
    ) -> time:
        """Local time-of-day of the latest entry before `before`, else the default"""
        previous = FeedingEntryRepository(db).most_recent_entry_before(block_id, before)
        if previous is None:
            return self.config.default_feeding_time
        return timezone_service.time_of_day(previous.feeding_time, zone)

    def _materialize(
        self,
        db: Session,
        block_id: UUID,
        days: Iterable[date],
        tod: time,
        zone: str,
        skip: Set[date] = frozenset(),
    ) -> List[FeedingEntry]:
        entries = [
            self._new_entry(block_id, day, tod, zone) for day in days if day not in skip
        ]
        if entries:
            FeedingEntryRepository(db).add_all(entries)
        return entries

    def _entry_response(
        self, entry: FeedingEntry, block: FeedingBlock, zone: str
    ) -> FeedingEntryResponse:
        """Entry as returned to callers, with the glide path filled in for unrecorded days"""
        response = FeedingEntryResponse.model_validate(entry)
        if (
            entry.volume_in_ounces is None
            and block.is_eliminating
            and block.has_elimination_baseline()
        ):
            days = elimination_policy.days_between(
                block.elimination_start_date, entry.feeding_time, zone
            )
            group = (
                elimination_policy.group_number(days, self.config.group_days)
                if days >= 0
                else -1
            )
            # groups before the rebase point were fixed when the block rebased
            if group >= block.current_group:
                projected = elimination_policy.glide_volume(
                    block.baseline_volume,
                    block.current_group,
                    group,
                    self.config.decrement,
                )
                response = response.model_copy(update={"volume_in_ounces": projected})
        return response

    def _block_with_entries(
        self, block: FeedingBlock, entries: Iterable[FeedingEntry], zone: str
    ) -> BlockWithEntriesResponse:
        ordered = sorted(entries, key=lambda e: e.feeding_time)
        return BlockWithEntriesResponse(
            block=FeedingBlockResponse.model_validate(block),
            entries=[self._entry_response(e, block, zone) for e in ordered],
        )

    def _block_with_window(
        self, db: Session, block: FeedingBlock, start: datetime, end: datetime, zone: str
    ) -> BlockWithEntriesResponse:
        entries = FeedingEntryRepository(db).entries_in_range(block.id, start, end)
        return self._block_with_entries(block, entries, zone)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def create_block_with_entries(
        self,
        db: Session,
        username: str,
        is_eliminating: bool,
        zone: str,
        now: Optional[datetime] = None,
    ) -> BlockWithEntriesResponse:
        """
        Create the user's next block and materialize its initial entries.

        One entry per local calendar day is created from the start of the
        current local week through today plus the initial horizon
        (inclusive), each at the local clock time of creation.

        Args:
            db: Database session
            username: Owner of the new block
            is_eliminating: Whether the block starts in the elimination phase
            zone: Caller's IANA timezone
            now: Creation instant (defaults to the current time)

        Returns:
            BlockWithEntriesResponse holding only the current week's entries

        Raises:
            NotFoundError: If the user does not exist
            ConflictError: If a concurrent create took the same block number
        """
        timezone_service.get_zone(zone)
        now = self._now(now)
        if UserRepository(db).get_by_username(username) is None:
            raise NotFoundError("User not found", details={"username": username})

        today = timezone_service.local_date(now, zone)
        first_day = timezone_service.week_start_date(now, zone, self.config.week_start_day)
        last_day = today + relativedelta(months=self.config.initial_horizon_months)
        tod = timezone_service.time_of_day(now, zone)

        block_repo = FeedingBlockRepository(db)
        with _transaction(db, "create feeding block"):
            number = block_repo.max_block_number(username) + 1
            block = block_repo.create_block(username, number, bool(is_eliminating))
            entries = self._materialize(
                db, block.id, timezone_service.iter_days(first_day, last_day), tod, zone
            )

        logger.info(
            "Created block %s (#%d) for %s with %d entries (%s..%s)",
            block.id,
            block.number,
            username,
            len(entries),
            first_day,
            last_day,
        )
        week_start, week_end = timezone_service.week_range(
            now, zone, self.config.week_start_day
        )
        return self._block_with_window(db, block, week_start, week_end, zone)

    @staticmethod
    def list_blocks(db: Session, username: str) -> List[FeedingBlockResponse]:
        """All blocks of a user ordered by number"""
        blocks = FeedingBlockRepository(db).get_by_user(username)
        return [FeedingBlockResponse.model_validate(b) for b in blocks]

    def get_block(
        self, db: Session, block_id: UUID, username: str
    ) -> FeedingBlockResponse:
        """One block owned by `username`, else NotFoundError"""
        return FeedingBlockResponse.model_validate(
            self._get_owned_block(db, block_id, username)
        )

    def get_blocks_with_entries(
        self,
        db: Session,
        username: str,
        zone: str,
        start: Optional[Union[datetime, date, str]] = None,
        end: Optional[Union[datetime, date, str]] = None,
        now: Optional[datetime] = None,
    ) -> List[BlockWithEntriesResponse]:
        """
        Every block of a user with its entries in [start, end).

        Missing bounds default to the current local week.
        """
        default_start, default_end = self._window(None, zone, now)
        window_start = (
            default_start if start is None else timezone_service.to_utc(start, zone)
        )
        window_end = default_end if end is None else timezone_service.to_utc(end, zone)

        blocks = FeedingBlockRepository(db).get_by_user(username)
        entries = FeedingEntryRepository(db).entries_in_range_for_blocks(
            [b.id for b in blocks], window_start, window_end
        )
        by_block = {b.id: [] for b in blocks}
        for entry in entries:
            by_block[entry.block_id].append(entry)
        return [self._block_with_entries(b, by_block[b.id], zone) for b in blocks]

    def set_eliminating(
        self, db: Session, block_id: UUID, username: str, is_eliminating: bool
    ) -> FeedingBlockResponse:
        """Turn the elimination phase on or off; recorded elimination state is kept"""
        block = self._get_owned_block(db, block_id, username)
        with _transaction(db, "update feeding block"):
            block.is_eliminating = bool(is_eliminating)
            db.flush()
        logger.info("Block %s is_eliminating=%s", block_id, block.is_eliminating)
        return FeedingBlockResponse.model_validate(block)

    def delete_block(self, db: Session, block_id: UUID, username: str) -> UUID:
        """
        Delete a block (its entries cascade) and close the gap in numbering.

        Every remaining block of the user numbered above the deleted one moves
        down by one, in the same transaction as the delete.

        Returns:
            The deleted block id

        Raises:
            NotFoundError: If the block is absent or owned by another user
        """
        block_repo = FeedingBlockRepository(db)
        with _transaction(db, "delete feeding block"):
            block = self._get_owned_block(db, block_id, username, with_lock=True)
            number = block.number
            block_repo.delete(block)
            renumbered = block_repo.shift_numbers_down(username, number)

        logger.info(
            "Deleted block %s (#%d) for %s; renumbered %d blocks",
            block_id,
            number,
            username,
            renumbered,
        )
        return block_id

    # ------------------------------------------------------------------
    # Materialization
    # ------------------------------------------------------------------

    def entries_for_week(
        self,
        db: Session,
        block_id: UUID,
        username: str,
        week_start: Union[datetime, date, str],
        zone: str,
        week_end: Optional[Union[datetime, date, str]] = None,
    ) -> List[FeedingEntryResponse]:
        """
        Get the entries of one week, creating the days that are missing.

        When every day of the window already has an entry they are returned
        untouched. Otherwise each missing day gets a new, incomplete entry
        with no volume at the local time-of-day of the latest entry before
        the window (local noon by default). Existing entries are never
        modified.

        Args:
            db: Database session
            block_id: Block to read
            username: Caller; must own the block
            week_start: First local day of the window
            zone: Caller's IANA timezone
            week_end: Exclusive end of the window (default: 7 local days later)

        Returns:
            Entries in [week_start, week_end) ordered by feeding time
        """
        block = self._get_owned_block(db, block_id, username)
        first_day = timezone_service.local_date(week_start, zone)
        start = timezone_service.start_of_day(first_day, zone)
        if week_end is None:
            end = timezone_service.start_of_day(first_day + timedelta(days=7), zone)
        else:
            end = timezone_service.to_utc(week_end, zone)

        days = [
            d
            for d in timezone_service.iter_days(
                first_day, timezone_service.local_date(end, zone)
            )
            if timezone_service.start_of_day(d, zone) < end
        ]
        entry_repo = FeedingEntryRepository(db)
        existing = entry_repo.entries_in_range(block.id, start, end)
        if days and len(existing) == len(days):
            return [self._entry_response(e, block, zone) for e in existing]

        with _transaction(db, "fill feeding week"):
            taken = self._occupied_days(db, block.id, days[0], days[-1], zone) if days else set()
            tod = self._time_pattern(db, block.id, start, zone)
            created = self._materialize(db, block.id, days, tod, zone, skip=taken)

        if created:
            logger.info(
                "Filled %d missing days for block %s starting %s",
                len(created),
                block.id,
                first_day,
            )
        entries = entry_repo.entries_in_range(block.id, start, end)
        return [self._entry_response(e, block, zone) for e in entries]

    def extend_entries_forward(
        self,
        db: Session,
        block_id: UUID,
        username: str,
        from_date: Union[datetime, date, str],
        zone: str,
    ) -> List[FeedingEntryResponse]:
        """
        Materialize one extension horizon of entries from `from_date`.

        Covers the local days from `from_date` through `from_date` plus the
        extension horizon, inclusive, skipping every day that already holds
        an entry (compared by local calendar day, not by instant).

        Returns:
            The newly created entries ordered by feeding time
        """
        block = self._get_owned_block(db, block_id, username)
        first_day = timezone_service.local_date(from_date, zone)
        last_day = first_day + relativedelta(months=self.config.extension_horizon_months)

        with _transaction(db, "extend feeding entries"):
            taken = self._occupied_days(db, block.id, first_day, last_day, zone)
            tod = self._time_pattern(
                db, block.id, timezone_service.start_of_day(first_day, zone), zone
            )
            created = self._materialize(
                db,
                block.id,
                timezone_service.iter_days(first_day, last_day),
                tod,
                zone,
                skip=taken,
            )

        logger.info(
            "Extended block %s by %d entries (%s..%s, %d days skipped)",
            block.id,
            len(created),
            first_day,
            last_day,
            len(taken),
        )
        created.sort(key=lambda e: e.feeding_time)
        return [self._entry_response(e, block, zone) for e in created]

    # ------------------------------------------------------------------
    # Time and volume updates
    # ------------------------------------------------------------------

    def _rebase(
        self,
        db: Session,
        block: FeedingBlock,
        entry: FeedingEntry,
        at: datetime,
        decision: elimination_policy.VolumeDecision,
        zone: str,
    ) -> int:
        """
        Move the block's elimination reference point to `decision`.

        Unrecorded entries from the elimination start day up to `at` are
        first stored at the glide path they were on, so they keep reading
        the same volume once the baseline changes. Returns how many were
        filled.
        """
        db.flush()
        earlier = FeedingEntryRepository(db).entries_in_range(
            block.id,
            timezone_service.day_boundary(block.elimination_start_date, zone),
            at,
        )
        filled = 0
        for other in earlier:
            if other.id == entry.id or other.volume_in_ounces is not None:
                continue
            days = elimination_policy.days_between(
                block.elimination_start_date, other.feeding_time, zone
            )
            group = elimination_policy.group_number(days, self.config.group_days)
            other.volume_in_ounces = elimination_policy.glide_volume(
                block.baseline_volume,
                block.current_group,
                group,
                self.config.decrement,
            )
            filled += 1

        FeedingBlockRepository(db).update_baseline(block, decision.volume, decision.group)
        logger.debug(
            "Fixed %d unrecorded entries of block %s before rebasing", filled, block.id
        )
        return filled

    def recompute_volume_for_time_change(
        self,
        db: Session,
        entry: FeedingEntry,
        block: FeedingBlock,
        new_time: datetime,
        zone: str,
    ) -> Optional[float]:
        """
        Volume an eliminating entry should hold once moved to `new_time`.

        Without an elimination baseline, or when `new_time` falls before the
        elimination start, the stored volume is returned unchanged. Otherwise
        the policy decides; a stored volume below the glide path rebases the
        block as a side effect.
        """
        if not block.has_elimination_baseline():
            return entry.volume_in_ounces

        days = elimination_policy.days_between(
            block.elimination_start_date, new_time, zone
        )
        if days < 0:
            return entry.volume_in_ounces

        group = elimination_policy.group_number(days, self.config.group_days)
        decision = elimination_policy.resolve_volume(
            entry.volume_in_ounces,
            block.baseline_volume,
            block.current_group,
            group,
            self.config.decrement,
        )
        if decision.rebase:
            self._rebase(db, block, entry, new_time, decision, zone)
            logger.debug(
                "Rebased block %s to %.2f oz at group %d after time change",
                block.id,
                decision.volume,
                decision.group,
            )
        return decision.volume

    def update_all_entry_times(
        self,
        db: Session,
        block_id: UUID,
        username: str,
        new_local_time: Union[datetime, str],
        zone: str,
        now: Optional[datetime] = None,
    ) -> BlockWithEntriesResponse:
        """
        Move every entry from the day of `new_local_time` onward to its time-of-day.

        Each affected entry keeps its calendar day. For an eliminating block
        every moved entry's volume is recomputed, since a move across a day
        boundary can change its group.

        Args:
            new_local_time: Naive local datetime (read in `zone`) or instant

        Returns:
            BlockWithEntriesResponse with the current local week's entries
        """
        block = self._get_owned_block(db, block_id, username)
        new_instant = timezone_service.to_utc(new_local_time, zone)
        from_day = timezone_service.local_date(new_instant, zone)
        tod = timezone_service.time_of_day(new_instant, zone)

        entry_repo = FeedingEntryRepository(db)
        with _transaction(db, "update feeding times"):
            entries = entry_repo.entries_from_day(block.id, from_day)
            for entry in entries:
                new_time = timezone_service.resolve_local(entry.feeding_day, tod, zone)
                if block.is_eliminating:
                    entry.volume_in_ounces = self.recompute_volume_for_time_change(
                        db, entry, block, new_time, zone
                    )
                entry.feeding_time = new_time
            db.flush()

        logger.info(
            "Moved %d entries of block %s to %s from %s",
            len(entries),
            block.id,
            tod.isoformat(),
            from_day,
        )
        start, end = self._window(None, zone, now)
        return self._block_with_window(db, block, start, end, zone)

    def start_elimination(
        self,
        db: Session,
        block_id: UUID,
        username: str,
        start: Union[datetime, date, str],
        baseline_volume,
        zone: str,
        week_window: Optional[Window] = None,
        now: Optional[datetime] = None,
    ) -> BlockWithEntriesResponse:
        """
        Record the elimination start and baseline and reset the group to 0.

        Stored entry volumes are left alone; unrecorded days read the glide
        path and later writes cascade it.

        Raises:
            NotFoundError: If the block is absent or owned by another user
            ServiceValidationError: If the baseline is not a number >= 0
        """
        baseline = _validate_volume(baseline_volume)
        start_instant = timezone_service.to_utc(start, zone)
        block = self._get_owned_block(db, block_id, username)

        with _transaction(db, "start elimination"):
            block.is_eliminating = True
            block.elimination_start_date = start_instant
            block.baseline_volume = baseline
            block.current_group = 0
            db.flush()

        logger.info(
            "Elimination started for block %s at %s with baseline %.2f oz",
            block.id,
            start_instant.isoformat(),
            baseline,
        )
        window_start, window_end = self._window(week_window, zone, now)
        return self._block_with_window(db, block, window_start, window_end, zone)

    def _apply_volume(
        self, db: Session, entry: FeedingEntry, block: FeedingBlock, volume: float, zone: str
    ) -> int:
        """Store `volume` on `entry` and carry it forward; returns entries touched after it"""
        if not block.is_eliminating:
            return FeedingEntryRepository(db).set_volume_from(
                block.id, entry.feeding_time, volume
            ) - 1

        if not block.has_elimination_baseline():
            block.elimination_start_date = entry.feeding_time
            block.baseline_volume = volume
            block.current_group = 0
            entry.volume_in_ounces = volume
            logger.debug(
                "Block %s elimination anchored at %s with %.2f oz",
                block.id,
                entry.feeding_time.isoformat(),
                volume,
            )
        else:
            days = elimination_policy.days_between(
                block.elimination_start_date, entry.feeding_time, zone
            )
            if days < 0:
                entry.volume_in_ounces = volume
            else:
                group = elimination_policy.group_number(days, self.config.group_days)
                decision = elimination_policy.resolve_volume(
                    volume,
                    block.baseline_volume,
                    block.current_group,
                    group,
                    self.config.decrement,
                )
                if decision.rebase:
                    self._rebase(db, block, entry, entry.feeding_time, decision, zone)
                    logger.debug(
                        "Rebased block %s to %.2f oz at group %d",
                        block.id,
                        decision.volume,
                        decision.group,
                    )
                elif decision.volume != volume:
                    logger.debug(
                        "Clamped entry %s from %.2f to %.2f oz", entry.id, volume, decision.volume
                    )
                entry.volume_in_ounces = decision.volume
        db.flush()
        return self._cascade_glide_path(db, entry, block, zone)

    def _cascade_glide_path(
        self, db: Session, entry: FeedingEntry, block: FeedingBlock, zone: str
    ) -> int:
        """Rewrite every later entry of an eliminating block to the glide path"""
        later = FeedingEntryRepository(db).entries_from(
            block.id, entry.feeding_time, inclusive=False
        )
        updated = 0
        for other in later:
            days = elimination_policy.days_between(
                block.elimination_start_date, other.feeding_time, zone
            )
            if days < 0:
                continue
            group = elimination_policy.group_number(days, self.config.group_days)
            other.volume_in_ounces = elimination_policy.glide_volume(
                block.baseline_volume,
                block.current_group,
                group,
                self.config.decrement,
            )
            updated += 1
        db.flush()
        return updated

    def update_entry_volume(
        self,
        db: Session,
        entry_id: UUID,
        username: str,
        new_volume,
        zone: str,
        week_window: Optional[Window] = None,
        now: Optional[datetime] = None,
    ) -> BlockWithEntriesResponse:
        """
        Record a volume on one entry and cascade it to later entries.

        A block that is not eliminating carries the value forward to every
        entry at or after this one. An eliminating block either anchors its
        elimination at this entry (first volume recorded), or applies the
        rebase/clamp policy to it; every later entry is then rewritten to the
        glide path. Earlier recorded volumes are never changed; a rebase first
        stores the old glide path on earlier unrecorded entries.

        Args:
            db: Database session
            entry_id: Entry to update
            username: Caller; must own the entry's block
            new_volume: Volume in ounces (number >= 0)
            zone: Caller's IANA timezone
            week_window: (start, end) of the entries to return
                (default: current local week)

        Returns:
            BlockWithEntriesResponse with the entries inside the window

        Raises:
            ServiceValidationError: If the volume is not a number >= 0
            NotFoundError: If the entry is absent or owned by another user
        """
        volume = _validate_volume(new_volume)
        timezone_service.get_zone(zone)
        entry = self._get_owned_entry(db, entry_id, username)
        block = entry.block

        with _transaction(db, "update feeding volume"):
            cascaded = self._apply_volume(db, entry, block, volume, zone)

        logger.info(
            "Set entry %s to %.2f oz; %d later entries updated",
            entry_id,
            entry.volume_in_ounces,
            cascaded,
        )
        start, end = self._window(week_window, zone, now)
        return self._block_with_window(db, block, start, end, zone)

    # ------------------------------------------------------------------
    # Single entries
    # ------------------------------------------------------------------

    def update_entry(
        self,
        db: Session,
        entry_id: UUID,
        username: str,
        zone: str,
        feeding_time: Optional[Union[datetime, str]] = None,
        volume_in_ounces=None,
        completed: Optional[bool] = None,
    ) -> FeedingEntryResponse:
        """
        Edit one entry's time, volume and/or completion flag atomically.

        A time change moves the entry to the new local day and, for an
        eliminating block, recomputes its volume. A volume change goes
        through the same cascade as update_entry_volume.

        Raises:
            ConflictError: If the new day already holds another entry
        """
        volume = None if volume_in_ounces is None else _validate_volume(volume_in_ounces)
        timezone_service.get_zone(zone)
        entry = self._get_owned_entry(db, entry_id, username)
        block = entry.block

        with _transaction(db, "update feeding entry"):
            if feeding_time is not None:
                new_time = timezone_service.to_utc(feeding_time, zone)
                if block.is_eliminating:
                    entry.volume_in_ounces = self.recompute_volume_for_time_change(
                        db, entry, block, new_time, zone
                    )
                entry.feeding_time = new_time
                entry.feeding_day = timezone_service.local_date(new_time, zone)
                db.flush()
            if completed is not None:
                entry.completed = bool(completed)
            if volume is not None:
                self._apply_volume(db, entry, block, volume, zone)
            db.flush()

        logger.info("Updated entry %s of block %s", entry_id, block.id)
        return self._entry_response(entry, block, zone)

    def delete_entry(self, db: Session, entry_id: UUID, username: str) -> UUID:
        """Delete one entry owned by `username`"""
        entry = self._get_owned_entry(db, entry_id, username)
        with _transaction(db, "delete feeding entry"):
            FeedingEntryRepository(db).delete(entry)
        logger.info("Deleted entry %s", entry_id)
        return entry_id
