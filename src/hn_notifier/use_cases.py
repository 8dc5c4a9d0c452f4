"""Business logic use cases."""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from functools import partial
from typing import Awaitable, Callable, Optional

from hn_notifier.adapters.notifications import WebhookAlerter
from hn_notifier.core import (
    CycleReport,
    HNNotifierError,
    IgnorableRemoteError,
    IgnoredItemError,
    LinkPreview,
    LinkPreviewer,
    Notifier,
    Outcome,
    StorageError,
    Story,
    StoryNotFoundError,
    StoryRecord,
    StorySource,
    StoryStore,
)

logger = logging.getLogger(__name__)

BATCH_SIZE = 30
RETENTION = timedelta(hours=24)

Job = Callable[[], Awaitable[Outcome]]


class ReconciliationService:
    """Keep chat messages in sync with the Hacker News top stories.

    Every invocation spawns one task per story id and waits for all of them
    before returning. Tasks share nothing but the store, and a failing task
    never affects the others.
    """

    def __init__(
        self,
        source: StorySource,
        store: StoryStore,
        notifier: Notifier,
        channel: str,
        previewer: Optional[LinkPreviewer] = None,
        alerter: Optional[WebhookAlerter] = None,
        batch_size: int = BATCH_SIZE,
        retention: timedelta = RETENTION,
        max_concurrency: int = 10,
        in_flight_guard: bool = False,
    ) -> None:
        self.source = source
        self.store = store
        self.notifier = notifier
        self.channel = channel
        self.previewer = previewer
        self.alerter = alerter
        self.batch_size = batch_size
        self.retention = retention
        self.max_concurrency = max_concurrency
        # Overlapping cycles in one process may otherwise send the same story
        # twice; across processes the race remains.
        self.in_flight_guard = in_flight_guard
        self._in_flight: set[int] = set()
        self._semaphore: Optional[asyncio.Semaphore] = None

    async def poll(self) -> CycleReport:
        """Send new top stories and edit the ones already posted.

        Raises:
            FetchError: If the list of top stories cannot be fetched
        """
        return await self._reconcile(send_unknown=True)

    async def refresh(self) -> CycleReport:
        """Edit the already posted top stories, never sending new ones."""
        return await self._reconcile(send_unknown=False)

    async def cleanup(self, now: Optional[datetime] = None) -> CycleReport:
        """Delete messages of stories not saved within the retention window."""
        now = now or datetime.now(timezone.utc)
        report = CycleReport()
        try:
            stale = self.store.list_stale(now - self.retention)
        except StorageError as e:
            logger.error("could not scan store for stale stories: %s", e)
            report.record(Outcome.FAILED)
            return report

        logger.info("cleanup: %d stale stories", len(stale))
        jobs = [(record.id, partial(self._delete_story, record)) for record in stale]
        await self._dispatch(jobs, report)
        logger.info("cleanup done: %s", report.summary())
        return report

    async def _reconcile(self, send_unknown: bool) -> CycleReport:
        report = CycleReport()
        story_ids = await self.source.list_top_ids(self.batch_size)
        lookups = self.store.get_many(story_ids)

        jobs: list[tuple[int, Job]] = []
        for story_id, found in lookups.items():
            if isinstance(found, StoryRecord):
                jobs.append((story_id, partial(self._edit_story, found)))
            elif isinstance(found, StoryNotFoundError):
                if send_unknown:
                    jobs.append((story_id, partial(self._send_story, story_id)))
            else:
                logger.error("story %d: store lookup failed: %s", story_id, found)
                report.record(Outcome.FAILED)

        logger.info(
            "%s: %d top stories, %d known",
            "poll" if send_unknown else "refresh",
            len(lookups),
            sum(1 for found in lookups.values() if isinstance(found, StoryRecord)),
        )
        await self._dispatch(jobs, report)
        logger.info("%s done: %s", "poll" if send_unknown else "refresh", report.summary())
        return report

    async def _dispatch(self, jobs: list[tuple[int, Job]], report: CycleReport) -> None:
        """Run every job concurrently and wait for all of them."""
        if not jobs:
            return
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.max_concurrency)

        results = await asyncio.gather(
            *(self._run(story_id, job) for story_id, job in jobs),
            return_exceptions=True,
        )
        for (story_id, _), result in zip(jobs, results):
            if isinstance(result, BaseException):
                logger.error("story %d: unexpected error", story_id, exc_info=result)
                report.record(Outcome.FAILED)
            else:
                report.record(result)

    async def _run(self, story_id: int, job: Job) -> Outcome:
        if self.in_flight_guard:
            if story_id in self._in_flight:
                logger.info("story %d: already in flight, skipping", story_id)
                return Outcome.SKIPPED
            self._in_flight.add(story_id)

        try:
            async with self._semaphore:
                return await job()
        except IgnoredItemError:
            logger.debug("story %d ignored", story_id)
            return Outcome.IGNORED
        except HNNotifierError as e:
            logger.error("story %d: %s", story_id, e)
            return Outcome.FAILED
        finally:
            if self.in_flight_guard:
                self._in_flight.discard(story_id)

    async def _send_story(self, story_id: int) -> Outcome:
        story = await self.source.fetch_detail(story_id)
        if story.should_ignore():
            raise IgnoredItemError(story_id)

        try:
            existing = self.store.get(story_id)
        except StoryNotFoundError:
            pass
        else:
            logger.warning(
                "story %d already posted as %s, not sending again", story_id, existing.message_id
            )
            return Outcome.SKIPPED

        payload = self.notifier.build_payload(story, await self._preview(story))
        story.message_id = await self.notifier.send(self.channel, payload)
        logger.info("sent story %d: %s", story.id, story.title)
        return await self._save(story, Outcome.SENT)

    async def _edit_story(self, record: StoryRecord) -> Outcome:
        logger.info("editing message: id %d, message id %s", record.id, record.message_id)
        story = await self.source.fill_details(record.to_story())
        if story.should_ignore():
            raise IgnoredItemError(record.id)

        payload = self.notifier.build_payload(story, await self._preview(story))
        await self.notifier.edit(self.channel, story.message_id, payload)
        logger.info("edited story %d: %s", story.id, story.title)
        return await self._save(story, Outcome.EDITED)

    async def _delete_story(self, record: StoryRecord) -> Outcome:
        logger.info("deleting message: id %d, message id %s", record.id, record.message_id)
        if record.message_id:
            try:
                await self.notifier.remove(self.channel, record.message_id)
            except IgnorableRemoteError as e:
                logger.info("story %d: message already gone: %s", record.id, e)

        try:
            self.store.delete(record.id)
        except StorageError as e:
            await self._diverged(record.id, f"message deleted but record kept: {e}")
            return Outcome.DIVERGED
        return Outcome.DELETED

    async def _save(self, story: Story, outcome: Outcome) -> Outcome:
        try:
            self.store.put(story)
        except StorageError as e:
            await self._diverged(story.id, f"message {story.message_id} {outcome.value} but not saved: {e}")
            return Outcome.DIVERGED
        return outcome

    async def _diverged(self, story_id: int, detail: str) -> None:
        # Chat and store disagree now; nothing reconciles this automatically.
        logger.critical("story %d diverged: %s", story_id, detail)
        if self.alerter:
            await self.alerter.alert(f"story {story_id} diverged: {detail}")

    async def _preview(self, story: Story) -> Optional[LinkPreview]:
        if self.previewer is None:
            return None
        return await self.previewer.preview(story.url)
