"""Store of posted stories as individual YAML artifacts."""

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

import yaml

from hn_notifier.core.entities import Story, StoryRecord
from hn_notifier.core.errors import StorageError, StoryNotFoundError
from hn_notifier.core.interfaces import StoryStore

logger = logging.getLogger(__name__)


class YamlStoryStore(StoryStore):
    """Keep one YAML artifact per story under a fixed root directory.

    Every record lives at ``<storage_dir>/<root>/<id>.yaml``. Writes go
    through a temporary file and ``os.replace`` so each key is updated
    atomically; there are no transactions across keys.
    """

    def __init__(self, storage_dir: Path, root: str = "top_stories") -> None:
        self.storage_dir = storage_dir
        self.root = root
        self._ensure_structure()

    @property
    def root_dir(self) -> Path:
        return self.storage_dir / self.root

    def _ensure_structure(self) -> None:
        """Create directory structure for artifacts."""
        try:
            self.root_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"could not create store at {self.root_dir}: {e}") from e

    def get(self, story_id: int) -> StoryRecord:
        """Load a record by story id."""
        artifact_path = self._get_artifact_path(story_id)
        try:
            with open(artifact_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise StoryNotFoundError(story_id) from None
        except (OSError, yaml.YAMLError) as e:
            raise StorageError(f"could not load story {story_id}: {e}") from e

        return self._to_record(story_id, data)

    def get_many(self, story_ids: list[int]) -> dict[int, Union[StoryRecord, Exception]]:
        """Look up several ids at once.

        Returns:
            Mapping of id to either its record or the error raised for it
        """
        results: dict[int, Union[StoryRecord, Exception]] = {}
        for story_id in story_ids:
            try:
                results[story_id] = self.get(story_id)
            except (StoryNotFoundError, StorageError) as e:
                results[story_id] = e
        return results

    def put(
        self, story: Union[Story, StoryRecord], now: Optional[datetime] = None
    ) -> StoryRecord:
        """Save a record, refreshing its last save time."""
        record = story.to_record() if isinstance(story, Story) else story
        record.last_save = now or datetime.now(timezone.utc)
        if isinstance(story, Story):
            story.last_save = record.last_save

        artifact = {
            "id": record.id,
            "message_id": record.message_id,
            "last_save": record.last_save.isoformat(),
        }

        artifact_path = self._get_artifact_path(record.id)
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.root_dir, prefix=f".{record.id}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    yaml.safe_dump(artifact, f, allow_unicode=True, default_flow_style=False, sort_keys=False)
                os.replace(tmp_name, artifact_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"could not save story {record.id}: {e}") from e

        return record

    def delete(self, story_id: int) -> None:
        """Remove a record; removing a missing record is not an error."""
        try:
            self._get_artifact_path(story_id).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"could not delete story {story_id}: {e}") from e
        logger.info("story %d deleted from store", story_id)

    def list_stale(self, before: datetime) -> list[StoryRecord]:
        """Records whose last save is at or before the given time."""
        stale = []
        for record in self._iter_records():
            if record.last_save is None or record.last_save <= before:
                stale.append(record)
        return stale

    def list_records(self, limit: int = 20) -> list[StoryRecord]:
        """Most recently saved records first.

        Args:
            limit: Maximum number to return
        """
        records = sorted(
            self._iter_records(),
            key=lambda r: r.last_save or datetime.min.replace(tzinfo=timezone.utc),
            reverse=True,
        )
        return records[:limit]

    def get_stats(self) -> dict:
        """Get statistics about stored stories."""
        records = list(self._iter_records())
        saves = [r.last_save for r in records if r.last_save]
        return {
            "total_stored": len(records),
            "oldest_save": min(saves).isoformat() if saves else None,
            "newest_save": max(saves).isoformat() if saves else None,
        }

    def _iter_records(self):
        for artifact_path in self.root_dir.glob("*.yaml"):
            try:
                story_id = int(artifact_path.stem)
            except ValueError:
                logger.warning("skipping unexpected artifact %s", artifact_path.name)
                continue
            try:
                yield self.get(story_id)
            except StoryNotFoundError:
                # Removed by a concurrent delete.
                continue
            except StorageError as e:
                logger.warning("skipping unreadable artifact: %s", e)
                continue

    def _get_artifact_path(self, story_id: int) -> Path:
        return self.root_dir / f"{int(story_id)}.yaml"

    @staticmethod
    def _to_record(story_id: int, data: object) -> StoryRecord:
        if not isinstance(data, dict):
            raise StorageError(f"story {story_id}: malformed artifact")

        last_save = data.get("last_save")
        try:
            if isinstance(last_save, str):
                last_save = datetime.fromisoformat(last_save)
            if isinstance(last_save, datetime) and last_save.tzinfo is None:
                last_save = last_save.replace(tzinfo=timezone.utc)
        except ValueError as e:
            raise StorageError(f"story {story_id}: bad last_save {last_save!r}") from e

        return StoryRecord(
            id=story_id,
            message_id=str(data.get("message_id") or ""),
            last_save=last_save if isinstance(last_save, datetime) else None,
        )
