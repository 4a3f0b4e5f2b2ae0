import io
import json
import zipfile
from contextlib import suppress
from dataclasses import asdict
from datetime import datetime, timezone
from typing import Iterable, Optional

from monetize_ai.export import to_delimited_text
from monetize_ai.types import MonthlyResult, SavedIdea, SimulationParams

UNTITLED_IDEA = "Untitled Strategy"
BUNDLE_SCHEMA_VERSION = 1


class IdeaStore:
    """In-memory list of saved write-ups, newest first."""

    def __init__(self, ideas: Optional[Iterable[SavedIdea]] = None):
        self._ideas: list[SavedIdea] = list(ideas or [])

    def __len__(self) -> int:
        return len(self._ideas)

    @property
    def ideas(self) -> tuple[SavedIdea, ...]:
        return tuple(self._ideas)

    def _new_id(self, now: datetime) -> str:
        stamp = int(now.timestamp() * 1000)
        taken = {idea.id for idea in self._ideas}
        while str(stamp) in taken:
            stamp += 1
        return str(stamp)

    def save(self, title: str, content: str, *, now: Optional[datetime] = None) -> SavedIdea:
        now = now or datetime.now()
        idea = SavedIdea(
            id=self._new_id(now),
            title=title.strip() or UNTITLED_IDEA,
            content=content,
            date=now.strftime("%Y-%m-%d"),
        )
        self._ideas.insert(0, idea)
        return idea

    def get(self, idea_id: str) -> Optional[SavedIdea]:
        return next((idea for idea in self._ideas if idea.id == idea_id), None)

    def delete(self, idea_id: str) -> bool:
        before = len(self._ideas)
        self._ideas = [idea for idea in self._ideas if idea.id != idea_id]
        return len(self._ideas) != before


def collect_session_bundle(
    params: SimulationParams,
    ideas: Iterable[SavedIdea],
    results: Optional[Iterable[MonthlyResult]] = None,
) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        meta = {
            "schema_version": BUNDLE_SCHEMA_VERSION,
            "app_name": "MonetizeAI",
            "exported_at": datetime.now(timezone.utc).isoformat(),
        }
        zf.writestr("metadata.json", json.dumps(meta, indent=2))
        zf.writestr("params.json", json.dumps(params.to_dict(), indent=2))
        zf.writestr("ideas.json", json.dumps([asdict(i) for i in ideas], indent=2))

        # simulation
        if results is not None:
            zf.writestr("simulation.csv", to_delimited_text(results))

    buf.seek(0)
    return buf.getvalue()


def apply_session_bundle(file_like) -> tuple[Optional[SimulationParams], list[SavedIdea]]:
    """Read a bundle written by `collect_session_bundle`.

    Missing or unreadable members are skipped. A bundle from a newer schema
    raises ``ValueError``.
    """
    params: Optional[SimulationParams] = None
    ideas: list[SavedIdea] = []

    with zipfile.ZipFile(file_like, mode="r") as zf:
        names = set(zf.namelist())

        # metadata
        if "metadata.json" in names:
            meta = json.loads(zf.read("metadata.json"))
            if int(meta.get("schema_version", 0)) != BUNDLE_SCHEMA_VERSION:
                raise ValueError("Unsupported bundle version. Please update the app.")

        # params
        with suppress(KeyError, TypeError, ValueError):
            raw = json.loads(zf.read("params.json"))
            if isinstance(raw, dict):
                params = SimulationParams.from_dict(raw)

        # ideas
        with suppress(KeyError, ValueError):
            raw_ideas = json.loads(zf.read("ideas.json"))
            for item in raw_ideas if isinstance(raw_ideas, list) else []:
                with suppress(TypeError, KeyError):
                    ideas.append(
                        SavedIdea(
                            id=str(item["id"]),
                            title=str(item["title"]),
                            content=str(item["content"]),
                            date=str(item["date"]),
                        )
                    )

    return params, ideas
