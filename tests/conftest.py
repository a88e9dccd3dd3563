"""Shared test fixtures."""

import json
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from macro_tracker.adapters.sqlite_entry_repository import SqliteEntryRepository
from macro_tracker.adapters.sqlite_goals_repository import SqliteGoalsRepository
from macro_tracker.adapters.sqlite_store import SqliteStore
from macro_tracker.config import Settings
from macro_tracker.containers import AppContainer
from macro_tracker.domain.entries import Entry
from macro_tracker.domain.extraction import ExtractedItem
from macro_tracker.domain.goals import Goals
from macro_tracker.services.extraction import ExtractionClient, ExtractionService
from macro_tracker.services.goals import GoalsRepository, GoalsService
from macro_tracker.services.ledger import EntryRepository, LedgerService
from macro_tracker.services.nutrition_log import NutritionLogService
from macro_tracker.services.summary import SummaryService
from macro_tracker.tools import NutritionTools


def make_item(  # noqa: PLR0913
    name: str = "Eggs",
    calories: float = 140,
    protein: float = 12,
    carbs: float = 1,
    fat: float = 10,
    fiber: float = 0,
    quantity: str = "2 large",
    confidence: str = "high",
) -> ExtractedItem:
    return ExtractedItem(
        name=name,
        quantity=quantity,
        calories=calories,
        protein=protein,
        carbs=carbs,
        fat=fat,
        fiber=fiber,
        confidence=confidence,
    )


def breakfast_items() -> list[ExtractedItem]:
    return [
        make_item(),
        make_item(
            name="Toast",
            calories=80,
            protein=3,
            carbs=15,
            fat=1,
            fiber=1,
            quantity="1 slice",
            confidence="medium",
        ),
    ]


@dataclass
class InMemoryEntryRepository(EntryRepository):
    """In-memory entry repository for tests."""

    entries: dict[str, Entry] = field(default_factory=dict)

    def create_entry(self, entry: Entry) -> None:
        self.entries[entry.id] = entry

    def get_entry(self, entry_id: str) -> Entry | None:
        return self.entries.get(entry_id)

    def delete_entry(self, entry_id: str) -> bool:
        return self.entries.pop(entry_id, None) is not None

    def list_entries(self, from_date: str, to_date: str) -> list[Entry]:
        matching = [
            entry
            for entry in self.entries.values()
            if from_date <= entry.date <= to_date
        ]
        return sorted(matching, key=lambda entry: entry.created_at)


@dataclass
class InMemoryGoalsRepository(GoalsRepository):
    """In-memory goals repository for tests."""

    goals: Goals | None = None
    saves: int = 0

    def get_goals(self) -> Goals | None:
        return self.goals

    def save_goals(self, goals: Goals) -> None:
        self.goals = goals
        self.saves += 1


@dataclass
class FakeExtractionClient(ExtractionClient):
    """Fake extraction client returning a fixed payload."""

    output: str = field(
        default_factory=lambda: json.dumps(
            {
                "items": [
                    {
                        "name": "Eggs",
                        "quantity": "2 large",
                        "calories": 140,
                        "protein": 12,
                        "carbs": 1,
                        "fat": 10,
                        "fiber": 0,
                        "confidence": "high",
                    },
                    {
                        "name": "Toast",
                        "quantity": "1 slice",
                        "calories": 80,
                        "protein": 3,
                        "carbs": 15,
                        "fat": 1,
                        "fiber": 1,
                        "confidence": "medium",
                    },
                ]
            }
        )
    )
    prompts: list[str] = field(default_factory=list)

    async def extract(
        self, *, model: str, store: bool, prompt: str, schema: dict[str, object]
    ) -> str:
        self.prompts.append(prompt)
        return self.output


class Clock:
    """Deterministic, strictly increasing timestamps."""

    def __init__(self) -> None:
        self.ticks = 0

    def __call__(self) -> str:
        self.ticks += 1
        return f"2026-01-15T08:00:00.{self.ticks:06d}+00:00"


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "macro-tracker" / "macros.db"


@pytest.fixture
def store(db_path: Path) -> Iterator[SqliteStore]:
    sqlite_store = SqliteStore.open(db_path)
    yield sqlite_store
    sqlite_store.close()


@pytest.fixture
def ledger(store: SqliteStore) -> LedgerService:
    return LedgerService(SqliteEntryRepository(store), clock=Clock())


@pytest.fixture
def goals_service(store: SqliteStore) -> GoalsService:
    return GoalsService(SqliteGoalsRepository(store))


@pytest.fixture
def summary_service(
    ledger: LedgerService, goals_service: GoalsService
) -> SummaryService:
    return SummaryService(ledger=ledger, goals_service=goals_service)


@pytest.fixture
def extraction_client() -> FakeExtractionClient:
    return FakeExtractionClient()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(state_dir=tmp_path / "state", openai_api_key=None)


@pytest.fixture
def container(
    settings: Settings,
    store: SqliteStore,
    ledger: LedgerService,
    goals_service: GoalsService,
    summary_service: SummaryService,
    extraction_client: FakeExtractionClient,
) -> AppContainer:
    nutrition_log_service = NutritionLogService(
        extraction_service=ExtractionService(
            client=extraction_client, model=settings.openai_model
        ),
        ledger=ledger,
        summary_service=summary_service,
    )
    tools = NutritionTools(
        ledger=ledger,
        goals_service=goals_service,
        summary_service=summary_service,
        nutrition_log_service=nutrition_log_service,
    )

    async def close_resources() -> None:
        store.close()

    return AppContainer(
        settings=settings,
        store=store,
        ledger_service=ledger,
        goals_service=goals_service,
        summary_service=summary_service,
        nutrition_log_service=nutrition_log_service,
        tools=tools,
        close_resources=close_resources,
    )
