"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from macro_tracker.adapters.openai_extraction_client import OpenAIExtractionClient
from macro_tracker.adapters.sqlite_entry_repository import SqliteEntryRepository
from macro_tracker.adapters.sqlite_goals_repository import SqliteGoalsRepository
from macro_tracker.adapters.sqlite_store import SqliteStore
from macro_tracker.config import Settings, resolve_db_path
from macro_tracker.services.extraction import ExtractionService
from macro_tracker.services.goals import GoalsService
from macro_tracker.services.ledger import LedgerService
from macro_tracker.services.nutrition_log import NutritionLogService
from macro_tracker.services.summary import SummaryService
from macro_tracker.tools import NutritionTools


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: SqliteStore
    ledger_service: LedgerService
    goals_service: GoalsService
    summary_service: SummaryService
    nutrition_log_service: NutritionLogService | None
    tools: NutritionTools
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = SqliteStore.open(resolve_db_path(resolved_settings))
    ledger_service = LedgerService(SqliteEntryRepository(store))
    goals_service = GoalsService(SqliteGoalsRepository(store))
    summary_service = SummaryService(ledger=ledger_service, goals_service=goals_service)

    extraction_client: OpenAIExtractionClient | None = None
    nutrition_log_service: NutritionLogService | None = None
    if resolved_settings.openai_api_key:
        extraction_client = OpenAIExtractionClient.create(
            resolved_settings.openai_api_key,
            timeout=resolved_settings.extraction_timeout_seconds,
        )
        nutrition_log_service = NutritionLogService(
            extraction_service=ExtractionService(
                client=extraction_client,
                model=resolved_settings.openai_model,
                store=resolved_settings.openai_store,
            ),
            ledger=ledger_service,
            summary_service=summary_service,
        )

    tools = NutritionTools(
        ledger=ledger_service,
        goals_service=goals_service,
        summary_service=summary_service,
        nutrition_log_service=nutrition_log_service,
    )

    async def close_resources() -> None:
        if extraction_client is not None:
            await extraction_client.close()
        store.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        ledger_service=ledger_service,
        goals_service=goals_service,
        summary_service=summary_service,
        nutrition_log_service=nutrition_log_service,
        tools=tools,
        close_resources=close_resources,
    )
