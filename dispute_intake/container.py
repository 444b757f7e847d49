from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from dispute_intake.cases import CaseManager
from dispute_intake.config import AppConfig, WebhookConfig
from dispute_intake.documents import DocumentManager
from dispute_intake.ethoca_webhook import EthocaWebhookProcessor
from dispute_intake.outcome_routes import OutcomeRouteRegistry
from dispute_intake.repositories.cases import InMemoryCasesRepository
from dispute_intake.repositories.documents import InMemoryDocumentsRepository


@dataclass
class ServiceContainer:
    app_config: AppConfig
    webhook_config: WebhookConfig
    cases_repository: InMemoryCasesRepository
    documents_repository: InMemoryDocumentsRepository
    cases: CaseManager
    documents: DocumentManager
    webhook: EthocaWebhookProcessor

    @classmethod
    def build(
        cls,
        *,
        environ: Mapping[str, str] | None = None,
        routes: OutcomeRouteRegistry | None = None,
    ) -> "ServiceContainer":
        app_config = AppConfig.from_env(environ)
        webhook_config = WebhookConfig.from_env(environ)
        cases_repository = InMemoryCasesRepository()
        documents_repository = InMemoryDocumentsRepository()
        return cls(
            app_config=app_config,
            webhook_config=webhook_config,
            cases_repository=cases_repository,
            documents_repository=documents_repository,
            cases=CaseManager(cases_repository),
            documents=DocumentManager(documents_repository),
            webhook=EthocaWebhookProcessor(config=webhook_config, routes=routes),
        )

    def reset(self) -> None:
        self.cases_repository.reset()
        self.documents_repository.reset()
        self.webhook.reset()
