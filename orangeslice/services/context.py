# orangeslice/services/context.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from orangeslice.common.logging import configure_logging, get_logger
from orangeslice.common.settings import Settings, get_settings
from orangeslice.common.status_log import StatusLog
from orangeslice.database.core.main import Base, build_engine, build_session_factory
from orangeslice.database.seed import seed_default_tags
from orangeslice.domain.policies.editor import EditorRegistry
from orangeslice.domain.policies.enricher import RelationshipEnricher
from orangeslice.domain.ports.auth import AuthenticatorPort
from orangeslice.services.admin.workflow import EntryWorkflow
from orangeslice.services.auth.hosted import HostedAuthenticator
from orangeslice.services.gateway.sqlalchemy_gateway import SqlAlchemyDataGateway
from orangeslice.services.mirror.local_mirror import LocalMirror

logger = get_logger(__name__)


@dataclass
class AppContext:
    """
    Everything the service needs at runtime, built once at startup and torn
    down at exit. Routes reach it through FastAPI dependencies; nothing else
    holds these objects.
    """
    settings: Settings
    engine: Engine
    sessions: sessionmaker[Session]
    gateway: SqlAlchemyDataGateway
    enricher: RelationshipEnricher
    status_log: StatusLog
    mirror: LocalMirror
    editors: EditorRegistry
    workflow: EntryWorkflow
    authenticator: AuthenticatorPort
    started: bool = False

    @classmethod
    def create(
        cls,
        settings: Optional[Settings] = None,
        *,
        authenticator: Optional[AuthenticatorPort] = None,
    ) -> "AppContext":
        cfg = settings or get_settings()
        configure_logging(cfg.log_level)

        engine = build_engine(cfg)
        sessions = build_session_factory(engine)
        gateway = SqlAlchemyDataGateway(sessions)
        enricher = RelationshipEnricher()
        status_log = StatusLog(maxlen=cfg.catalog.status_log_size)
        mirror = LocalMirror(
            gateway,
            enricher,
            status_log,
            resubscribe_interval=cfg.catalog.resubscribe_interval_sec,
        )
        editors = EditorRegistry()
        return cls(
            settings=cfg,
            engine=engine,
            sessions=sessions,
            gateway=gateway,
            enricher=enricher,
            status_log=status_log,
            mirror=mirror,
            editors=editors,
            workflow=EntryWorkflow(gateway, editors, status_log),
            authenticator=authenticator or HostedAuthenticator(cfg.auth),
        )

    def start(self) -> "AppContext":
        if self.started:
            return self
        if self.settings.db.create_all:
            Base.metadata.create_all(bind=self.engine)
        if self.settings.features.seed_default_tags:
            seed_default_tags(self.gateway)
        if self.settings.features.mirror_enabled:
            self.mirror.start()
        self.started = True
        logger.info("%s started (%s)", self.settings.app_name, self.settings.app_env)
        return self

    def close(self) -> None:
        self.mirror.stop()
        self.gateway.close()
        self.engine.dispose()
        if self.started:
            logger.info("%s stopped", self.settings.app_name)
        self.started = False
