"""Process-wide collaborators, constructed once by the entry point."""

from dataclasses import dataclass, field

from loguru import logger

from app.app_config import AppEnvironConfig, get_app_environ_config
from app.domain.admin.admin_directory import AdminDirectory
from app.domain.admin.admin_domain import AdminService
from app.domain.live.event._store import EventStore
from app.domain.live.event.event_domain import EventService
from app.schemas import init_beanie_odm
from app.services.integrations.identity_service import IdentityService
from app.services.integrations.livekit_service import LivekitService
from app.shared.storage.mongo import MongoManager


@dataclass
class AppContext:
    cfg: AppEnvironConfig
    mongo: MongoManager
    livekit: LivekitService
    identity: IdentityService
    admins: AdminDirectory = field(default_factory=AdminDirectory)
    store: EventStore = field(default_factory=EventStore)
    events: EventService = field(init=False)
    admin_service: AdminService = field(init=False)

    def __post_init__(self) -> None:
        self.events = EventService(self.store, self.admins, self.livekit)
        self.admin_service = AdminService(self.admins, self.identity, self.store)

    @classmethod
    async def open(cls, cfg: AppEnvironConfig | None = None) -> "AppContext":
        """Connect to MongoDB, initialize the ODM and wire the services."""
        cfg = cfg or get_app_environ_config()
        mongo = MongoManager()
        client = mongo.get_client(cfg.MONGO_LABEL)
        await init_beanie_odm(client.get_database(cfg.MONGO_DATABASE))
        logger.info("Beanie ODM initialized on label '{}'", cfg.MONGO_LABEL)

        return cls(
            cfg=cfg,
            mongo=mongo,
            livekit=LivekitService(cfg),
            identity=IdentityService(cfg),
        )

    def close(self) -> None:
        self.mongo.close_all()


__all__ = ["AppContext"]
