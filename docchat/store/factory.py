from docchat.config.settings import Settings
from docchat.store.base import BaseConversationStore
from docchat.store.memory_store import InMemoryConversationStore
from docchat.store.postgres_store import PostgresConversationStore


class ConversationStoreFactory:
    """Creates the conversation store selected by settings.store_backend."""

    BACKENDS: dict[str, type[BaseConversationStore]] = {
        "memory": InMemoryConversationStore,
        "postgres": PostgresConversationStore,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseConversationStore:
        backend = settings.store_backend.lower()
        store_cls = cls.BACKENDS.get(backend)
        if store_cls is None:
            raise ValueError(
                f"Unknown store backend '{backend}'. Choose from: {list(cls.BACKENDS)}"
            )
        return store_cls()
