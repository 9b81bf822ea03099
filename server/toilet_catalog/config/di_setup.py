from config import Config
from ..core.di_container import DIContainer

_is_initialized = False


def setup_dependencies():
    """Register all dependencies in the container."""
    global _is_initialized

    container = DIContainer.get_instance()
    if _is_initialized:
        return container

    from ..model.region import RegionRegistry
    from ..providers.base_provider import BaseDirectoryProvider
    from ..providers.seven_eleven.emap_provider import SevenElevenEmapProvider
    from ..repo.mongo.interfaces import ToiletStoreRepositoryInterface
    from ..repo.mongo.toilet_store_repository import ToiletStoreRepository
    from ..service.catalog_sync_service import CatalogSyncService

    # Repository and provider are built on first resolve
    _singletons = {}

    def lazy_singleton(key, factory):
        def resolve(container):
            if key not in _singletons:
                _singletons[key] = factory(container)
            return _singletons[key]
        return resolve

    container.register(RegionRegistry.__name__, RegionRegistry())
    container.register(
        ToiletStoreRepositoryInterface.__name__,
        lazy_singleton("repo", lambda c: ToiletStoreRepository())
    )
    container.register(
        BaseDirectoryProvider.__name__,
        lazy_singleton("provider", lambda c: SevenElevenEmapProvider())
    )

    def create_catalog_sync_service(container):
        return CatalogSyncService(
            repository=container.resolve(ToiletStoreRepositoryInterface.__name__),
            provider=container.resolve(BaseDirectoryProvider.__name__),
            registry=container.resolve(RegionRegistry.__name__),
            batch_size=Config.SYNC_BATCH_SIZE,
            region_delay_seconds=Config.SYNC_REGION_DELAY_MS / 1000,
        )

    container.register(CatalogSyncService.__name__, create_catalog_sync_service)

    _is_initialized = True
    return container


def init_di():
    """Initialize the dependency injection system.
    Call this function from your application's entry point."""
    return setup_dependencies()
