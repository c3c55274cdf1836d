"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager
from db.store import DocumentStore


class Services:
    """Container for all application services.

    The document store is built once here and handed to every engine, which
    keeps tests free to inject a store over an in-memory database.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If provided, config is
            only used for engine settings.
    """

    def __init__(self, config: Config, db_manager=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)
        self.store = DocumentStore(self.db_manager)

        # Lazy import to avoid circular dependencies
        from services.categories import CategoryService
        from services.normalizer import TypeNormalizer
        from services.backfill import ParentBackfill, TransactionBackfill
        from services.seeder import TreeSeeder
        from services.salary import SalarySeeder

        self.categories = CategoryService(self.store)
        self.normalizer = TypeNormalizer(self.store, config.default_type)
        self.parent_backfill = ParentBackfill(self.store, config.batch_size)
        self.transaction_backfill = TransactionBackfill(self.store, config.batch_size)
        self.tree_seeder = TreeSeeder(self.categories)
        self.salary_seeder = SalarySeeder(self.categories, config.salary_placeholder)
