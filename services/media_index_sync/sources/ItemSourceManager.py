from shared.helper.HelperConfig import HelperConfig
from services.media_index_sync.sources.ItemSourceInterface import ItemSourceInterface


class ItemSourceManager:
    """Manager class to instantiate the configured item source."""

    def __init__(self, helper_config: HelperConfig):
        self.helper_config = helper_config
        self.logging = helper_config.get_logger()
        self.source = self._initialize_source()

    def _get_engine_from_env(self) -> str:
        """Read the item source engine from env configuration.

        Returns:
            str: Capitalised engine name (e.g. "Sqlite" or "Orm").
        """
        engine = self.helper_config.get_string_val("ITEM_SOURCE_ENGINE", default="sqlite")
        return engine.strip().lower().capitalize()

    def _initialize_source(self) -> ItemSourceInterface:
        """Instantiate the item source for the configured engine.

        Returns:
            ItemSourceInterface: The instantiated source.

        Raises:
            ValueError: If the engine is unsupported or cannot be imported.
        """
        engine = self._get_engine_from_env()
        class_name = f"ItemSource{engine}"
        try:
            module = __import__(
                f"services.media_index_sync.sources.{engine.lower()}.{class_name}",
                fromlist=[class_name],
            )
            source_class = getattr(module, class_name)
        except (ImportError, AttributeError) as e:
            raise ValueError("Unsupported item source '%s'. Error: %s" % (engine, e))
        source = source_class(helper_config=self.helper_config)
        self.logging.debug("Instantiated item source: %s", engine)
        return source

    def get_source(self) -> ItemSourceInterface:
        """Return the instantiated item source."""
        return self.source
