from pydantic import BaseModel

from shared.models.config import IndexerConfig


class ConfigurationRequest(BaseModel):
    url: str | None = None
    api_key: str | None = None
    index_name: str | None = None

    def to_indexer_config(self) -> IndexerConfig:
        return IndexerConfig(url=self.url, api_key=self.api_key, index_name=self.index_name)
