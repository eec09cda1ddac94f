import pytest

from shared.clients.search.IndexSchemaInitializer import (
    DISPLAYED_ATTRIBUTES,
    EXTRA_DISPLAYED_ATTRIBUTES,
    RANKING_RULES,
    IndexSchemaInitializer,
)
from shared.clients.search.meilisearch.SearchClientMeilisearch import SearchClientMeilisearch
from shared.models.config import (
    ATTRIBUTES_TO_FILTER_ON,
    ATTRIBUTES_TO_SEARCH_ON,
    ATTRIBUTES_TO_SORT_ON,
    IndexerConfig,
)


@pytest.fixture
def initializer(helper_config) -> IndexSchemaInitializer:
    return IndexSchemaInitializer(helper_config, application_name="Jellyfin Media Server")


def test_index_name_falls_back_to_application_name(initializer):
    assert initializer.resolve_index_name(None) == "Jellyfin-Media-Server"
    assert initializer.resolve_index_name("   ") == "Jellyfin-Media-Server"
    assert initializer.resolve_index_name(" movies ") == "movies"


@pytest.mark.asyncio
async def test_creates_missing_index_and_applies_settings_in_order(initializer, helper_config, fake_meili):
    client = SearchClientMeilisearch(helper_config, base_url="http://meili:7700", transport=fake_meili.transport)
    await client.boot()

    index = await initializer.initialize(client, IndexerConfig(index_name="media"))

    assert index.uid == "media"
    assert index.primary_key == "guid"
    assert fake_meili.indexes == {"media": "guid"}
    assert [setting for _, setting, _ in fake_meili.settings] == [
        "filterable-attributes",
        "sortable-attributes",
        "searchable-attributes",
        "displayed-attributes",
        "ranking-rules",
    ]
    values = {setting: value for _, setting, value in fake_meili.settings}
    assert values["searchable-attributes"] == ATTRIBUTES_TO_SEARCH_ON
    assert values["displayed-attributes"] == ATTRIBUTES_TO_SEARCH_ON + EXTRA_DISPLAYED_ATTRIBUTES
    assert values["ranking-rules"] == RANKING_RULES
    await client.close()


@pytest.mark.asyncio
async def test_existing_index_is_reused_with_fixed_attribute_contract(initializer, helper_config, fake_meili):
    fake_meili.add_index("Jellyfin-Media-Server")
    client = SearchClientMeilisearch(helper_config, base_url="http://meili:7700", transport=fake_meili.transport)
    await client.boot()

    # attribute lists are not configurable; unknown fields are dropped
    config = IndexerConfig(attributes_to_search_on=["name", "guid"], attributes_to_filter_on=[])
    await initializer.initialize(client, config)

    assert fake_meili.requests_to("POST", "/indexes") == []
    values = {setting: value for _, setting, value in fake_meili.settings}
    assert values["filterable-attributes"] == ATTRIBUTES_TO_FILTER_ON
    assert values["sortable-attributes"] == ATTRIBUTES_TO_SORT_ON
    assert values["searchable-attributes"] == ATTRIBUTES_TO_SEARCH_ON
    assert values["displayed-attributes"] == DISPLAYED_ATTRIBUTES
    await client.close()
