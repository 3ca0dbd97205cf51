from tests.fixtures.store_fixtures import (  # noqa: F401
    client,
    document_store,
    seed_categories,
    seed_files,
    settings,
)
