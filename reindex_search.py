#!/usr/bin/env python3
"""
Rebuild the full-text search index from the relational catalog.

    python reindex_search.py [--url http://localhost:9200] [--index artifacts] [--batch-size 500]
"""

import argparse
import logging
import os
import sys

sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), "backend"))

from dotenv import load_dotenv

load_dotenv()

from catalog.sql_store import SqlCatalogStore  # noqa: E402
from config.settings import (  # noqa: E402
    DATABASE_URL,
    ELASTICSEARCH_INDEX,
    ELASTICSEARCH_TIMEOUT_SECONDS,
    ELASTICSEARCH_URL,
)
from search.engine import ElasticsearchBackend  # noqa: E402
from search.errors import BackendUnavailable  # noqa: E402
from search.indexer import INDEX_MAPPING, reindex_all  # noqa: E402


def main() -> int:
    parser = argparse.ArgumentParser(description="Reindex the artifact catalog into Elasticsearch")
    parser.add_argument("--database-url", default=DATABASE_URL)
    parser.add_argument("--url", default=ELASTICSEARCH_URL, help="Elasticsearch URL")
    parser.add_argument("--index", default=ELASTICSEARCH_INDEX)
    parser.add_argument("--batch-size", type=int, default=500)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    if not args.url:
        print("❌ No Elasticsearch URL configured (set ELASTICSEARCH_URL or pass --url)")
        return 2

    store = SqlCatalogStore(args.database_url)
    store.create_schema()
    backend = ElasticsearchBackend.from_url(args.url, index=args.index, timeout=ELASTICSEARCH_TIMEOUT_SECONDS)

    try:
        if backend.ensure_index(INDEX_MAPPING):
            print(f"📚 Created index '{args.index}'")
        indexed = reindex_all(store, backend, batch_size=args.batch_size)
    except BackendUnavailable as e:
        print(f"❌ Reindex failed: {e}")
        return 1

    print(f"✅ Indexed {indexed} of {store.count_artifacts()} artifacts into '{args.index}'")
    return 0


if __name__ == "__main__":
    sys.exit(main())
