"""
Build the example blog design document and synchronize it.

Usage:
    COUCHDB_DATABASE=blog python examples/sync_example.py
"""

import json
import os

from ddoc_sync import CouchDbClient, DesignManager, DeskResources
from ddoc_sync.logger import logger

EXAMPLES_DIR = os.path.dirname(os.path.abspath(__file__))


def main():
    manager = DesignManager(CouchDbClient(), DeskResources([EXAMPLES_DIR]))

    blog = manager.get_from_desk("blog")
    print(json.dumps(blog.to_dict(), indent=2))

    response = manager.synchronize_with_db(blog)
    if response is None:
        logger.success(f"{blog.id} already up to date")
    else:
        logger.success(f"{response.id} saved at rev {response.rev}")


if __name__ == "__main__":
    main()
