#!/usr/bin/env python3

import sys

from common.config import load_config
from common.errors import ConfigError, StorageError
from common.logger import get_logger
from db.database import PriceDatabase

logger = get_logger('init_db')


def main() -> int:
    print("CRYPTO TRACKER DATABASE INITIALIZATION\n")

    try:
        config = load_config()
    except ConfigError as e:
        logger.error(f"Config load failed: {e}")
        print(f"\nERROR: {e}")
        return 1

    db = PriceDatabase(config.db_path)

    try:
        db.connect_to_db()
        print(f"Database ready: {config.db_path}")
    except StorageError as e:
        logger.error(f"Database initialization failed: {e}")
        print(f"\nERROR: {e}")
        return 1
    finally:
        db.close_connection()

    return 0


if __name__ == "__main__":
    sys.exit(main())
