"""
Print the Bedrock locations found on this machine.

    python -m bedrock_locator
"""
import asyncio
import logging
import sys

from bedrock_locator.domain.errors import LocatorError
from bedrock_locator.locations import get_assets_locations, get_data_locations

logger = logging.getLogger(__name__)


async def main() -> int:
    exit_code = 0
    for title, resolve in (("Data", get_data_locations), ("Assets", get_assets_locations)):
        try:
            paths = await resolve()
        except LocatorError as e:
            logger.error(str(e))
            exit_code = 1
            continue
        print(f"{title}:")
        for path in paths:
            print(f"  {path}")
    return exit_code


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    sys.exit(asyncio.run(main()))
