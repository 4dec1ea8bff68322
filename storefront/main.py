# storefront/main.py
import uvicorn

from storefront.api import create_app
from storefront.utils.logging import get_logger
from storefront.utils.settings import API_PREFIX, HOST, PORT

logger = get_logger(__name__)

app = create_app()

if __name__ == "__main__":
    logger.info(f"BigShop API on http://{HOST}:{PORT}{API_PREFIX}")
    uvicorn.run(app, host=HOST, port=PORT)
