import logging

import uvicorn
from kitchen.api.api_run import create_app
from kitchen.utilities.config import APP_HOST, APP_PORT, LOG_LEVEL


if __name__ == "__main__":
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app()
    # Print a friendly message that points to the URL you can open in a browser
    print(f"Kitchen costing API on http://{APP_HOST}:{APP_PORT} (Press CTRL+C to quit)")
    uvicorn.run(app, host=APP_HOST, port=APP_PORT)
