# modhall/server.py
from __future__ import annotations

import logging

from modhall.app.factory import createApp

# Basic logging until createApp() installs the configured handlers
logging.basicConfig(level=logging.INFO)


# uvicorn modhall.server:app
app = createApp()
