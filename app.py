"""
app.py
──────
Bridge Vibration Monitor — Application Entry Point.

Startup sequence:
  1. Configure logging, initialize SQLite DB (demo regions on first run)
  2. Rebuild the bridge registry from the stored snapshots
  3. Create Dash app with DARKLY bootstrap theme, mount the JSON API
  4. Register all callbacks
  5. Start the liveness monitor (and the demo feed when enabled); stop them
     and drain the snapshot writer at interpreter exit
  6. Run dev server (or expose `server` for gunicorn in production)
"""
import atexit
import logging
from datetime import timedelta

import dash
import dash_bootstrap_components as dbc

from config.settings import settings
from src.api.routes import create_api
from src.data import store
from src.data.simulator import DemoFeed, seed_demo_bridges
from src.i18n.translator import set_lang
from src.layout.main import create_layout
from src.monitoring.bus import EventBus
from src.monitoring.liveness import LivenessMonitor
from src.monitoring.registry import AssetRegistry

# ── 1. Logging + database ─────────────────────────────────────────────────────
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

print("Initializing database...")
store.initialize_db()
print("Database ready.")

# ── 2. Registry ───────────────────────────────────────────────────────────────
writer = store.SnapshotWriter()
registry = AssetRegistry(
    regions=store.load_regions(),
    assets=store.load_assets(),
    bus=EventBus(),
    writer=writer,
    offline_timeout=timedelta(seconds=settings.OFFLINE_TIMEOUT_S),
)
set_lang(settings.DEFAULT_LANG)

# ── 3. Dash app ───────────────────────────────────────────────────────────────
app = dash.Dash(
    __name__,
    external_stylesheets=[dbc.themes.DARKLY],
    suppress_callback_exceptions=True,
    meta_tags=[{"name": "viewport", "content": "width=device-width, initial-scale=1"}],
    title="Bridge Monitor",
)

server = app.server  # gunicorn entry point
server.register_blueprint(create_api(registry))
app.layout = create_layout(settings.DEFAULT_LANG)

# ── 4. Register callbacks ─────────────────────────────────────────────────────
from src.callbacks import alerts, bridge, navigation

navigation.register(app, registry)
bridge.register(app, registry)
alerts.register(app, registry)

# ── 5. Background workers ─────────────────────────────────────────────────────
liveness = LivenessMonitor(registry, interval_s=settings.LIVENESS_INTERVAL_S)
liveness.start()

demo_feed = None
if settings.DEMO_FEED:
    seed_demo_bridges(registry)
    demo_feed = DemoFeed(registry)
    demo_feed.start()
    print("Demo feed running.")


def shutdown() -> None:
    """Stop the background workers, then drain pending snapshot writes."""
    if demo_feed is not None:
        demo_feed.stop(timeout=5.0)
    liveness.stop(timeout=5.0)
    writer.close()
    logger.info("Background workers stopped, snapshots flushed.")


atexit.register(shutdown)

# ── 6. Run ────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    app.run(
        debug=settings.DEBUG,
        host=settings.HOST,
        port=settings.PORT,
        use_reloader=False,
    )
