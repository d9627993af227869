from typing import List

from pairplay import socketio


def run_sweep(app) -> List[str]:
    """Run a single expiry pass over the app's registry."""
    registry = app.extensions['rooms']
    removed = registry.sweep_expired()
    app.logger.info(f"[sweep] removed={len(removed)} live={len(registry)}")
    return removed


def start_room_sweeper(app) -> bool:
    """Start the periodic expiry sweep for ``app`` as a background task.

    - No-ops in TESTING mode unless ENABLE_SWEEPER_IN_TESTS is set
    - Runs every ROOM_SWEEP_INTERVAL_SEC seconds for the life of the process
    """
    if app.config.get('TESTING') and not app.config.get('ENABLE_SWEEPER_IN_TESTS'):
        return False

    interval = int(app.config.get('ROOM_SWEEP_INTERVAL_SEC', 300))

    def _worker():
        while True:
            socketio.sleep(interval)
            try:
                run_sweep(app)
            except Exception:
                app.logger.exception("[sweep] pass failed")

    socketio.start_background_task(_worker)
    app.logger.info(f"[sweep] scheduled every {interval}s max_age={app.config.get('ROOM_MAX_AGE_SEC')}s")
    return True
