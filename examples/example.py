"""Example usage of GateCrossingProvider as a stand-in display host."""

import logging
import sys
import time
from pathlib import Path

# Add src to path so we can import gatewatch
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gatewatch import (
    ComplicationRequest,
    ComplicationType,
    ConfigError,
    GateCrossingProvider,
    load_config,
)

# Set up logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger(__name__)

INSTANCE_ID = 1


def run(config_path=None, once=False):
    """
    Refresh the gate prediction on a fixed interval and print it.

    Args:
        config_path: Optional YAML config file.
        once: Print a single refresh and exit.
    """
    try:
        config = load_config(config_path)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    provider = GateCrossingProvider(config)
    request = ComplicationRequest(INSTANCE_ID, ComplicationType.SHORT_TEXT)

    preview = provider.get_preview(ComplicationType.SHORT_TEXT)
    print(f"Preview: {preview.primary_text} ({preview.accessibility_text})")

    provider.on_activate(INSTANCE_ID, ComplicationType.SHORT_TEXT)
    try:
        while True:
            display = provider.handle_trigger(request)
            print(f"{display.primary_text}    {display.accessibility_text}")
            if once:
                break
            time.sleep(config.refresh_interval)
    except KeyboardInterrupt:
        print("\nGoodbye!")
    finally:
        provider.on_deactivate(INSTANCE_ID)
        provider.shutdown()


if __name__ == "__main__":
    args = sys.argv[1:]
    once = "--once" in args
    paths = [arg for arg in args if arg != "--once"]
    run(paths[0] if paths else None, once=once)
