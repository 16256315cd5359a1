"""
Main entry point for the spin wheel.

Runs the pygame window by default, or a single headless spin when
SPINWHEEL_ENV=headless.
"""

import asyncio
import logging
import random
import sys

from spinwheel.settings import Settings, get_settings
from spinwheel.storage.json_store import ConfigStore, JsonConfigStore, MemoryConfigStore


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def create_store(settings: Settings) -> ConfigStore:
    """JSON files under the data dir, or memory only when storage is off."""
    if settings.storage.enabled:
        return JsonConfigStore(settings.storage.data_dir)
    return MemoryConfigStore()


def create_rng(settings: Settings) -> random.Random:
    return random.Random(settings.seed)


async def run_simulator(settings: Settings) -> None:
    """Run the desktop window."""
    from spinwheel.animation.ticker import FrameTicker
    from spinwheel.session import WheelSession
    from spinwheel.simulator.window import SimulatorWindow, WindowConfig

    ticker = FrameTicker()
    session = WheelSession(
        ticker=ticker,
        store=create_store(settings),
        spin_settings=settings.spin,
        rng=create_rng(settings),
    )

    sim = settings.simulator
    config = WindowConfig(
        width=sim.width,
        height=sim.height,
        wheel_size=sim.wheel_size,
        title=sim.title,
        fullscreen=sim.fullscreen,
        fps=sim.fps,
    )
    window = SimulatorWindow(session=session, ticker=ticker, config=config)

    await window.run()


async def run_headless(settings: Settings) -> str | None:
    """Spin once without a display and report the winner.

    Returns:
        Name of the winning item, or None if the wheel is empty
    """
    from spinwheel.animation.ticker import AsyncioTicker
    from spinwheel.core.state import SpinPhase
    from spinwheel.session import WheelSession

    logger = logging.getLogger(__name__)

    ticker = AsyncioTicker(fps=settings.simulator.fps)
    session = WheelSession(
        ticker=ticker,
        store=create_store(settings),
        spin_settings=settings.spin,
        rng=create_rng(settings),
    )

    stopped = asyncio.Event()

    def on_phase(old: SpinPhase, new: SpinPhase, state) -> None:
        if new == SpinPhase.STOPPED:
            stopped.set()

    session.engine.add_phase_listener(on_phase)

    try:
        if not session.press():
            logger.warning("Nothing to spin: the wheel has no items")
            return None

        await asyncio.sleep(settings.headless_spin_frames / settings.simulator.fps)
        session.press()
        await stopped.wait()

        winner = session.winner
        if winner is None:
            return None

        logger.info(f"The winner is {winner.name}!")
        session.dismiss_winner()
        return winner.name
    finally:
        session.close()
        ticker.cancel_all()


def main() -> None:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables
    load_dotenv()

    settings = get_settings()

    # Setup logging
    setup_logging(settings.debug)

    logger = logging.getLogger(__name__)
    logger.info("Spin wheel starting...")

    try:
        if settings.is_simulator:
            logger.info("Running in simulator mode")
            asyncio.run(run_simulator(settings))
        else:
            logger.info("Running headless")
            winner = asyncio.run(run_headless(settings))
            if winner is not None:
                print(winner)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        sys.exit(1)

    logger.info("Spin wheel stopped")


if __name__ == "__main__":
    main()
