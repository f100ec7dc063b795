"""
teraverse command-line interface.

Usage:
    teraverse autoplay --dungeon 1                # Start a run and auto-play it
    teraverse claim energy                        # Drain energy from every ROM
    teraverse energy                              # Show current energy
    teraverse history --db runs.db                # Per-dungeon run statistics
    teraverse --dry-run autoplay --dungeon 1      # Same, against the fake server

Credentials come from TERAVERSE_TOKEN and TERAVERSE_ADDRESS.
"""

import argparse
import asyncio
import sys

from teraverse.clients.fake import FakeGameAPI, MoveOutcome
from teraverse.config import ControllerConfig
from teraverse.energy.model import delay_for_state
from teraverse.exceptions import TeraverseError
from teraverse.history import create_history_store, summarize_history
from teraverse.observability import configure_logging
from teraverse.orchestrator import Controller, create_controller
from teraverse.schemas import ClaimableObject, DungeonInfo, EnergyState, ItemDelta, to_raw
from teraverse.vocabulary import ClaimCategory, LoopExitReason


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="teraverse",
        description="Gigaverse dungeon controller - auto-play, claims and energy",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Auto-play a juiced run with the random provider
  teraverse autoplay --dungeon 1 --juiced --provider random

  # Claim shards from every ROM
  teraverse claim shard

  # Try everything without touching the real server
  teraverse --dry-run autoplay --dungeon 1
        """
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Use an in-memory fake server"
    )
    parser.add_argument(
        "--address",
        help="Player wallet address (default: TERAVERSE_ADDRESS)"
    )
    parser.add_argument(
        "--base-url",
        help="Game server URL (default: TERAVERSE_BASE_URL or https://gigaverse.io)"
    )
    parser.add_argument(
        "--log-level",
        help="Logging level (default: TERAVERSE_LOG_LEVEL or INFO)"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    autoplay = subparsers.add_parser("autoplay", help="Start a run and auto-play it")
    autoplay.add_argument("--dungeon", type=int, required=True, help="Dungeon id")
    autoplay.add_argument("--juiced", action="store_true", help="Start a juiced run")
    autoplay.add_argument("--provider", help="Decision provider name")
    autoplay.add_argument("--max-steps", type=int, help="Safety limit on moves")
    autoplay.add_argument("--db", help="History database path")

    claim = subparsers.add_parser("claim", help="Claim one category from all ROMs")
    claim.add_argument(
        "category",
        choices=[c.value for c in ClaimCategory],
        help="Yield category"
    )

    subparsers.add_parser("energy", help="Show current energy")

    history = subparsers.add_parser("history", help="Show run statistics")
    history.add_argument("--db", help="History database path (default: TERAVERSE_HISTORY_DB)")

    return parser


def build_config(args: argparse.Namespace) -> ControllerConfig:
    config = ControllerConfig.from_env()
    if args.address:
        config.address = args.address
    if args.base_url:
        config.base_url = args.base_url
    if args.log_level:
        config.log_level = args.log_level
    if args.json_logs:
        config.json_logs = True

    if getattr(args, "provider", None):
        config.provider = args.provider
    if getattr(args, "max_steps", None) is not None:
        config.max_steps = args.max_steps
    if getattr(args, "db", None):
        config.history_db_path = args.db

    if args.dry_run:
        config.address = config.address or "0xdryrun"
        config.claim_delay_seconds = 0.0
    config.validate()
    return config


def create_dry_run_api() -> FakeGameAPI:
    """Fake server with one dungeon, a few ROMs and a short scripted run."""
    api = FakeGameAPI(
        energy=EnergyState(
            raw_value=to_raw(120),
            capacity=240,
            regen_per_second=to_raw(1) / 360,
        ),
        claimables=[
            ClaimableObject(id="rom-1", dust_yield=40, shard_yield=2, energy_yield=30),
            ClaimableObject(id="rom-2", dust_yield=15, energy_yield=70),
            ClaimableObject(id="rom-3", shard_yield=5, energy_yield=90),
        ],
        dungeons=[
            DungeonInfo(
                dungeon_id=1,
                name="Dungetron 5000",
                energy_cost=40,
                max_runs_per_day=10,
                juiced_max_runs_per_day=30,
            ),
        ],
    )
    api.script_moves([
        MoveOutcome(deltas=[ItemDelta(item_id=2, amount=3)]),
        MoveOutcome(health_delta=-6, loot_options=3),
        MoveOutcome(room_delta=0, deltas=[ItemDelta(item_id=21, amount=1)]),
        MoveOutcome(health_delta=-8),
        MoveOutcome(health_delta=-10),
    ])
    return api


# =============================================================================
# COMMANDS
# =============================================================================

async def cmd_autoplay(controller: Controller, args: argparse.Namespace) -> int:
    await controller.refresh_catalog()
    await controller.energy_scheduler.start()

    started = await controller.start_run(args.dungeon, juiced=args.juiced)
    if not started.success:
        print(f"✗ Could not start run: {started.error}")
        return 1

    task = controller.enable_auto_play()
    if task is None:
        print("✗ Auto-play already running")
        return 1

    result = await task
    print(f"Auto-play finished: {result.exit_reason.value}")
    print(f"  Moves: {result.moves_submitted} ok, {result.moves_failed} failed")
    if result.history_record:
        record = result.history_record
        print(f"  {record.display_name}: {record.enemies_defeated} enemies defeated")
        for item_id, amount in sorted(record.item_changes.items()):
            print(f"    item {item_id}: {amount:+d}")
    for error in result.errors:
        print(f"  ! {error}")
    failed = result.moves_failed or result.exit_reason == LoopExitReason.ERROR
    return 1 if failed else 0


async def cmd_claim(controller: Controller, args: argparse.Namespace) -> int:
    category = ClaimCategory(args.category)
    result = await controller.claim_all(category)
    if result.skipped:
        print("✗ A claim batch is already running")
        return 1

    print(f"Claimed {category.value} from {len(result.claimed)}/{len(result.planned)} ROMs")
    for rom_id in result.failed:
        print(f"  ✗ {rom_id}")
    for error in result.errors:
        print(f"  ! {error}")
    return 0 if result.success else 1


async def cmd_energy(controller: Controller, args: argparse.Namespace) -> int:
    await controller.energy_scheduler.start()
    energy = controller.energy
    if energy is None:
        print(f"✗ Could not fetch energy: {controller.last_error}")
        return 1

    print(f"Energy: {energy.visible}/{energy.capacity}" + (" (juiced)" if energy.is_boosted else ""))
    delay = delay_for_state(energy)
    if delay is None:
        print("  Full" if energy.is_full else "  Not regenerating")
    else:
        print(f"  Next point in {delay:.1f}s")
    return 0


def cmd_history(config: ControllerConfig) -> int:
    store = create_history_store(config.history_db_path)
    stats = summarize_history(store.query(limit=None))
    if not stats:
        print("No runs recorded yet.")
        return 0

    for dungeon in stats:
        print(
            f"{dungeon.display_name} (ID {dungeon.dungeon_id}): "
            f"{dungeon.total_runs} runs, avg defeated {dungeon.average_defeated:.1f}"
        )
        for provider in dungeon.ranked_providers():
            plural = "s" if provider.runs > 1 else ""
            print(
                f"  {provider.provider_name.upper()}: {provider.runs} run{plural}"
                f" - avg defeated {provider.average_defeated:.1f}"
            )
    return 0


async def run_command(config: ControllerConfig, args: argparse.Namespace) -> int:
    api = create_dry_run_api() if args.dry_run else None
    controller = create_controller(config, api=api)
    try:
        if args.command == "autoplay":
            return await cmd_autoplay(controller, args)
        if args.command == "claim":
            return await cmd_claim(controller, args)
        return await cmd_energy(controller, args)
    finally:
        await controller.shutdown()


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except TeraverseError as e:
        print(f"✗ {e.message}")
        return 1

    configure_logging(level=config.log_level.upper(), json_format=config.json_logs)

    if args.command == "history":
        return cmd_history(config)

    try:
        return asyncio.run(run_command(config, args))
    except TeraverseError as e:
        print(f"✗ {e.message}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
