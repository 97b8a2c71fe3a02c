#!/usr/bin/env python3
"""
sync_worker.py - Консольная точка входа для агрегатора и котировок

Запуск:
    python sync_worker.py mode [demo|live|default]
    python sync_worker.py root
    python sync_worker.py stats USER
    python sync_worker.py synced USER
    python sync_worker.py prices [SYM ...]
    python sync_worker.py watch [SYM ...]

Режим (DEMO/LIVE) читается один раз при старте команды.
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from gutasync.core.config import Settings, get_settings
from gutasync.core.error_handler import SyncServiceError
from gutasync.core.guta_sync import SyncClient
from gutasync.core.logger import logger, setup_logger
from gutasync.core.mode_resolver import ModeResolver, ModeStore
from gutasync.core.paths import GENERAL_SETTINGS_FILE
from gutasync.core.price_cache import PriceCache
from gutasync.core.price_format import format_price, format_price_change
from gutasync.core.price_provider import PriceProvider
from gutasync.core.price_refresher import PriceRefresher
from gutasync.models.entities import Confirmed, TokenPrice


def build_resolver(settings: Settings, settings_file: Path) -> ModeResolver:
    return ModeResolver(ModeStore(settings_file), default=settings.demo_mode_default)


def build_price_cache(settings: Settings) -> PriceCache:
    provider = PriceProvider(settings.price_api_url, timeout=settings.request_timeout)
    return PriceCache(provider, ttl=settings.price_cache_ttl)


def print_prices(prices: Dict[str, Optional[TokenPrice]]) -> None:
    for symbol, price in prices.items():
        if price is None:
            print(f"  {symbol:<6} {'n/a':>16}")
            continue
        change, _ = format_price_change(price.price_change_24h)
        print(f"  {price.symbol:<6} {format_price(price.current_price):>16}  {change:>8}")


# ═══════════════════════════════════════════════════════════════
# КОМАНДЫ
# ═══════════════════════════════════════════════════════════════

def cmd_mode(resolver: ModeResolver, value: Optional[str]) -> int:
    if value == 'demo':
        resolver.set_mode(True)
    elif value == 'live':
        resolver.set_mode(False)
    elif value == 'default':
        resolver.reset()
    print("🔶 DEMO" if resolver.is_demo_mode() else "🔴 LIVE")
    return 0


async def cmd_root(client: SyncClient) -> int:
    try:
        root = await client.fetch_latest_root()
    except SyncServiceError as e:
        print(f"❌ Failed to fetch root: {e}")
        return 1
    print(f"Root:        {root.root}")
    print(f"Block:       {root.block_number}")
    print(f"Timestamp:   {root.timestamp}")
    print(f"Total users: {root.total_users}")
    return 0


async def cmd_stats(client: SyncClient, user_id: str) -> int:
    result = await client.fetch_sync_stats(user_id)
    if not isinstance(result, Confirmed):
        print(f"⚠️ Aggregator unavailable: {result.reason}")
        return 0
    stats = result.value
    print(f"Total UPS:   {stats.total_ups}")
    print(f"Synced UPS:  {stats.synced_ups}")
    print(f"Pending UPS: {stats.pending_ups}")
    print(f"Last synced: {stats.last_synced_at or '-'}")
    return 0


async def cmd_synced(client: SyncClient, user_id: str) -> int:
    result = await client.check_synced(user_id)
    if isinstance(result, Confirmed):
        print("✅ Synced" if result.value else "⏳ Not synced yet")
    else:
        print(f"⚠️ Unknown (aggregator unavailable: {result.reason})")
    return 0


async def cmd_prices(cache: PriceCache, symbols: Sequence[str]) -> int:
    prices = await cache.get_prices(symbols)
    print_prices(prices)
    return 0


async def cmd_watch(cache: PriceCache, symbols: Sequence[str], interval: float) -> int:
    def on_update(prices: Dict[str, Optional[TokenPrice]]) -> None:
        print("─" * 40)
        print_prices(prices)

    refresher = PriceRefresher(cache, symbols, interval=interval, on_update=on_update)
    refresher.start()
    try:
        while refresher.is_running():
            await asyncio.sleep(1)
    finally:
        await refresher.stop()
    return 0


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='GUTA sync & price worker')
    parser.add_argument('--settings', type=Path, default=GENERAL_SETTINGS_FILE,
                        help='Path to general_settings.json')
    parser.add_argument('--console', action='store_true', help='Log to console')

    sub = parser.add_subparsers(dest='command', required=True)

    mode = sub.add_parser('mode', help='Show or set DEMO/LIVE mode')
    mode.add_argument('value', nargs='?', choices=['demo', 'live', 'default'])

    sub.add_parser('root', help='Fetch latest GUTA root')

    stats = sub.add_parser('stats', help='Sync stats for user')
    stats.add_argument('user')

    synced = sub.add_parser('synced', help='Sync status for user')
    synced.add_argument('user')

    prices = sub.add_parser('prices', help='Print prices once')
    prices.add_argument('symbols', nargs='*')

    watch = sub.add_parser('watch', help='Refresh prices periodically')
    watch.add_argument('symbols', nargs='*')

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logger(level=settings.log_level, console=args.console)

    resolver = build_resolver(settings, args.settings)

    if args.command == 'mode':
        return cmd_mode(resolver, args.value)

    if args.command in ('prices', 'watch'):
        cache = build_price_cache(settings)
        symbols = args.symbols or cache.get_supported_tokens()
        if args.command == 'prices':
            return asyncio.run(cmd_prices(cache, symbols))
        try:
            return asyncio.run(cmd_watch(cache, symbols, settings.price_refresh_interval))
        except KeyboardInterrupt:
            logger.info("[WORKER] Stopped by user")
            return 0

    client = SyncClient.from_resolver(resolver, settings)
    if args.command == 'root':
        return asyncio.run(cmd_root(client))
    if args.command == 'stats':
        return asyncio.run(cmd_stats(client, args.user))
    return asyncio.run(cmd_synced(client, args.user))


if __name__ == "__main__":
    sys.exit(main())
