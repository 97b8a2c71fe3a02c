# price_cache.py
# gutasync.core.price_cache

"""
Кэш котировок для фиксированного набора токенов.

Запись считается свежей, пока now - timestamp < ttl (30 секунд).
Устаревание - чистая функция времени; явная очистка только clear_cache().
Ошибки провайдера никогда не выбрасываются: вместо котировки None,
существующие записи кэша не трогаются.
"""

import math
import time
from typing import Callable, Dict, List, Optional, Sequence, Union

from gutasync.core.cancel import CancelToken
from gutasync.core.logger import logger
from gutasync.core.price_provider import PriceProvider
from gutasync.models.entities import CacheEntry, TokenPrice

# Поддерживаемые токены: символ -> id у провайдера
TOKEN_IDS: Dict[str, str] = {
    'ETH': 'ethereum',
    'BTC': 'bitcoin',
    'USDT': 'tether',
    'USDC': 'usd-coin',
    'BNB': 'binancecoin',
    'SOL': 'solana',
    'MATIC': 'matic-network',
    'AVAX': 'avalanche-2',
    'DOT': 'polkadot',
    'LINK': 'chainlink',
}

CACHE_DURATION = 30.0


class PriceCache:
    """Кэш TokenPrice с пакетным обновлением"""

    def __init__(
        self,
        provider: PriceProvider,
        clock: Callable[[], float] = time.time,
        ttl: float = CACHE_DURATION
    ):
        """
        Args:
            provider: Клиент провайдера котировок
            clock: Источник времени (секунды)
            ttl: Окно свежести (секунды)
        """
        self.provider = provider
        self.clock = clock
        self.ttl = ttl
        self._entries: Dict[str, CacheEntry[TokenPrice]] = {}

    # ═══════════════════════════════════════════════════════════════
    # ЧТЕНИЕ
    # ═══════════════════════════════════════════════════════════════

    @staticmethod
    def get_supported_tokens() -> List[str]:
        return list(TOKEN_IDS)

    @staticmethod
    def is_supported(symbol: str) -> bool:
        return symbol.upper() in TOKEN_IDS

    def _fresh(self, key: str) -> Optional[TokenPrice]:
        entry = self._entries.get(key)
        if entry is not None and entry.is_fresh(self.clock(), self.ttl):
            return entry.value
        return None

    def _store(self, key: str, price: TokenPrice) -> None:
        # Запись заменяется целиком
        self._entries[key] = CacheEntry(value=price, timestamp=self.clock())

    async def get_price(
        self,
        symbol: str,
        force: bool = False,
        token: Optional[CancelToken] = None
    ) -> Optional[TokenPrice]:
        """
        Котировка одного токена.

        Неизвестный символ -> None без сети. Свежая запись без force
        возвращается как есть. Иначе один запрос; ошибка -> None.
        """
        key = symbol.upper()
        provider_id = TOKEN_IDS.get(key)

        if not provider_id:
            logger.warning(f"[PRICE] Unsupported token: {symbol}")
            return None

        if not force:
            cached = self._fresh(key)
            if cached is not None:
                return cached

        try:
            data = await self.provider.fetch_simple_prices([provider_id], token=token)
        except Exception as e:
            logger.error(f"[PRICE] Failed to fetch price for {key}: {e}")
            return None

        price = self._parse(key, provider_id, data)
        if price is not None:
            self._store(key, price)
            logger.debug(f"[PRICE] {key} = {price.current_price}")
        return price

    async def get_prices(
        self,
        symbols: Sequence[str],
        force: bool = False,
        token: Optional[CancelToken] = None
    ) -> Dict[str, Optional[TokenPrice]]:
        """
        Котировки нескольких токенов.

        Если все поддерживаемые символы свежие и нет force - ноль запросов.
        Иначе ровно один пакетный запрос на все поддерживаемые символы.
        Отсутствующие в ответе (или все при ошибке) -> None.
        """
        prices: Dict[str, Optional[TokenPrice]] = {symbol: None for symbol in symbols}
        supported = [s for s in symbols if self.is_supported(s)]

        if not supported:
            return prices

        if not force:
            cached = {s: self._fresh(s.upper()) for s in supported}
            if all(price is not None for price in cached.values()):
                prices.update(cached)
                return prices

        # Уникальные ids в порядке запроса
        provider_ids = list(dict.fromkeys(TOKEN_IDS[s.upper()] for s in supported))

        try:
            data = await self.provider.fetch_simple_prices(provider_ids, token=token)
        except Exception as e:
            logger.error(f"[PRICE] Failed to fetch multiple prices: {e}")
            return prices

        for symbol in supported:
            key = symbol.upper()
            price = self._parse(key, TOKEN_IDS[key], data)
            if price is not None:
                self._store(key, price)
            prices[symbol] = price

        updated = sum(1 for s in supported if prices[s] is not None)
        logger.info(f"[PRICE] Refreshed {updated}/{len(supported)} prices")
        return prices

    @staticmethod
    def _parse(key: str, provider_id: str, data: Dict) -> Optional[TokenPrice]:
        token_data = data.get(provider_id)
        if not isinstance(token_data, dict):
            return None
        try:
            return TokenPrice.from_provider(key, provider_id, token_data)
        except (KeyError, TypeError, ValueError, OverflowError, OSError) as e:
            logger.warning(f"[PRICE] Malformed quote for {key}: {e}")
            return None

    async def calculate_token_value(
        self,
        symbol: str,
        amount: Union[str, float, int]
    ) -> Optional[float]:
        """
        USD стоимость amount токенов.

        Returns:
            None если котировки нет или amount не число
        """
        price = await self.get_price(symbol)
        if price is None:
            return None

        try:
            num_amount = float(amount)
        except (TypeError, ValueError):
            return None

        if not math.isfinite(num_amount):
            return None
        return num_amount * price.current_price

    # ═══════════════════════════════════════════════════════════════
    # ОБСЛУЖИВАНИЕ
    # ═══════════════════════════════════════════════════════════════

    def clear_cache(self) -> None:
        """Удалить все записи"""
        self._entries.clear()
        logger.info("[PRICE] Price cache cleared")

    def reset(self) -> None:
        self.clear_cache()

    def get_stats(self) -> dict:
        """Количество свежих и устаревших записей"""
        now = self.clock()
        total = len(self._entries)
        fresh = sum(1 for entry in self._entries.values() if entry.is_fresh(now, self.ttl))
        return {
            "total_cached": total,
            "fresh_count": fresh,
            "stale_count": total - fresh,
        }
