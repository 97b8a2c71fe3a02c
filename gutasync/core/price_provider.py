# price_provider.py
# gutasync.core.price_provider

from typing import Any, Dict, Optional, Sequence

from gutasync.core.cancel import CancelToken
from gutasync.core.error_handler import (
    APIError, ErrorClassifier, ErrorSeverity, ErrorType, PriceProviderError
)
from gutasync.core.http_client import JsonHttpClient, SessionFactory
from gutasync.core.logger import logger

# Параметры запроса /simple/price (кроме ids)
SIMPLE_PRICE_PARAMS = {
    "vs_currencies": "usd",
    "include_24hr_change": "true",
    "include_market_cap": "true",
    "include_24h_vol": "true",
    "include_last_updated_at": "true",
}


class PriceProvider:
    """Клиент провайдера котировок (CoinGecko-совместимый /simple/price)"""

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session_factory: Optional[SessionFactory] = None
    ):
        self.http = JsonHttpClient(base_url, timeout=timeout, session_factory=session_factory)

    async def fetch_simple_prices(
        self,
        provider_ids: Sequence[str],
        token: Optional[CancelToken] = None
    ) -> Dict[str, Dict[str, Any]]:
        """
        Один запрос на все ids.

        Returns:
            {provider_id: {usd, usd_24h_change, usd_market_cap, usd_24h_vol, last_updated_at}}

        Raises:
            PriceProviderError: сеть, статус или невалидный ответ
        """
        params = {"ids": ",".join(provider_ids), **SIMPLE_PRICE_PARAMS}
        logger.debug(f"[PRICE] Requesting {params['ids']}")

        try:
            data = await self.http.get_json("/simple/price", params=params, token=token)
        except Exception as e:
            raise PriceProviderError(ErrorClassifier.classify(e)) from e

        if not isinstance(data, dict):
            raise PriceProviderError(APIError(
                error_type=ErrorType.INVALID_RESPONSE,
                severity=ErrorSeverity.MEDIUM,
                message=f"Unexpected payload type: {type(data).__name__}",
            ))
        return data
