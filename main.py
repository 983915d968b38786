import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

import orjson
import functions_framework
from flask import Request

from handlers.reputation_handler import ReputationHandler, build_reputation_handler
from utils.config import Config
from utils.constants import NETWORK_DISPLAY, MAX_TOTAL_SCORE, ELIGIBLE_THRESHOLD
from utils.logger import setup_logging
from utils.web3_utils import InvalidWalletAddress

setup_logging()
logger = logging.getLogger(__name__)

CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Methods': 'POST, GET, OPTIONS',
    'Access-Control-Allow-Headers': 'Content-Type'
}

# Process-wide state, built on first request
_config: Optional[Config] = None
_handler: Optional[ReputationHandler] = None


def json_dumps(data) -> str:
    return orjson.dumps(data).decode('utf-8')


def get_handler() -> ReputationHandler:
    """Build config and services once per process"""
    global _config, _handler
    if _handler is None:
        logger.info("Initializing services...")
        _config = Config()
        errors = _config.validate()
        if errors:
            logger.warning(f"Config warnings: {errors}")
        _handler = build_reputation_handler(_config)
        logger.info("✅ Services initialized")
    return _handler


def _ok(data, headers, status: int = 200):
    return (json_dumps({"success": True, "data": data}), status, headers)


def _error(message: str, headers, status: int = 400):
    return (json_dumps({"success": False, "error": message}), status, headers)


@functions_framework.http
def main(request: Request):
    """Main HTTP entry point"""
    # CORS handling
    if request.method == 'OPTIONS':
        return ('', 204, CORS_HEADERS)

    headers = {'Access-Control-Allow-Origin': '*', 'Content-Type': 'application/json'}
    parts = [p for p in request.path.split('/') if p]
    logger.info(f"{request.method} {request.path}")

    try:
        if request.method == 'GET':
            return asyncio.run(handle_get_request(parts, headers))
        elif request.method == 'POST':
            return asyncio.run(handle_post_request(request, parts, headers))
        else:
            return _error("Method not allowed", headers, 405)

    except InvalidWalletAddress as e:
        return _error(str(e), headers, 400)
    except Exception as e:
        logger.error(f"Request failed: {e}")
        return _error(f"Internal server error: {e}", headers, 500)


async def handle_get_request(parts, headers):
    """Handle GET routes"""
    if not parts:
        return _ok(service_info(), headers)

    if parts == ['health']:
        return _ok({"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}, headers)

    if len(parts) < 3 or parts[0] != 'api':
        return _error("Endpoint not found", headers, 404)

    handler = get_handler()
    resource, rest = parts[1], parts[2:]

    if resource == 'reputation':
        if rest == ['formula']:
            return _ok(handler.get_scoring_formula(), headers)
        if len(rest) == 1:
            reputation = await handler.get_full(rest[0])
            return _ok(reputation.to_dict(), headers)
        if len(rest) == 2 and rest[1] == 'quick':
            quick = await handler.get_quick(rest[0])
            return _ok(quick.to_dict(), headers)
        if len(rest) == 2 and rest[1] == 'analysis':
            analysis = await handler.get_analysis(rest[0])
            return _ok(analysis.to_dict(), headers)

    if resource == 'status':
        if rest == ['cache', 'stats']:
            return _ok(handler.cache_stats().to_dict(), headers)
        if len(rest) == 1:
            return _ok(await handler.get_status(rest[0]), headers)

    return _error("Endpoint not found", headers, 404)


async def handle_post_request(request: Request, parts, headers):
    """Handle POST routes"""
    if parts == ['api', 'reputation', 'batch']:
        request_json = request.get_json(silent=True)
        if not isinstance(request_json, dict):
            return _error("No JSON data provided", headers)

        wallets = request_json.get('wallets')
        if not isinstance(wallets, list):
            return _error("wallets must be an array", headers)

        handler = get_handler()
        if len(wallets) > _config.max_batch_wallets:
            return _error(f"At most {_config.max_batch_wallets} wallets per batch", headers)

        results = await handler.batch_quick(wallets)
        return _ok([r.to_dict() for r in results], headers)

    if parts == ['api', 'status', 'cache', 'clear']:
        get_handler().clear_cache()
        return (json_dumps({"success": True, "message": "Cache cleared successfully"}), 200, headers)

    return _error("Endpoint not found", headers, 404)


def service_info():
    return {
        "message": "Multichain Wallet Reputation Function",
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "initialized": _handler is not None,
        "networks": NETWORK_DISPLAY,
        "endpoints": {
            "reputation": "GET /api/reputation/<wallet>",
            "quickCheck": "GET /api/reputation/<wallet>/quick",
            "analysis": "GET /api/reputation/<wallet>/analysis",
            "batch": "POST /api/reputation/batch",
            "formula": "GET /api/reputation/formula",
            "status": "GET /api/status/<wallet>",
            "cacheStats": "GET /api/status/cache/stats",
            "cacheClear": "POST /api/status/cache/clear",
        },
        "scoring": {
            "maxScore": MAX_TOTAL_SCORE,
            "eligibilityThreshold": ELIGIBLE_THRESHOLD,
        },
    }


# Local testing
if __name__ == "__main__":
    logger.info("Starting local test")
    get_handler()
    print("Function ready for testing")
