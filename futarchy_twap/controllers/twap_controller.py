# futarchy_twap/controllers/twap_controller.py
import logging
import time
from typing import Callable, Optional

from futarchy_twap.config import DEFAULT_TWAP_DAYS
from futarchy_twap.config.chains import get_chain_config
from futarchy_twap.models.chain_context import ChainContext
from futarchy_twap.models.pool_model import PoolModel, PoolRef
from futarchy_twap.models.proposal_model import ProposalModel
from futarchy_twap.models.token_model import TokenModel
from futarchy_twap.models.twap_model import TwapModel, TwapStatus, TwapWindow, compare_prices
from futarchy_twap.services.connection_pool import ConnectionPool
from futarchy_twap.utils.best_effort import try_read
from futarchy_twap.utils.concurrency import fan_out
from futarchy_twap.utils.time_utils import format_duration, to_iso
from futarchy_twap.utils.validation import (
    validate_days,
    validate_end_timestamp,
    validate_proposal_address,
    validate_window_bounds,
)

logger = logging.getLogger(__name__)


class TwapController:
    """Combines the models into the two public operations: TWAP and pool discovery."""

    def __init__(self, connections: Optional[ConnectionPool] = None, clock: Callable[[], float] = time.time):
        self.connections = connections if connections is not None else ConnectionPool()
        self.clock = clock

    def _context(self, chain_id, rpc_url: Optional[str]) -> ChainContext:
        chain = get_chain_config(chain_id)
        return ChainContext(w3=self.connections.get(chain.chain_id, rpc_url), chain=chain)

    @staticmethod
    def _token_section(tokens, company_info, currency_info) -> dict:
        return {
            "company": company_info.as_dict(),
            "currency": currency_info.as_dict(),
            **tokens.conditional_tokens(),
        }

    # --- calculate_twap ---

    def calculate_twap(
        self,
        proposal_address: str,
        chain_id,
        end_timestamp: Optional[int] = None,
        days=None,
        rpc_url: Optional[str] = None,
    ) -> dict:
        """
        TWAP of the YES and NO conditional pools of a proposal and the winning side.

        Args:
            proposal_address: 0x-prefixed 40 hex digit proposal contract address.
            chain_id: 100 (Gnosis, Algebra) or 1 (Ethereum, Uniswap V3).
            end_timestamp: Unix seconds at which the TWAP window closes. Defaults to now.
            days: Window length in days. Defaults to 5.
            rpc_url: Optional RPC endpoint overriding the chain default.

        Returns:
            Result dict. Missing pools or a failed oracle read are reported in
            its ``error`` key alongside everything resolved before the failure.

        Raises:
            InputValidationError: bad address, chain id or window, before any RPC call.
        """
        validate_proposal_address(proposal_address)
        chain = get_chain_config(chain_id)
        days = DEFAULT_TWAP_DAYS if days is None else validate_days(days)

        now = int(self.clock())
        end_timestamp = now if end_timestamp is None else validate_end_timestamp(end_timestamp)
        window = TwapWindow.ending_at(end_timestamp, days)
        validate_window_bounds(window.start, window.end)
        status = window.status_at(now)

        ctx = self._context(chain.chain_id, rpc_url)
        pool_model = PoolModel(ctx)
        token_model = TokenModel(ctx)

        logger.info("[TWAP] %s on %s", proposal_address, chain.name)
        logger.info("  Window: %s → %s (%sd)", to_iso(window.start), to_iso(window.end), days)
        logger.info("  Status: %s", status.value)

        tokens = ProposalModel(ctx).get_proposal_tokens(proposal_address)
        pools = pool_model.discover_conditional_pools(tokens)

        if not pools.complete:
            logger.warning("❌ Conditional pools missing (YES: %s, NO: %s)", pools.yes.address, pools.no.address)
            return {
                "proposalAddress": proposal_address,
                "chainId": chain.chain_id,
                "chain": chain.name,
                "marketName": tokens.market_name,
                "error": "Could not find YES/NO conditional pools on-chain",
                "pools": {"yes": pools.yes.address, "no": pools.no.address},
                "tokens": {
                    **tokens.conditional_tokens(),
                    "companyToken": tokens.company_token,
                    "currencyToken": tokens.currency_token,
                },
            }

        logger.info("  ✅ YES pool: %s", pools.yes.address)
        logger.info("  ✅ NO pool:  %s", pools.no.address)

        logger.info("  🔄 Detecting token ordering (inversion)...")
        yes_inversion, no_inversion, company_info, currency_info = fan_out(
            lambda: pool_model.detect_inversion(pools.yes.address, tokens.yes_company),
            lambda: pool_model.detect_inversion(pools.no.address, tokens.no_company),
            lambda: token_model.get_token_info(tokens.company_token),
            lambda: token_model.get_token_info(tokens.currency_token),
        )
        yes_pool = PoolRef(pools.yes.address, yes_inversion.should_invert)
        no_pool = PoolRef(pools.no.address, no_inversion.should_invert)
        logger.info("  YES pool: company is token%d → invert=%s", int(yes_pool.inverted), yes_pool.inverted)
        logger.info("  NO pool:  company is token%d → invert=%s", int(no_pool.inverted), no_pool.inverted)

        result = {
            "proposalAddress": proposal_address,
            "chainId": chain.chain_id,
            "chain": chain.name,
            "marketName": tokens.market_name,
            "tokens": self._token_section(tokens, company_info, currency_info),
            "pools": {"yes": yes_pool.as_dict(), "no": no_pool.as_dict()},
            "twapWindow": window.as_dict(),
            "status": status.value,
            "timestamp": to_iso(self.clock()),
        }

        # No oracle history to read before the window opens
        if status is TwapStatus.NOT_STARTED:
            until_start = window.start - now
            result["timeUntilStart"] = {"seconds": until_start, "human": format_duration(until_start)}
            return result

        seconds_ago = window.lookback_seconds(now)
        logger.info("  📊 Calculating TWAP (%ss window)...", seconds_ago)

        twap_model = TwapModel(ctx)
        try:
            yes_twap, no_twap, yes_spot, no_spot = fan_out(
                lambda: twap_model.calculate_pool_twap(yes_pool.address, seconds_ago, yes_pool.inverted),
                lambda: twap_model.calculate_pool_twap(no_pool.address, seconds_ago, no_pool.inverted),
                lambda: try_read(lambda: twap_model.get_spot_price(yes_pool.address, yes_pool.inverted), "YES spot price"),
                lambda: try_read(lambda: twap_model.get_spot_price(no_pool.address, no_pool.inverted), "NO spot price"),
            )
        except Exception as e:
            logger.error("  ❌ TWAP error: %s", e)
            result["error"] = f"TWAP calculation failed: {e}"
            return result

        comparison = compare_prices(yes_twap.normalized_price, no_twap.normalized_price)
        result["twap"] = {
            "yes": yes_twap.as_dict(),
            "no": no_twap.as_dict(),
            "spread": comparison.spread,
            "percentDiff": f"{comparison.percent_diff:.4f}",
            "winner": comparison.winner,
            "windowSeconds": seconds_ago,
            "windowHours": f"{seconds_ago / 3600:.2f}",
        }

        spot = {"yes": yes_spot.or_default(None), "no": no_spot.or_default(None)}
        if spot["yes"] is not None or spot["no"] is not None:
            result["spot"] = spot

        if status is TwapStatus.ACTIVE:
            remaining = window.end - now
            result["timeRemaining"] = {"seconds": remaining, "human": format_duration(remaining)}

        logger.info("  ✅ YES TWAP: %.6f, NO TWAP: %.6f", yes_twap.normalized_price, no_twap.normalized_price)
        logger.info(
            "  🏆 Winner: %s (spread: %.6f, %.2f%%)",
            comparison.winner, comparison.spread, comparison.percent_diff,
        )
        return result

    # --- discover_pools ---

    def discover_pools(self, proposal_address: str, chain_id, rpc_url: Optional[str] = None) -> dict:
        """
        Probe all six conditional and prediction pools of a proposal.

        Returns:
            Result dict with the ordered ``pools`` list and ``found``/``total`` counts.
        """
        validate_proposal_address(proposal_address)
        chain = get_chain_config(chain_id)

        ctx = self._context(chain.chain_id, rpc_url)
        logger.info("[POOLS] %s on %s", proposal_address, chain.name)

        tokens = ProposalModel(ctx).get_proposal_tokens(proposal_address)
        entries = PoolModel(ctx).scan_all_pools(tokens)

        token_model = TokenModel(ctx)
        company_info, currency_info = fan_out(
            lambda: token_model.get_token_info(tokens.company_token),
            lambda: token_model.get_token_info(tokens.currency_token),
        )

        return {
            "proposalAddress": proposal_address,
            "chainId": chain.chain_id,
            "chain": chain.name,
            "marketName": tokens.market_name,
            "tokens": self._token_section(tokens, company_info, currency_info),
            "pools": [entry.as_dict() for entry in entries],
            "found": sum(1 for entry in entries if entry.exists),
            "total": len(entries),
        }
