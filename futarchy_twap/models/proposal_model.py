# futarchy_twap/models/proposal_model.py
import logging
from dataclasses import dataclass

from futarchy_twap.config.abis import PROPOSAL_ABI
from futarchy_twap.utils.best_effort import try_read
from futarchy_twap.utils.concurrency import fan_out
from futarchy_twap.utils.decoding import decode_address, decode_wrapped_outcome

logger = logging.getLogger(__name__)

UNKNOWN_MARKET_NAME = "Unknown"

# wrappedOutcome() indices on the proposal contract
YES_COMPANY_INDEX = 0
NO_COMPANY_INDEX = 1
YES_CURRENCY_INDEX = 2
NO_CURRENCY_INDEX = 3


@dataclass(frozen=True, slots=True)
class ProposalTokens:
    yes_company: str
    no_company: str
    yes_currency: str
    no_currency: str
    company_token: str     # collateralToken1
    currency_token: str    # collateralToken2
    market_name: str = UNKNOWN_MARKET_NAME

    def conditional_tokens(self) -> dict:
        return {
            "yesCompany": self.yes_company,
            "noCompany": self.no_company,
            "yesCurrency": self.yes_currency,
            "noCurrency": self.no_currency,
        }


class ProposalModel:
    """Reads the outcome and collateral tokens of a futarchy proposal contract."""

    def __init__(self, ctx):
        self.ctx = ctx

    def get_proposal_tokens(self, proposal_address: str) -> ProposalTokens:
        """
        Resolve the four wrapped outcome tokens and both collateral tokens.

        All seven reads are issued together. The six token reads are
        mandatory and any failure propagates; ``marketName()`` is
        best-effort and falls back to ``"Unknown"``.

        Args:
            proposal_address: Proposal contract address.

        Returns:
            ProposalTokens for the proposal.
        """
        proposal = self.ctx.contract(proposal_address, PROPOSAL_ABI)
        fns = proposal.functions

        logger.info("📦 Reading wrappedOutcome tokens from %s...", proposal_address)
        wo0, wo1, wo2, wo3, company_raw, currency_raw, market_name = fan_out(
            lambda: fns.wrappedOutcome(YES_COMPANY_INDEX).call(),
            lambda: fns.wrappedOutcome(NO_COMPANY_INDEX).call(),
            lambda: fns.wrappedOutcome(YES_CURRENCY_INDEX).call(),
            lambda: fns.wrappedOutcome(NO_CURRENCY_INDEX).call(),
            lambda: fns.collateralToken1().call(),
            lambda: fns.collateralToken2().call(),
            lambda: try_read(lambda: fns.marketName().call(), "marketName()"),
        )

        return ProposalTokens(
            yes_company=decode_wrapped_outcome(wo0, YES_COMPANY_INDEX),
            no_company=decode_wrapped_outcome(wo1, NO_COMPANY_INDEX),
            yes_currency=decode_wrapped_outcome(wo2, YES_CURRENCY_INDEX),
            no_currency=decode_wrapped_outcome(wo3, NO_CURRENCY_INDEX),
            company_token=decode_address(company_raw, "collateralToken1"),
            currency_token=decode_address(currency_raw, "collateralToken2"),
            market_name=market_name.or_default(UNKNOWN_MARKET_NAME),
        )
