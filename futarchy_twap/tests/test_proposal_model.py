import pytest
from eth_utils import to_checksum_address
from web3.exceptions import ContractLogicError

from futarchy_twap.config import get_chain_config
from futarchy_twap.exceptions import OracleResponseError
from futarchy_twap.models import ChainContext, ProposalModel, TokenModel
from futarchy_twap.tests.conftest import (
    COMPANY,
    CURRENCY,
    NO_COMPANY,
    NO_CURRENCY,
    PROPOSAL,
    YES_COMPANY,
    YES_CURRENCY,
    FakeWeb3,
)


@pytest.fixture
def ctx(chain):
    return ChainContext(w3=FakeWeb3(chain), chain=get_chain_config(100))


class TestProposalModel:
    def test_resolves_outcome_and_collateral_tokens(self, chain, ctx):
        chain.add_proposal(market_name="Will GIP-120 pass?")

        tokens = ProposalModel(ctx).get_proposal_tokens(PROPOSAL)

        assert tokens.yes_company == to_checksum_address(YES_COMPANY)
        assert tokens.no_company == to_checksum_address(NO_COMPANY)
        assert tokens.yes_currency == to_checksum_address(YES_CURRENCY)
        assert tokens.no_currency == to_checksum_address(NO_CURRENCY)
        assert tokens.company_token == to_checksum_address(COMPANY)
        assert tokens.currency_token == to_checksum_address(CURRENCY)
        assert tokens.market_name == "Will GIP-120 pass?"
        assert sorted(c[2] for c in chain.calls_to("wrappedOutcome")) == [(0,), (1,), (2,), (3,)]

    def test_market_name_failure_uses_placeholder(self, chain, ctx):
        chain.add_proposal(market_name=None)
        chain.on(PROPOSAL, "marketName", ContractLogicError("execution reverted"))

        tokens = ProposalModel(ctx).get_proposal_tokens(PROPOSAL)

        assert tokens.market_name == "Unknown"
        assert tokens.yes_company == to_checksum_address(YES_COMPANY)

    def test_mandatory_read_failure_propagates(self, chain, ctx):
        chain.add_proposal()
        chain.on(PROPOSAL, "collateralToken2", ContractLogicError("execution reverted"))

        with pytest.raises(ContractLogicError):
            ProposalModel(ctx).get_proposal_tokens(PROPOSAL)

    def test_malformed_wrapped_outcome_fails_loudly(self, chain, ctx):
        chain.add_proposal()
        chain.on(PROPOSAL, "wrappedOutcome", lambda index: YES_COMPANY)

        with pytest.raises(OracleResponseError):
            ProposalModel(ctx).get_proposal_tokens(PROPOSAL)

    def test_conditional_tokens_dict(self, chain, ctx):
        chain.add_proposal()
        tokens = ProposalModel(ctx).get_proposal_tokens(PROPOSAL)
        assert list(tokens.conditional_tokens()) == ["yesCompany", "noCompany", "yesCurrency", "noCurrency"]


class TestTokenModel:
    def test_reads_symbol_and_decimals(self, chain, ctx):
        chain.on(COMPANY, "symbol", "GNO").on(COMPANY, "decimals", 18)

        info = TokenModel(ctx).get_token_info(COMPANY)

        assert info.as_dict() == {"address": COMPANY, "symbol": "GNO", "decimals": 18}

    def test_failures_fall_back_independently(self, chain, ctx):
        chain.on(CURRENCY, "symbol", ContractLogicError("no symbol"))
        chain.on(CURRENCY, "decimals", 6)

        info = TokenModel(ctx).get_token_info(CURRENCY)

        assert info.symbol == "UNKNOWN"
        assert info.decimals == 6

    def test_missing_contract_gets_both_defaults(self, ctx):
        info = TokenModel(ctx).get_token_info(CURRENCY)
        assert (info.symbol, info.decimals) == ("UNKNOWN", 18)
