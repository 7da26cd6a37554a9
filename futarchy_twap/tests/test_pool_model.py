import pytest
from eth_utils import to_checksum_address
from web3.exceptions import ContractLogicError

from futarchy_twap.config import ZERO_ADDRESS, get_chain_config
from futarchy_twap.models import ChainContext, PoolModel, ProposalModel
from futarchy_twap.models.pool_model import POOL_SCAN_PAIRS
from futarchy_twap.tests.conftest import (
    CURRENCY,
    GNOSIS_FACTORY,
    NO_COMPANY,
    NO_CURRENCY,
    NO_POOL,
    PROPOSAL,
    UNISWAP_FACTORY,
    YES_COMPANY,
    YES_CURRENCY,
    YES_POOL,
    FakeWeb3,
)

OTHER_POOL = "0x3000000000000000000000000000000000000009"


def model_for(chain, chain_id):
    return PoolModel(ChainContext(w3=FakeWeb3(chain), chain=get_chain_config(chain_id)))


class TestAlgebraLocator:
    def test_finds_pool_in_given_order(self, chain):
        chain.add_algebra_pools({(YES_COMPANY, YES_CURRENCY): YES_POOL})

        pool = model_for(chain, 100).find_pool(YES_COMPANY, YES_CURRENCY)

        assert pool == to_checksum_address(YES_POOL)
        assert len(chain.calls_to("poolByPair")) == 1

    def test_retries_with_swapped_arguments(self, chain):
        chain.add_algebra_pools({(YES_CURRENCY, YES_COMPANY): YES_POOL})

        pool = model_for(chain, 100).find_pool(YES_COMPANY, YES_CURRENCY)

        assert pool == to_checksum_address(YES_POOL)
        first, second = [c[2] for c in chain.calls_to("poolByPair")]
        assert first == tuple(reversed(second))

    def test_none_when_both_orderings_are_zero(self, chain):
        chain.add_algebra_pools({})
        assert model_for(chain, 100).find_pool(YES_COMPANY, YES_CURRENCY) is None
        assert len(chain.calls_to("poolByPair")) == 2

    def test_read_failure_then_success(self, chain):
        def flaky(a, b):
            if a.lower() == YES_COMPANY:
                raise ContractLogicError("execution reverted")
            return YES_POOL

        chain.on(GNOSIS_FACTORY, "poolByPair", flaky)
        assert model_for(chain, 100).find_pool(YES_COMPANY, YES_CURRENCY) == to_checksum_address(YES_POOL)

    def test_read_failures_both_times_mean_not_found(self, chain):
        chain.on(GNOSIS_FACTORY, "poolByPair", ContractLogicError("execution reverted"))
        assert model_for(chain, 100).find_pool(YES_COMPANY, YES_CURRENCY) is None

    def test_malformed_token_address_raises(self, chain):
        chain.add_algebra_pools({})
        with pytest.raises(ValueError):
            model_for(chain, 100).find_pool("0x1234", YES_CURRENCY)


class TestUniswapLocator:
    def test_probes_every_fee_tier(self, chain):
        chain.add_uniswap_pools({(YES_COMPANY, YES_CURRENCY, 10000): YES_POOL})

        pool = model_for(chain, 1).find_pool(YES_COMPANY, YES_CURRENCY)

        assert pool == to_checksum_address(YES_POOL)
        assert sorted(c[2][2] for c in chain.calls_to("getPool")) == [100, 500, 3000, 10000]

    def test_earliest_configured_tier_wins(self, chain):
        chain.add_uniswap_pools({
            (YES_COMPANY, YES_CURRENCY, 100): OTHER_POOL,
            (YES_COMPANY, YES_CURRENCY, 3000): YES_POOL,
        })
        assert model_for(chain, 1).find_pool(YES_COMPANY, YES_CURRENCY) == to_checksum_address(YES_POOL)

    def test_failed_tiers_are_skipped(self, chain):
        def get_pool(a, b, fee):
            if fee == 500:
                raise ContractLogicError("execution reverted")
            return YES_POOL if fee == 100 else ZERO_ADDRESS

        chain.on(UNISWAP_FACTORY, "getPool", get_pool)
        assert model_for(chain, 1).find_pool(YES_COMPANY, YES_CURRENCY) == to_checksum_address(YES_POOL)

    def test_none_when_no_tier_has_a_pool(self, chain):
        chain.add_uniswap_pools({})
        assert model_for(chain, 1).find_pool(YES_COMPANY, YES_CURRENCY) is None


class TestConditionalDiscovery:
    def test_yes_and_no_pools(self, gnosis_chain):
        tokens = ProposalModel(model_for(gnosis_chain, 100).ctx).get_proposal_tokens(PROPOSAL)

        pools = model_for(gnosis_chain, 100).discover_conditional_pools(tokens)

        assert pools.yes.address == to_checksum_address(YES_POOL)
        assert pools.no.address == to_checksum_address(NO_POOL)
        assert pools.complete

    def test_missing_side_is_none(self, chain):
        chain.add_proposal()
        chain.add_algebra_pools({(NO_COMPANY, NO_CURRENCY): NO_POOL})
        model = model_for(chain, 100)
        tokens = ProposalModel(model.ctx).get_proposal_tokens(PROPOSAL)

        pools = model.discover_conditional_pools(tokens)

        assert pools.yes.address is None
        assert not pools.yes.exists
        assert pools.no.exists
        assert not pools.complete


class TestOrientation:
    def test_company_token0_needs_no_inversion(self, chain):
        chain.on(YES_POOL, "token0", to_checksum_address(YES_COMPANY))

        inversion = model_for(chain, 100).detect_inversion(YES_POOL, YES_COMPANY)

        assert inversion.should_invert is False
        assert inversion.token0 == to_checksum_address(YES_COMPANY)

    def test_comparison_is_case_insensitive(self, chain):
        token = "0x00000000000000000000000000000000000abcde"
        chain.on(YES_POOL, "token0", "0x00000000000000000000000000000000000ABCDE")
        assert model_for(chain, 1).detect_inversion(YES_POOL, token).should_invert is False

    def test_currency_token0_needs_inversion(self, chain):
        chain.on(NO_POOL, "token0", NO_CURRENCY)
        assert model_for(chain, 100).detect_inversion(NO_POOL, NO_COMPANY).should_invert is True

    def test_read_failure_propagates(self, chain):
        chain.on(NO_POOL, "token0", ContractLogicError("execution reverted"))
        with pytest.raises(ContractLogicError):
            model_for(chain, 100).detect_inversion(NO_POOL, NO_COMPANY)


class TestPoolScan:
    def test_six_entries_in_fixed_order(self, gnosis_chain):
        prediction_pool = "0x3000000000000000000000000000000000000003"
        gnosis_chain.add_algebra_pools({
            (YES_COMPANY, YES_CURRENCY): YES_POOL,
            (NO_CURRENCY, NO_COMPANY): NO_POOL,
            (YES_CURRENCY, CURRENCY): prediction_pool,
        })
        model = model_for(gnosis_chain, 100)
        tokens = ProposalModel(model.ctx).get_proposal_tokens(PROPOSAL)

        entries = model.scan_all_pools(tokens)

        assert [e.name for e in entries] == [name for name, *_ in POOL_SCAN_PAIRS]
        assert [e.exists for e in entries] == [True, True, False, False, True, False]
        assert [e.inverted for e in entries] == [False, True, None, None, None, None]
        assert entries[4].as_dict() == {
            "name": "YES_CURRENCY/BASE_CURRENCY (Prediction)",
            "address": to_checksum_address(prediction_pool),
            "exists": True,
            "inverted": None,
        }
