import argparse
import logging

from web3.exceptions import Web3Exception

from .view import View
from ..controllers.twap_controller import TwapController
from ..exceptions import FutarchyTwapError

logger = logging.getLogger(__name__)

EXAMPLES = """
Chains:
  100   Gnosis (Algebra / Swapr)
  1     Ethereum (Uniswap V3)

Examples:
  futarchy-twap twap 100 0x45e1064348fd8a407d6d1f59fc64b05f633b28fc
  futarchy-twap twap 100 0x45e1064348fd8a407d6d1f59fc64b05f633b28fc --endTimestamp 1738886400 --days 5
  futarchy-twap pools 100 0x45e1064348fd8a407d6d1f59fc64b05f633b28fc
  futarchy-twap twap 1 0xABC... --rpc https://my-custom-rpc.com
"""


class Router:
    """Parses CLI arguments and dispatches commands to the controller."""

    def __init__(self, controller: TwapController, view: View = None):
        self.controller = controller
        self.view = view or View()
        self.parser = self._create_parser()

    def _create_parser(self):
        parser = argparse.ArgumentParser(
            prog="futarchy-twap",
            description="Futarchy TWAP - On-Chain TWAP Calculator",
            epilog=EXAMPLES,
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )
        parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose (debug) logging')

        subparsers = parser.add_subparsers(dest='command', help='Command to run', required=True)

        # --- TWAP Command ---
        twap_parser = subparsers.add_parser('twap', help='Calculate TWAP for a proposal')
        twap_parser.add_argument('chain_id', help='Chain id (100 or 1)')
        twap_parser.add_argument('proposal_address', help='Proposal contract address')
        twap_parser.add_argument('--endTimestamp', dest='end_timestamp', type=int,
                                 help='Unix timestamp for TWAP window end (default: now)')
        twap_parser.add_argument('--days', type=float, help='TWAP window in days (default: 5)')
        twap_parser.add_argument('--rpc', type=str, help='Override the default RPC URL for the chain')

        # --- Pools Command ---
        pools_parser = subparsers.add_parser('pools', help='Discover all 6 pools for a proposal')
        pools_parser.add_argument('chain_id', help='Chain id (100 or 1)')
        pools_parser.add_argument('proposal_address', help='Proposal contract address')
        pools_parser.add_argument('--rpc', type=str, help='Override the default RPC URL for the chain')

        return parser

    def dispatch(self, argv=None) -> int:
        """Parses ``argv`` and runs the command. Returns the process exit code."""
        args = self.parser.parse_args(argv)

        try:
            if args.command == 'twap':
                days = args.days
                if days is not None and days.is_integer():
                    days = int(days)
                result = self.controller.calculate_twap(
                    args.proposal_address,
                    args.chain_id,
                    end_timestamp=args.end_timestamp,
                    days=days,
                    rpc_url=args.rpc,
                )
            elif args.command == 'pools':
                result = self.controller.discover_pools(args.proposal_address, args.chain_id, rpc_url=args.rpc)
            else:
                self.view.display_error(f"Unknown command: {args.command}")
                self.parser.print_help()
                return 1
        except FutarchyTwapError as e:
            self.view.display_error(str(e))
            return 1
        except (Web3Exception, ValueError, OSError) as e:
            logger.debug("RPC failure", exc_info=True)
            self.view.display_error(str(e))
            return 1

        self.view.display_result(result)
        return 0
