from .twap_controller import TwapController

__all__ = [
    "TwapController"
]
