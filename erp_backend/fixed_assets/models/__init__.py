from .asset import FixedAsset

__all__ = ["FixedAsset"]
