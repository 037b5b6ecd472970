from .location import Location
from .code import Code, CodeType, CodeStatus
from .asset import Asset, AssetType, AssetStatus
from .printer_model import PrinterModel, Consumable, Compatibility
from .inventory import StockLedger, ItemType
from .action import Action, ActionFailure, ActionType, ActionStatus

__all__ = [n for n in dir() if n[:1].isupper()]
