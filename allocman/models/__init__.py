"""
Allocman Models.

Core models for batch allocation:
- Batch: Received stock with price, dates and remaining quantity
- ChannelStock: Quantity of a batch held by a channel
- Sale: Historical sales per batch (read for removal safety)
"""

from allocman.models.batch import Batch
from allocman.models.channel import ChannelStock
from allocman.models.enums import Channel, CommandStatus
from allocman.models.sale import Sale

__all__ = [
    'Channel',
    'CommandStatus',
    'Batch',
    'ChannelStock',
    'Sale',
]
