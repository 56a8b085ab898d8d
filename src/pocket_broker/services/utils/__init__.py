"""Service helpers."""
from pocket_broker.services.utils.fanout import gather_reads

__all__ = ["gather_reads"]
