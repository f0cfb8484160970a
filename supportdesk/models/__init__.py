from .agent import Agent
from .ticket import Ticket

__all__ = ["Agent", "Ticket"]
