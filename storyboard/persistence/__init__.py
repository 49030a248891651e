"""Persistence gateways and save scheduling for the project store."""
from storyboard.persistence.gateway import InMemoryGateway, PersistenceGateway
from storyboard.persistence.saver import SaveScheduler
from storyboard.persistence.sql_gateway import SqlAlchemyGateway

__all__ = [
    "InMemoryGateway",
    "PersistenceGateway",
    "SaveScheduler",
    "SqlAlchemyGateway",
]
