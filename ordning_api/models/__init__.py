from sqlalchemy.orm import declarative_base

Base = declarative_base()

from .location import Location
from .item import Item
