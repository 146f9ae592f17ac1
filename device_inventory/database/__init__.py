from .database import Base, Database, get_db
