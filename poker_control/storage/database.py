from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from poker_control.config import config

DATABASE_URL = config.database_url

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, future=True, connect_args=connect_args)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)

Base = declarative_base()
