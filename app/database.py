"""Database configuration and initialization."""
from sqlalchemy import create_engine, BigInteger, Integer
from sqlalchemy.orm import scoped_session, sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# Create SQLAlchemy base
Base = declarative_base()

# BIGINT primary keys only autoincrement on SQLite when declared as INTEGER
IdType = BigInteger().with_variant(Integer, 'sqlite')

# Global session and engine
engine = None
db_session = scoped_session(sessionmaker(autocommit=False, autoflush=False))


def _engine_options(app):
    database_uri = app.config['SQLALCHEMY_DATABASE_URI']
    options = {'echo': app.config.get('SQLALCHEMY_ECHO', False)}

    if database_uri.startswith('sqlite'):
        # In-memory databases must share a single connection across the app
        options['connect_args'] = {'check_same_thread': False}
        if database_uri in ('sqlite://', 'sqlite:///:memory:'):
            options['poolclass'] = StaticPool
    else:
        options.update(
            pool_pre_ping=True,  # Enable connection health checks
            pool_size=10,
            max_overflow=20
        )
    return options


def init_db(app):
    """Initialize database connection."""
    global engine

    engine = create_engine(app.config['SQLALCHEMY_DATABASE_URI'], **_engine_options(app))

    db_session.remove()
    db_session.configure(bind=engine)

    Base.query = db_session.query_property()

    if app.config.get('AUTO_CREATE_TABLES'):
        create_tables()

    # Register teardown
    @app.teardown_appcontext
    def shutdown_session(exception=None):
        """Close database session and rollback on error."""
        if exception:
            db_session.rollback()
        db_session.remove()


def create_tables():
    """Create all tables known to the models package."""
    import app.models  # noqa: F401  (registers mappers on Base)
    Base.metadata.create_all(bind=engine)


def drop_tables():
    """Drop all tables known to the models package."""
    import app.models  # noqa: F401
    Base.metadata.drop_all(bind=engine)


def get_session():
    """Get database session."""
    return db_session


# Alias for easier imports
db = db_session
