import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13"]

DOMAIN_TESTS = ["tests/ordering/domain/", "tests/ordering/bdd/"]
SERVICE_TESTS = ["tests/ordering/application/", "tests/ordering/integration/"]


def _install(session: nox.Session) -> None:
    session.run("poetry", "install", "--with", "test", external=True)


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Whole suite on the in-memory provider."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Aggregate rules and BDD scenarios only."""
    _install(session)
    session.run("pytest", *DOMAIN_TESTS)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_sqlite(session: nox.Session) -> None:
    """Service-level tests against a SQLite file (the ``sqlite`` overlay)."""
    _install(session)
    session.run("pytest", "--env", "sqlite", *SERVICE_TESTS)


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_postgres(session: nox.Session) -> None:
    """Service-level tests against PostgreSQL; needs DATABASE_URL."""
    _install(session)
    session.run("pytest", "--env", "production", *SERVICE_TESTS, env={"LOG_LEVEL": "WARNING"})
