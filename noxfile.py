import nox

PYTHON_VERSIONS = ["3.11", "3.12", "3.13", "3.14"]


def _install(session: nox.Session) -> None:
    """Install the project with the test extra into the nox virtualenv."""
    session.run(
        "poetry",
        "install",
        "--all-extras",
        external=True,
    )


@nox.session(python=PYTHON_VERSIONS)
def tests(session: nox.Session) -> None:
    """Run full test suite across Python versions."""
    _install(session)
    session.run("pytest", *session.posargs)


@nox.session(python=PYTHON_VERSIONS)
def tests_domain(session: nox.Session) -> None:
    """Run domain-layer tests only (no web app or client involved)."""
    _install(session)
    session.run(
        "pytest",
        "tests/identity/domain/",
        "tests/catalogue/domain/",
        "tests/ordering/domain/",
        "tests/payments/domain/",
    )


@nox.session(python=PYTHON_VERSIONS[-1])
def tests_client(session: nox.Session) -> None:
    """Run the storefront client tests against the in-process API."""
    _install(session)
    session.run("pytest", "tests/client/", *session.posargs)


@nox.session(python=PYTHON_VERSIONS[-1])
def features(session: nox.Session) -> None:
    """Run the behaviour scenarios only."""
    _install(session)
    session.run("pytest", "-m", "bdd")
