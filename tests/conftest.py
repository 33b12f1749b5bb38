import pytest


def _parser_fixture(language: str):
    def _parse(source: str):
        from treehugger import TreeHugger

        return TreeHugger(source, language)

    return _parse


@pytest.fixture
def js():
    """Parse JavaScript source."""
    return _parser_fixture("javascript")


@pytest.fixture
def ts():
    """Parse TypeScript source."""
    return _parser_fixture("typescript")


@pytest.fixture
def tsx():
    """Parse TSX source (JSX + TypeScript)."""
    return _parser_fixture("tsx")
