import pytest

from lox import run_program


@pytest.fixture
def run_lox(capsys):
    """Run Lox source; return (stdout lines, [(line, message), ...] runtime errors)."""
    def _run(source: str):
        errors = []
        run_program(source, on_error=lambda token, message: errors.append((token.line, message)))
        out = capsys.readouterr().out
        return out.splitlines(), errors

    return _run
