import pytest
import spnplay as sp


@pytest.fixture(autouse=True)
def _strict_error_mode():
    sp.set_error_mode(sp.ErrorMode.STRICT)
    yield
    sp.set_error_mode(sp.ErrorMode.STRICT)
