def test_import_coltwi_package() -> None:
    import importlib

    module = importlib.import_module("coltwi")
    assert module.__version__


def test_import_cli_app_no_side_effects() -> None:
    from coltwi.presentation.cli import app

    assert callable(app.main)
