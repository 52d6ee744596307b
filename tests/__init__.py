"""Makes `tests` a package so modules can share helpers from `tests.conftest`."""
