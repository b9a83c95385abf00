"""Global pytest fixtures for FHIRSTARTER."""

pytest_plugins = [
    "tests.fixtures.providers",
    "tests.fixtures.servers",
]
