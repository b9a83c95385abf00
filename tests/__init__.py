"""FHIRSTARTER test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- contract/     : Shared behavior/invariants every implementation of a port must keep.
- integration/  : Bootstrap wiring real adapters and service-layer components together.
- functional/   : User-visible CLI flows (help, version, links).
- e2e/          : The ``fhirstarter`` CLI driven through Click's runner.
- fixtures/     : Shared fakes and factories, loaded as pytest plugins (no tests here).

General guidance
- Keep unit fast and deterministic; prefer the fakes in ``tests.fixtures`` over mocks.
- Contract tests parametrize implementations to ensure consistent behavior.
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
"""
