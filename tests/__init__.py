"""
FREE LIV TV Test Suite

Test Categories:
- unit/: Fast, isolated unit tests
- integration/: Route tests against a mocked upstream
- e2e/: Full playlist-to-stream workflows
"""
