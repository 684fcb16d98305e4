"""
Test cases for the DGSEM flux and limiter core.

Run tests with pytest:
    pytest dgsem/tests/ -v

Or run individual test files:
    pytest dgsem/tests/test_flux.py -v
    pytest dgsem/tests/test_limiters.py -v
"""
