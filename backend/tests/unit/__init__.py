"""
Unit tests package.

Services, publishers, DTO parsing, configuration and logging, tested
without a database or HTTP server.
"""
