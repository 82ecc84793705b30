"""
Test suite for Shelf Compliance Prep.

Run all tests: pytest
Run with coverage: pytest --cov=. --cov-report=html
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_draft_service.py -v
"""
