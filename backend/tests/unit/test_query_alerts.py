"""
Unit tests for slow-query alert parameter masking.
"""

from kiliniks.core.db import mask_params


def test_sensitive_keys_are_masked():
    masked = mask_params({"patient_name": "Ana", "password": "x", "name": "Triage"})

    assert masked == {"patient_name": "***", "password": "***", "name": "Triage"}


def test_nested_sequences_are_walked():
    masked = mask_params([{"secret_token": "abc"}, ("a", b"\x00")])

    assert masked == [{"secret_token": "***"}, ["a", "<binary>"]]


def test_long_values_are_truncated():
    masked = mask_params("x" * 500)

    assert masked.endswith("...")
    assert len(masked) == 203
