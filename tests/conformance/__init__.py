"""
Conformance Test Suite

This suite defines the NORMATIVE behavior of the requirement engine.
Any compliant implementation MUST pass these tests.

The tests are organized by invariant:
1. test_token_codec.py - Token id encode/decode bijection
2. test_partitioning.py - Group contiguity after partitioning
3. test_ladder_properties.py - Conservation, no netting, whole-call failure

These tests use hypothesis for property-based testing.
"""
